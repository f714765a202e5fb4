from __future__ import annotations

import json

import httpx
import pytest

from cencli.config import BackoffType
from cencli.core.cancellation import CancellationToken
from cencli.core.errors import (
    ApiGenericError,
    ApiStructuredError,
    ApiUnauthorizedError,
    DeadlineExceededError,
    OperationInterruptedError,
    ProtocolError,
    TransportError,
)
from cencli.core.transport import SyncTransport, build_default_headers
from tests.shared.transport import SequencedHandler, build_config, build_http_client


def _transport(handler, clock, **config_kwargs) -> SyncTransport:
    config = build_config(**config_kwargs)
    return SyncTransport(
        config,
        client=build_http_client(config, handler),
        sleeper=clock.sleep,
        clock=clock,
    )


def test_request_posts_json_and_returns_payload(clock):
    handler = SequencedHandler([httpx.Response(200, json={"result": {"hits": []}})])
    transport = _transport(handler, clock)

    response = transport.request(
        "POST",
        "/v3/global/search/query",
        params={"organization_id": "org-1"},
        json={"query": "q"},
    )

    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v3/global/search/query"
    assert request.url.params["organization_id"] == "org-1"
    assert json.loads(request.content) == {"query": "q"}
    assert request.headers["authorization"] == "Bearer test-token"
    assert response.payload == {"result": {"hits": []}}
    assert response.attempts == 1
    assert response.meta.status == 200
    assert response.meta.retry_count == 0
    assert response.meta.headers["req-authorization"] == "********"


def test_request_retries_transient_status_then_succeeds(clock):
    handler = SequencedHandler(
        [
            httpx.Response(503, text="unavailable"),
            httpx.Response(429, text="slow down"),
            httpx.Response(200, json={"result": {}}),
        ]
    )
    transport = _transport(handler, clock, max_attempts=3, backoff=BackoffType.LINEAR)

    response = transport.request("POST", "/v3/global/search/query", json={})

    assert handler.calls == 3
    assert clock.sleeps == [pytest.approx(0.5), pytest.approx(1.0)]
    assert response.attempts == 3
    assert response.meta.retry_count == 2


def test_request_gives_up_after_max_attempts(clock):
    handler = SequencedHandler([httpx.Response(500, text="boom"), httpx.Response(500, text="boom")])
    transport = _transport(handler, clock, max_attempts=2)

    with pytest.raises(ApiGenericError) as exc_info:
        transport.request("POST", "/v3/global/search/query", json={})

    assert handler.calls == 2
    assert exc_info.value.http_status == 500
    assert exc_info.value.cause == "server_transient"


def test_request_does_not_retry_client_errors(clock):
    handler = SequencedHandler(
        [httpx.Response(400, json={"title": "Bad Request", "detail": "invalid query", "status": 400})]
    )
    transport = _transport(handler, clock)

    with pytest.raises(ApiStructuredError):
        transport.request("POST", "/v3/global/search/query", json={})

    assert handler.calls == 1
    assert clock.sleeps == []


def test_request_maps_unauthorized(clock):
    handler = SequencedHandler(
        [httpx.Response(401, json={"error": {"code": 401, "status": "UNAUTHENTICATED", "message": "no"}})]
    )
    transport = _transport(handler, clock)

    with pytest.raises(ApiUnauthorizedError):
        transport.request("POST", "/v3/global/search/query", json={})


def test_network_error_is_retried_then_raised(clock):
    handler = SequencedHandler([httpx.ConnectError("refused"), httpx.ConnectError("refused")])
    transport = _transport(handler, clock, max_attempts=2)

    with pytest.raises(TransportError) as exc_info:
        transport.request("POST", "/v3/global/search/query", json={})

    assert handler.calls == 2
    assert exc_info.value.cause == "network"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_invalid_json_body_is_protocol_error(clock):
    handler = SequencedHandler([httpx.Response(200, text="not json")])
    transport = _transport(handler, clock)

    with pytest.raises(ProtocolError):
        transport.request("POST", "/v3/global/search/query", json={})


def test_empty_success_body_yields_no_payload(clock):
    handler = SequencedHandler([httpx.Response(200, content=b"")])
    transport = _transport(handler, clock)

    response = transport.request("POST", "/v3/global/search/query", json={})

    assert response.payload is None


def test_cancelled_token_stops_before_request(clock):
    handler = SequencedHandler([])
    transport = _transport(handler, clock)
    token = CancellationToken()
    token.cancel()

    with pytest.raises(OperationInterruptedError):
        transport.request("POST", "/v3/global/search/query", json={}, cancellation=token)

    assert handler.calls == 0


def test_backoff_is_capped_by_remaining_deadline(clock):
    handler = SequencedHandler([httpx.Response(503, text="busy"), httpx.Response(200, json={})])
    transport = _transport(handler, clock, max_attempts=2, base_delay_seconds=10.0)
    token = CancellationToken.with_timeout(20.0, clock=clock)
    clock.advance(18.0)

    with pytest.raises(DeadlineExceededError):
        transport.request("POST", "/v3/global/search/query", json={}, cancellation=token)

    assert clock.sleeps == [pytest.approx(2.0)]
    assert handler.calls == 1


def test_closed_transport_rejects_requests(clock):
    transport = _transport(SequencedHandler([]), clock)
    transport.close()
    transport.close()

    with pytest.raises(TransportError, match="already closed"):
        transport.request("POST", "/v3/global/search/query", json={})


def test_default_headers_omit_authorization_without_token():
    headers = build_default_headers(build_config(api_token=None))

    assert "Authorization" not in headers
    assert headers["Accept"] == "application/json"
    assert headers["User-Agent"] == "cencli-python/0.1.0"
