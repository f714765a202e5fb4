"""HTTP transport with retry, cancellation polling, and status evaluation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from ..config import CencliConfig
from .cancellation import CancellationToken, never_cancelled
from .errors import (
    CencliError,
    ProtocolError,
    TransportError,
    classify_cancellation,
    classify_http_error,
)
from .models import ResponseMeta
from .response_parsing import parse_error_payload, parse_json_payload
from .retry import calculate_retry_delay, can_retry, is_retryable_http_status

logger = logging.getLogger("cencli")


class TransportClient(Protocol):
    def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response: ...

    def close(self) -> None: ...


@dataclass(slots=True, frozen=True)
class TransportResponse:
    payload: dict[str, object] | None
    meta: ResponseMeta
    attempts: int


def build_default_headers(config: CencliConfig) -> dict[str, str]:
    headers = {
        "Accept": "application/json",
        "User-Agent": config.user_agent,
    }
    if config.api_token:
        headers["Authorization"] = f"Bearer {config.api_token}"
    return headers


def build_default_timeout(config: CencliConfig) -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.transport.timeout_connect_seconds,
        read=config.transport.timeout_read_seconds,
        write=config.transport.timeout_write_seconds,
        pool=config.transport.timeout_pool_seconds,
    )


class SyncTransport:
    """Synchronous transport for the Censys Platform API."""

    def __init__(
        self,
        config: CencliConfig,
        *,
        client: TransportClient | None = None,
        sleeper: Callable[[float], None] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._config = config
        self._sleep = sleeper or time.sleep
        self._clock = clock or time.monotonic
        self._closed = False

        self._owns_client = client is None
        normalized_base_url = config.base_url.rstrip("/") + "/"
        self._client = client or httpx.Client(
            base_url=normalized_base_url,
            headers=build_default_headers(config),
            timeout=build_default_timeout(config),
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            self._client.close()

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
        cancellation: CancellationToken | None = None,
    ) -> TransportResponse:
        if self._closed:
            raise TransportError("transport is already closed")

        token = cancellation or never_cancelled()
        started_at = self._clock()
        attempt = 0
        normalized_endpoint = self._normalize_endpoint(endpoint)

        while True:
            attempt += 1
            if token.triggered:
                raise classify_cancellation(token)
            logger.debug("request start method=%s endpoint=%s attempt=%s", method, normalized_endpoint, attempt)

            try:
                response = self._client.request(
                    method,
                    normalized_endpoint,
                    params=dict(params) if params else None,
                    json=json,
                )
            except httpx.HTTPError as exc:
                if self._should_retry(attempt):
                    logger.warning(
                        "request network error; retrying endpoint=%s attempt=%s error=%s",
                        normalized_endpoint,
                        attempt,
                        exc.__class__.__name__,
                    )
                    self._backoff(attempt, token)
                    continue
                logger.error(
                    "request network error; giving up endpoint=%s attempt=%s error=%s",
                    normalized_endpoint,
                    attempt,
                    exc.__class__.__name__,
                )
                raise TransportError(
                    f"network/transport error: {exc}",
                    cause="network",
                ) from exc

            http_status = response.status_code
            logger.debug(
                "response received endpoint=%s attempt=%s http_status=%s",
                normalized_endpoint,
                attempt,
                http_status,
            )

            if 200 <= http_status < 300:
                try:
                    payload = parse_json_payload(response)
                except ProtocolError:
                    logger.error(
                        "response parse error endpoint=%s attempt=%s http_status=%s",
                        normalized_endpoint,
                        attempt,
                        http_status,
                    )
                    raise
                logger.info("request success endpoint=%s attempt=%s", normalized_endpoint, attempt)
                return TransportResponse(
                    payload=payload,
                    meta=ResponseMeta.from_exchange(
                        request=_request_of(response),
                        response=response,
                        latency_seconds=self._clock() - started_at,
                        attempts=attempt,
                    ),
                    attempts=attempt,
                )

            error_payload, body_text = parse_error_payload(response)
            mapped_error = classify_http_error(
                error_payload,
                http_status=http_status,
                body_text=body_text,
            ) or CencliError("unexpected response", http_status=http_status)

            if is_retryable_http_status(http_status) and self._should_retry(attempt):
                logger.warning(
                    "request transient failure; retrying endpoint=%s attempt=%s http_status=%s",
                    normalized_endpoint,
                    attempt,
                    http_status,
                )
                self._backoff(attempt, token)
                continue

            logger.error(
                "request failed endpoint=%s attempt=%s http_status=%s",
                normalized_endpoint,
                attempt,
                http_status,
            )
            raise mapped_error

    def _should_retry(self, attempt: int) -> bool:
        return can_retry(attempt=attempt, max_attempts=self._config.retry.max_attempts)

    def _backoff(self, attempt: int, token: CancellationToken) -> None:
        delay = calculate_retry_delay(
            base_delay_seconds=self._config.retry.base_delay_seconds,
            max_delay_seconds=self._config.retry.max_delay_seconds,
            backoff=self._config.retry.backoff,
            attempt=attempt,
        )
        remaining = token.remaining()
        if remaining is not None:
            delay = min(delay, remaining)
        if delay > 0:
            self._sleep(delay)

    @staticmethod
    def _normalize_endpoint(endpoint: str) -> str:
        return endpoint.lstrip("/")


def _request_of(response: httpx.Response) -> httpx.Request | None:
    try:
        return response.request
    except RuntimeError:
        return None


__all__ = [
    "TransportClient",
    "TransportResponse",
    "SyncTransport",
    "build_default_headers",
    "build_default_timeout",
]
