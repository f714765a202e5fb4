from __future__ import annotations

import httpx
import pytest

from cencli.core.errors import ProtocolError
from cencli.core.response_parsing import parse_error_payload, parse_json_payload


def test_parse_json_payload_returns_object():
    assert parse_json_payload(httpx.Response(200, json={"result": {}})) == {"result": {}}


def test_parse_json_payload_empty_body_is_none():
    assert parse_json_payload(httpx.Response(200, content=b"  ")) is None


@pytest.mark.parametrize(
    ("content", "message"),
    [
        (b"{not json", "not valid JSON"),
        (b"[1, 2]", "root must be an object"),
    ],
)
def test_parse_json_payload_rejects_bad_bodies(content, message):
    with pytest.raises(ProtocolError, match=message) as exc_info:
        parse_json_payload(httpx.Response(200, content=content))
    assert exc_info.value.http_status == 200


def test_parse_error_payload_keeps_raw_text():
    payload, raw = parse_error_payload(httpx.Response(502, text="<html>bad gateway</html>"))

    assert payload is None
    assert raw == "<html>bad gateway</html>"


def test_parse_error_payload_decodes_object():
    payload, raw = parse_error_payload(httpx.Response(400, json={"title": "Bad Request"}))

    assert payload == {"title": "Bad Request"}
    assert "Bad Request" in raw


def test_parse_error_payload_ignores_non_object_json():
    payload, _ = parse_error_payload(httpx.Response(500, json=["x"]))

    assert payload is None
