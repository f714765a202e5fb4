"""Response body decoding helpers for the transport."""

from __future__ import annotations

from typing import Protocol

from .errors import ProtocolError


class JsonPayloadResponse(Protocol):
    status_code: int

    @property
    def content(self) -> bytes: ...

    def json(self) -> object: ...


def parse_json_payload(response: JsonPayloadResponse) -> dict[str, object] | None:
    """Decode a successful response body; an empty body yields None."""

    http_status = response.status_code
    if not response.content.strip():
        return None

    try:
        payload = response.json()
    except ValueError as exc:
        raise ProtocolError(
            "response body is not valid JSON",
            http_status=http_status,
        ) from exc

    if not isinstance(payload, dict):
        raise ProtocolError(
            "response JSON root must be an object",
            http_status=http_status,
        )
    if any(not isinstance(key, str) for key in payload):
        raise ProtocolError(
            "response JSON object keys must be strings",
            http_status=http_status,
        )
    return payload


def parse_error_payload(response: JsonPayloadResponse) -> tuple[dict[str, object] | None, str]:
    """Best-effort decode of an error body, returning the payload and raw text."""

    raw = response.content.decode("utf-8", errors="replace")
    if not raw.strip():
        return None, raw
    try:
        payload = response.json()
    except ValueError:
        return None, raw
    if isinstance(payload, dict):
        return payload, raw
    return None, raw


__all__ = [
    "parse_json_payload",
    "parse_error_payload",
]
