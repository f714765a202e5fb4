"""Core response models."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import httpx

_SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "cookie",
        "set-cookie",
        "x-api-key",
        "x-auth-token",
        "proxy-authorization",
    }
)
_MASK = "********"


def sanitized_url(url: object) -> str | None:
    if url is None:
        return None
    parts = urlsplit(str(url))
    netloc = parts.netloc.rpartition("@")[2]
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def sanitized_headers(
    request_headers: Iterable[tuple[str, str]] = (),
    response_headers: Iterable[tuple[str, str]] = (),
) -> dict[str, str]:
    joined: dict[str, str] = {}
    for prefix, items in (("req-", request_headers), ("res-", response_headers)):
        for name, value in items:
            key = prefix + name
            joined[key] = f"{joined[key]}, {value}" if key in joined else value
    return {
        key: _MASK if key.split("-", 1)[1].lower() in _SENSITIVE_HEADERS else value
        for key, value in joined.items()
    }


@dataclass(slots=True, frozen=True)
class ResponseMeta:
    """Sanitized, application-level view of one HTTP interaction."""

    method: str | None = None
    url: str | None = None
    status: int | None = None
    latency_seconds: float = 0.0
    headers: Mapping[str, str] = field(default_factory=dict)
    page_count: int = 0
    retry_count: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def from_exchange(
        cls,
        *,
        request: httpx.Request | None,
        response: httpx.Response | None,
        latency_seconds: float = 0.0,
        attempts: int = 1,
    ) -> "ResponseMeta":
        request_headers: list[tuple[str, str]] = []
        response_headers: list[tuple[str, str]] = []
        method = url = None
        status = None
        if request is not None:
            method = request.method
            url = sanitized_url(request.url)
            request_headers = list(request.headers.multi_items())
        if response is not None:
            status = response.status_code
            response_headers = list(response.headers.multi_items())
        return cls(
            method=method,
            url=url,
            status=status,
            latency_seconds=latency_seconds,
            headers=sanitized_headers(request_headers, response_headers),
            retry_count=max(0, attempts - 1),
        )

    def finalized(self, *, latency_seconds: float, page_count: int) -> "ResponseMeta":
        return replace(self, latency_seconds=latency_seconds, page_count=page_count)

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "url": self.url,
            "status": self.status,
            "latency_seconds": self.latency_seconds,
            "headers": dict(self.headers),
            "page_count": self.page_count,
            "retry_count": self.retry_count,
        }


__all__ = [
    "ResponseMeta",
    "sanitized_url",
    "sanitized_headers",
]
