"""Request body builders and response parsers for Platform API endpoints."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from ..core.errors import ProtocolError
from ..core.pagination import SearchPage

JsonObject = dict[str, object]


def format_at_time(at_time: datetime) -> str:
    """RFC3339 rendering; naive datetimes are treated as UTC."""

    if at_time.tzinfo is None:
        at_time = at_time.replace(tzinfo=timezone.utc)
    text = at_time.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def build_search_body(
    query: str,
    *,
    fields: Sequence[str] = (),
    page_size: int | None = None,
    page_token: str | None = None,
) -> JsonObject:
    body: JsonObject = {"query": query}
    if fields:
        body["fields"] = list(fields)
    if page_size is not None:
        body["page_size"] = page_size
    if page_token:
        body["page_token"] = page_token
    return body


def build_asset_body(
    ids_key: str,
    asset_ids: Sequence[str],
    *,
    at_time: datetime | None = None,
) -> JsonObject:
    body: JsonObject = {ids_key: list(asset_ids)}
    if at_time is not None:
        body["at_time"] = format_at_time(at_time)
    return body


def build_org_params(org_id: str | None) -> dict[str, str]:
    if org_id:
        return {"organization_id": org_id}
    return {}


def _result_of(payload: JsonObject) -> object:
    if "result" not in payload:
        raise ProtocolError("response is missing result")
    return payload["result"]


def parse_search_page(payload: JsonObject | None) -> SearchPage | None:
    """Decode one search response; a body without a result object yields None."""

    if payload is None:
        return None
    result = payload.get("result")
    if result is None:
        return None
    if not isinstance(result, dict):
        raise ProtocolError("result must be an object")

    hits = result.get("hits", [])
    if hits is None:
        hits = []
    if not isinstance(hits, list):
        raise ProtocolError("result.hits must be a list")

    total_hits = result.get("total_hits", 0)
    if total_hits is None:
        total_hits = 0
    if isinstance(total_hits, bool) or not isinstance(total_hits, (int, float)):
        raise ProtocolError("result.total_hits must be a number")

    next_cursor = result.get("next_page_token")
    if next_cursor is not None and not isinstance(next_cursor, str):
        raise ProtocolError("result.next_page_token must be a string")

    return SearchPage(
        hits=hits,
        total_hits=int(total_hits),
        next_cursor=next_cursor or None,
    )


def parse_asset_list(payload: JsonObject | None) -> list[object]:
    """Extract the asset envelope list from a lookup response."""

    if payload is None:
        return []
    result = _result_of(payload)
    if result is None:
        return []
    if not isinstance(result, list):
        raise ProtocolError("result must be a list")
    return result


__all__ = [
    "format_at_time",
    "build_search_body",
    "build_asset_body",
    "build_org_params",
    "parse_search_page",
    "parse_asset_list",
]
