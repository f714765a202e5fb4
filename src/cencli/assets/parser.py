"""Parsers from API payload records into typed assets."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..core.errors import ProtocolError
from .models import Asset, Certificate, Host, WebProperty

logger = logging.getLogger("cencli")

JsonObject = Mapping[str, Any]


def _resource_of(envelope: object, *, key: str) -> JsonObject:
    if not isinstance(envelope, Mapping):
        raise ProtocolError(f"{key} must be an object")
    resource = envelope.get("resource", {})
    if resource is None:
        return {}
    if not isinstance(resource, Mapping):
        raise ProtocolError(f"{key}.resource must be an object")
    return resource


def _hit_envelope(hit: JsonObject, key: str) -> tuple[JsonObject, JsonObject] | None:
    # Shape mismatches mean "not this variant", never an error.
    envelope = hit.get(key)
    if not isinstance(envelope, Mapping):
        return None
    resource = envelope.get("resource")
    if resource is None:
        resource = {}
    if not isinstance(resource, Mapping):
        return None
    return envelope, resource


def _certificate_hit(hit: JsonObject) -> Asset | None:
    found = _hit_envelope(hit, "certificate_v1")
    if found is None:
        return None
    return Certificate(resource=found[1])


def _host_hit(hit: JsonObject) -> Asset | None:
    found = _hit_envelope(hit, "host_v1")
    if found is None:
        return None
    envelope, resource = found
    matched = envelope.get("matched_services") or []
    if not isinstance(matched, list):
        return None
    return Host(
        resource=resource,
        matched_services=[service for service in matched if isinstance(service, Mapping)],
    )


def _web_property_hit(hit: JsonObject) -> Asset | None:
    found = _hit_envelope(hit, "webproperty_v1")
    if found is None:
        return None
    return WebProperty(resource=found[1])


_HIT_EXTRACTORS: tuple[Callable[[JsonObject], Asset | None], ...] = (
    _certificate_hit,
    _host_hit,
    _web_property_hit,
)


def parse_hit(hit: object) -> Asset | None:
    """Classify one search hit; records matching no known variant shape yield None."""

    if not isinstance(hit, Mapping):
        return None
    for extract in _HIT_EXTRACTORS:
        asset = extract(hit)
        if asset is not None:
            return asset
    return None


def parse_hits(hits: Iterable[object]) -> list[Asset]:
    parsed: list[Asset] = []
    dropped = 0
    for hit in hits:
        asset = parse_hit(hit)
        if asset is None:
            dropped += 1
            continue
        parsed.append(asset)
    if dropped:
        logger.warning("dropped unrecognized search hits count=%s", dropped)
    return parsed


def _resources(items: Iterable[object], *, kind: str) -> list[JsonObject]:
    return [_resource_of(item, key=kind) for item in items]


def parse_hosts(items: Iterable[object]) -> list[Host]:
    return [Host(resource=resource) for resource in _resources(items, kind="host")]


def parse_certificates(items: Iterable[object]) -> list[Certificate]:
    return [Certificate(resource=resource) for resource in _resources(items, kind="certificate")]


def parse_web_properties(items: Iterable[object]) -> list[WebProperty]:
    return [WebProperty(resource=resource) for resource in _resources(items, kind="webproperty")]


__all__ = [
    "parse_hit",
    "parse_hits",
    "parse_hosts",
    "parse_certificates",
    "parse_web_properties",
]
