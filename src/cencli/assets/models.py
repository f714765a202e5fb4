"""Asset domain models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Union


class AssetType(str, Enum):
    UNKNOWN = "unknown"
    HOST = "host"
    CERTIFICATE = "certificate"
    WEB_PROPERTY = "webproperty"

    def __str__(self) -> str:
        return self.value


def _freeze(resource: Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(resource, MappingProxyType):
        return resource
    return MappingProxyType(dict(resource))


@dataclass(slots=True, frozen=True)
class Host:
    asset_type: ClassVar[AssetType] = AssetType.HOST

    resource: Mapping[str, Any]
    matched_services: tuple[Mapping[str, Any], ...] | list[Mapping[str, Any]] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "resource", _freeze(self.resource))
        object.__setattr__(self, "matched_services", tuple(_freeze(s) for s in self.matched_services))

    @property
    def ip(self) -> str | None:
        value = self.resource.get("ip")
        return str(value) if value is not None else None


@dataclass(slots=True, frozen=True)
class Certificate:
    asset_type: ClassVar[AssetType] = AssetType.CERTIFICATE

    resource: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "resource", _freeze(self.resource))

    @property
    def fingerprint_sha256(self) -> str | None:
        value = self.resource.get("fingerprint_sha256")
        return str(value) if value is not None else None


@dataclass(slots=True, frozen=True)
class WebProperty:
    asset_type: ClassVar[AssetType] = AssetType.WEB_PROPERTY

    resource: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "resource", _freeze(self.resource))

    @property
    def hostname(self) -> str | None:
        value = self.resource.get("hostname")
        return str(value) if value is not None else None

    @property
    def port(self) -> int | None:
        value = self.resource.get("port")
        return int(value) if isinstance(value, (int, str)) and str(value).isdigit() else None


Asset = Union[Host, Certificate, WebProperty]


__all__ = [
    "AssetType",
    "Host",
    "Certificate",
    "WebProperty",
    "Asset",
]
