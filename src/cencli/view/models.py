"""Typed results of a bulk asset lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from ..assets.models import AssetType, Certificate, Host, WebProperty
from ..core.errors import PartialError
from ..core.models import ResponseMeta


@dataclass(slots=True, frozen=True)
class HostsResult:
    asset_type: ClassVar[AssetType] = AssetType.HOST

    meta: ResponseMeta | None
    hosts: tuple[Host, ...]
    partial_error: PartialError | None = None

    @property
    def is_partial(self) -> bool:
        return self.partial_error is not None


@dataclass(slots=True, frozen=True)
class CertificatesResult:
    asset_type: ClassVar[AssetType] = AssetType.CERTIFICATE

    meta: ResponseMeta | None
    certificates: tuple[Certificate, ...]
    partial_error: PartialError | None = None

    @property
    def is_partial(self) -> bool:
        return self.partial_error is not None


@dataclass(slots=True, frozen=True)
class WebPropertiesResult:
    asset_type: ClassVar[AssetType] = AssetType.WEB_PROPERTY

    meta: ResponseMeta | None
    web_properties: tuple[WebProperty, ...]
    partial_error: PartialError | None = None

    @property
    def is_partial(self) -> bool:
        return self.partial_error is not None


ViewResult = Union[HostsResult, CertificatesResult, WebPropertiesResult]


__all__ = [
    "HostsResult",
    "CertificatesResult",
    "WebPropertiesResult",
    "ViewResult",
]
