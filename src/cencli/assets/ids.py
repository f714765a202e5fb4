"""Typed asset identifiers and classification of raw user input."""

from __future__ import annotations

import ipaddress
import re
import string
from dataclasses import dataclass

from ..core.errors import InvalidAssetIDError, MixedAssetTypesError, NoAssetsError
from .models import AssetType

DEFAULT_WEB_PROPERTY_PORT = 443

_RE_IPV4_DEFANG = re.compile(r"\[\s*\.\s*\]|\(\s*\.\s*\)|\\\.")
_RE_IPV6_DEFANG = re.compile(r"\[\s*:\s*\]|\(\s*:\s*\)|\\:")
_RE_HXXP = re.compile(r"^hxxp(s?)(\[:\]|:)//", re.IGNORECASE)
_RE_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
_HEX = frozenset(string.hexdigits)


def refang_ip(raw: str) -> str:
    """Undo common defanging of an IP address; input without defanging is returned as is."""

    refanged = _RE_IPV4_DEFANG.sub(".", raw)
    if refanged != raw:
        return refanged
    return _RE_IPV6_DEFANG.sub(":", raw)


def refang_url(raw: str) -> str:
    text = _RE_HXXP.sub(lambda m: f"http{m.group(1)}://", raw.strip())
    text = _RE_IPV4_DEFANG.sub(".", text)
    return text.replace("[:]", ":")


class InvalidIdentifier(ValueError):
    pass


@dataclass(slots=True, frozen=True)
class HostID:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, frozen=True)
class CertificateID:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, frozen=True)
class WebPropertyID:
    hostname: str
    port: int

    def __str__(self) -> str:
        return f"{self.hostname}:{self.port}"


def parse_host_id(raw: str) -> HostID:
    trimmed = refang_ip(raw).strip()
    try:
        ipaddress.ip_address(trimmed)
    except ValueError:
        raise InvalidIdentifier(f"invalid host id: {raw!r}") from None
    return HostID(trimmed)


def parse_certificate_id(raw: str) -> CertificateID:
    trimmed = raw.strip()
    if len(trimmed) != 64:
        raise InvalidIdentifier(f"invalid certificate fingerprint length: {len(trimmed)}")
    if any(ch not in _HEX for ch in trimmed):
        raise InvalidIdentifier("invalid certificate fingerprint hex")
    return CertificateID(trimmed)


def _looks_like_ip(host: str) -> bool:
    if ":" in host:
        return True
    parts = host.split(".")
    return len(parts) == 4 and all(part.isdigit() for part in parts)


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def _split_host_port(text: str, raw: str, default_port: int) -> tuple[str, str]:
    if text.startswith("["):
        end = text.find("]")
        if end < 0:
            raise InvalidIdentifier(f"invalid webproperty: {raw!r}: missing closing bracket")
        host = text[1:end]
        rest = text[end + 1 :]
        if rest == "":
            return host, str(default_port)
        if not rest.startswith(":"):
            raise InvalidIdentifier(f"invalid webproperty: {raw!r}: unexpected text after address")
        return host, rest[1:]

    if text.count(":") > 1:
        # Bare IPv6; a trailing numeric segment after "::" is ambiguous.
        if not _is_ip(text):
            raise InvalidIdentifier(f"invalid webproperty: {raw!r}: invalid IPv6 address")
        last_segment = text.rsplit(":", 1)[1]
        if "::" in text and text.count(":") >= 5 and last_segment.isdigit() and len(last_segment) <= 5:
            if 0 < int(last_segment) <= 65535:
                raise InvalidIdentifier(
                    f"invalid webproperty: {raw!r}: ambiguous IPv6 address (use brackets if port intended)"
                )
        return text, str(default_port)

    host, sep, port = text.partition(":")
    return host, port if sep else str(default_port)


def parse_web_property_id(raw: str, default_port: int = DEFAULT_WEB_PROPERTY_PORT) -> WebPropertyID:
    text = _RE_SCHEME.sub("", refang_url(raw)).strip()
    text = text.split("/", 1)[0]

    host, port_text = _split_host_port(text, raw, default_port)
    host = host.strip()
    if not host:
        raise InvalidIdentifier(f"invalid webproperty: {raw!r}: missing hostname")
    if _looks_like_ip(host):
        if not _is_ip(host):
            raise InvalidIdentifier(f"invalid webproperty: {raw!r}: invalid IP address")
    elif "." not in host:
        raise InvalidIdentifier(f"invalid webproperty: {raw!r}: invalid hostname")

    port_text = port_text.strip() or str(default_port)
    if not port_text.isdigit() or not 0 < int(port_text) <= 65535:
        raise InvalidIdentifier(f"invalid port: {port_text!r}")
    return WebPropertyID(hostname=host, port=int(port_text))


class AssetClassifier:
    """Classifies raw inputs into typed identifiers, deduplicating per type.

    First-seen order is preserved within each category.
    """

    def __init__(self, *raw_assets: str) -> None:
        self._hosts: dict[HostID, None] = {}
        self._certificates: dict[CertificateID, None] = {}
        self._web_properties: dict[WebPropertyID, None] = {}
        self._unknown: dict[str, None] = {}
        self._classify(raw_assets)

    def _classify(self, raw_assets: tuple[str, ...]) -> None:
        for raw in raw_assets:
            arg = raw.strip()
            if not arg:
                continue
            try:
                self._hosts.setdefault(parse_host_id(arg), None)
                continue
            except InvalidIdentifier:
                pass
            try:
                self._certificates.setdefault(parse_certificate_id(arg), None)
                continue
            except InvalidIdentifier:
                pass
            try:
                self._web_properties.setdefault(parse_web_property_id(arg), None)
                continue
            except InvalidIdentifier:
                pass
            self._unknown.setdefault(arg, None)

    @property
    def host_ids(self) -> list[HostID]:
        return list(self._hosts)

    @property
    def certificate_ids(self) -> list[CertificateID]:
        return list(self._certificates)

    @property
    def web_property_ids(self) -> list[WebPropertyID]:
        return list(self._web_properties)

    @property
    def unknown_assets(self) -> list[str]:
        return list(self._unknown)

    def known_asset_count(self) -> int:
        return len(self._hosts) + len(self._certificates) + len(self._web_properties)

    def known_asset_ids(self) -> list[str]:
        return [
            *(str(h) for h in self._hosts),
            *(str(c) for c in self._certificates),
            *(str(w) for w in self._web_properties),
        ]

    def asset_type(self) -> AssetType:
        """Single asset type of the inputs, or a usage error."""

        if self._unknown:
            raise InvalidAssetIDError(next(iter(self._unknown)), "unable to infer asset type")

        found = AssetType.UNKNOWN
        for asset_type, bucket in (
            (AssetType.HOST, self._hosts),
            (AssetType.CERTIFICATE, self._certificates),
            (AssetType.WEB_PROPERTY, self._web_properties),
        ):
            if not bucket:
                continue
            if found is not AssetType.UNKNOWN:
                raise MixedAssetTypesError(found.value, asset_type.value)
            found = asset_type
        if found is AssetType.UNKNOWN:
            raise NoAssetsError()
        return found


__all__ = [
    "DEFAULT_WEB_PROPERTY_PORT",
    "refang_ip",
    "refang_url",
    "InvalidIdentifier",
    "HostID",
    "CertificateID",
    "WebPropertyID",
    "parse_host_id",
    "parse_certificate_id",
    "parse_web_property_id",
    "AssetClassifier",
]
