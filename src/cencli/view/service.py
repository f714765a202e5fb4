"""Bulk lookup of hosts, certificates, and web properties."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from ..api.client import CensysApi
from ..api.payloads import format_at_time
from ..assets.ids import AssetClassifier, CertificateID, HostID, WebPropertyID
from ..assets.models import AssetType
from ..core.batching import BatchDriver, split_batches
from ..core.cancellation import CancellationToken
from ..core.errors import UsageError
from ..core.progress import ProgressSink
from .models import CertificatesResult, HostsResult, ViewResult, WebPropertiesResult

logger = logging.getLogger("cencli")

MAX_HOSTS_PER_REQUEST = 100
MAX_CERTIFICATES_PER_REQUEST = 1000
MAX_WEB_PROPERTIES_PER_REQUEST = 100


def describe_batch(
    *,
    plural: str,
    single: str,
    total_ids: int,
    at_time: datetime | None = None,
    min_single: int = 1,
) -> Callable[[int, int, Sequence[object]], str | None]:
    """Build the per-batch progress message formatter for one lookup.

    A lone batch is only announced when it holds at least ``min_single`` ids.
    """

    def describe(index: int, total_batches: int, batch: Sequence[object]) -> str | None:
        if total_batches > 1:
            message = f"Fetching {plural} batch {index + 1}/{total_batches} ({len(batch)} {plural})"
        elif total_ids >= min_single:
            message = f"Fetching {total_ids} {single}"
        else:
            return None
        if at_time is not None:
            message = f"{message} at {format_at_time(at_time)}"
        return message + "..."

    return describe


class ViewService:
    """Fetches assets by identifier in fixed-size batches."""

    def __init__(
        self,
        api: CensysApi,
        *,
        progress: ProgressSink | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._api = api
        self._progress = progress
        self._clock = clock

    def get_hosts(
        self,
        host_ids: Sequence[HostID],
        *,
        org_id: str | None = None,
        at_time: datetime | None = None,
        cancellation: CancellationToken | None = None,
    ) -> HostsResult:
        ids = [str(host_id) for host_id in host_ids]
        logger.info("host lookup start count=%s", len(ids))

        def fetch(token: CancellationToken, batch: Sequence[str]):
            return self._api.get_hosts(batch, org_id=org_id, at_time=at_time, cancellation=token)

        result = self._driver().run(
            split_batches(ids, MAX_HOSTS_PER_REQUEST),
            fetch,
            describe=describe_batch(plural="hosts", single="host(s)", total_ids=len(ids), at_time=at_time),
            cancellation=cancellation,
        )
        return HostsResult(meta=result.meta, hosts=result.items, partial_error=result.partial_error)

    def get_certificates(
        self,
        certificate_ids: Sequence[CertificateID],
        *,
        org_id: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> CertificatesResult:
        ids = [str(certificate_id) for certificate_id in certificate_ids]
        logger.info("certificate lookup start count=%s", len(ids))

        def fetch(token: CancellationToken, batch: Sequence[str]):
            return self._api.get_certificates(batch, org_id=org_id, cancellation=token)

        result = self._driver().run(
            split_batches(ids, MAX_CERTIFICATES_PER_REQUEST),
            fetch,
            describe=describe_batch(
                plural="certificates",
                single="certificates",
                total_ids=len(ids),
                min_single=2,
            ),
            cancellation=cancellation,
        )
        return CertificatesResult(
            meta=result.meta,
            certificates=result.items,
            partial_error=result.partial_error,
        )

    def get_web_properties(
        self,
        webproperty_ids: Sequence[WebPropertyID],
        *,
        org_id: str | None = None,
        at_time: datetime | None = None,
        cancellation: CancellationToken | None = None,
    ) -> WebPropertiesResult:
        ids = [str(webproperty_id) for webproperty_id in webproperty_ids]
        logger.info("web property lookup start count=%s", len(ids))

        def fetch(token: CancellationToken, batch: Sequence[str]):
            return self._api.get_web_properties(batch, org_id=org_id, at_time=at_time, cancellation=token)

        result = self._driver().run(
            split_batches(ids, MAX_WEB_PROPERTIES_PER_REQUEST),
            fetch,
            describe=describe_batch(
                plural="web properties",
                single="web properties",
                total_ids=len(ids),
                at_time=at_time,
                min_single=2,
            ),
            cancellation=cancellation,
        )
        return WebPropertiesResult(
            meta=result.meta,
            web_properties=result.items,
            partial_error=result.partial_error,
        )

    def lookup(
        self,
        raw_assets: Sequence[str],
        *,
        org_id: str | None = None,
        at_time: datetime | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ViewResult:
        """Classify raw identifiers and fetch them with the matching lookup."""

        classifier = AssetClassifier(*raw_assets)
        asset_type = classifier.asset_type()
        if asset_type is AssetType.HOST:
            return self.get_hosts(
                classifier.host_ids,
                org_id=org_id,
                at_time=at_time,
                cancellation=cancellation,
            )
        if asset_type is AssetType.CERTIFICATE:
            if at_time is not None:
                raise UsageError("at-time is not supported for certificate lookups")
            return self.get_certificates(
                classifier.certificate_ids,
                org_id=org_id,
                cancellation=cancellation,
            )
        return self.get_web_properties(
            classifier.web_property_ids,
            org_id=org_id,
            at_time=at_time,
            cancellation=cancellation,
        )

    def _driver(self) -> BatchDriver:
        return BatchDriver(progress=self._progress, clock=self._clock)


__all__ = [
    "MAX_HOSTS_PER_REQUEST",
    "MAX_CERTIFICATES_PER_REQUEST",
    "MAX_WEB_PROPERTIES_PER_REQUEST",
    "describe_batch",
    "ViewService",
]
