"""Public client entrypoint."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from types import TracebackType

from .api.client import CensysApi, RequestTransport
from .assets.ids import CertificateID, HostID, WebPropertyID
from .config import CencliConfig
from .core.cancellation import CancellationToken
from .core.errors import ClientClosedError, ClientNotConfiguredError, UsageError
from .core.progress import ProgressSink
from .core.transport import SyncTransport
from .search.params import SearchParams, apply_search_defaults
from .search.service import SearchResult, SearchService
from .view.models import CertificatesResult, HostsResult, ViewResult, WebPropertiesResult
from .view.service import ViewService


def validate_client_config(config: CencliConfig) -> None:
    try:
        config.validate()
    except ValueError as exc:
        raise UsageError(str(exc)) from exc


class _GuardedSearchService:
    """Guard wrapper to block usage after client close."""

    def __init__(self, owner: "CensysClient", delegate: SearchService) -> None:
        self._owner = owner
        self._delegate = delegate

    def search(
        self,
        params: SearchParams,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SearchResult:
        self._owner._ensure_open()
        resolved = apply_search_defaults(params, self._owner.config.search)
        return self._delegate.search(resolved, cancellation=cancellation)


class _GuardedViewService:
    """Guard wrapper to block usage after client close."""

    def __init__(self, owner: "CensysClient", delegate: ViewService) -> None:
        self._owner = owner
        self._delegate = delegate

    def get_hosts(
        self,
        host_ids: Sequence[HostID],
        *,
        org_id: str | None = None,
        at_time: datetime | None = None,
        cancellation: CancellationToken | None = None,
    ) -> HostsResult:
        self._owner._ensure_open()
        return self._delegate.get_hosts(host_ids, org_id=org_id, at_time=at_time, cancellation=cancellation)

    def get_certificates(
        self,
        certificate_ids: Sequence[CertificateID],
        *,
        org_id: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> CertificatesResult:
        self._owner._ensure_open()
        return self._delegate.get_certificates(certificate_ids, org_id=org_id, cancellation=cancellation)

    def get_web_properties(
        self,
        webproperty_ids: Sequence[WebPropertyID],
        *,
        org_id: str | None = None,
        at_time: datetime | None = None,
        cancellation: CancellationToken | None = None,
    ) -> WebPropertiesResult:
        self._owner._ensure_open()
        return self._delegate.get_web_properties(
            webproperty_ids,
            org_id=org_id,
            at_time=at_time,
            cancellation=cancellation,
        )

    def lookup(
        self,
        raw_assets: Sequence[str],
        *,
        org_id: str | None = None,
        at_time: datetime | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ViewResult:
        self._owner._ensure_open()
        return self._delegate.lookup(raw_assets, org_id=org_id, at_time=at_time, cancellation=cancellation)


class CensysClient:
    """Public Censys Platform API client."""

    def __init__(
        self,
        *,
        config: CencliConfig | None = None,
        transport: RequestTransport | None = None,
        progress: ProgressSink | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._config = config or CencliConfig()
        validate_client_config(self._config)
        if transport is None and not self._config.api_token:
            raise ClientNotConfiguredError()

        self._transport = transport or SyncTransport(self._config)
        api = CensysApi(self._transport, org_id=self._config.org_id)
        self._closed = False
        self.search = _GuardedSearchService(self, SearchService(api, progress=progress, clock=clock))
        self.view = _GuardedViewService(self, ViewService(api, progress=progress, clock=clock))

    @property
    def config(self) -> CencliConfig:
        return self._config

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError("CensysClient is already closed")

    def close(self) -> None:
        if self._closed:
            return
        self._transport.close()
        self._closed = True

    def __enter__(self) -> "CensysClient":
        self._ensure_open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        self.close()
        return False


__all__ = [
    "CensysClient",
    "validate_client_config",
]
