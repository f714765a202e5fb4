"""Single-request executor for Platform API endpoints."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from urllib.parse import quote

from ..assets.models import Certificate, Host, WebProperty
from ..assets.parser import parse_certificates, parse_hosts, parse_web_properties
from ..core.batching import BatchResult
from ..core.cancellation import CancellationToken
from ..core.pagination import PageResult
from ..core.transport import TransportResponse
from .payloads import (
    build_asset_body,
    build_org_params,
    build_search_body,
    parse_asset_list,
    parse_search_page,
)

SEARCH_ENDPOINT = "/v3/global/search/query"
COLLECTION_SEARCH_ENDPOINT = "/v3/collections/{collection_id}/search/query"
HOSTS_ENDPOINT = "/v3/global/asset/host"
CERTIFICATES_ENDPOINT = "/v3/global/asset/certificate"
WEB_PROPERTIES_ENDPOINT = "/v3/global/asset/webproperty"


class RequestTransport(Protocol):
    def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, str] | None = None,
        json: object = None,
        cancellation: CancellationToken | None = None,
    ) -> TransportResponse: ...

    def close(self) -> None: ...


class CensysApi:
    """Issues one request per call; pagination and batching live above it."""

    def __init__(self, transport: RequestTransport, *, org_id: str | None = None) -> None:
        self._transport = transport
        self._org_id = org_id

    def search(
        self,
        query: str,
        *,
        fields: Sequence[str] = (),
        page_size: int | None = None,
        page_token: str | None = None,
        org_id: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> PageResult:
        return self._search(
            SEARCH_ENDPOINT,
            query,
            fields=fields,
            page_size=page_size,
            page_token=page_token,
            org_id=org_id,
            cancellation=cancellation,
        )

    def search_collection(
        self,
        collection_id: str,
        query: str,
        *,
        fields: Sequence[str] = (),
        page_size: int | None = None,
        page_token: str | None = None,
        org_id: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> PageResult:
        endpoint = COLLECTION_SEARCH_ENDPOINT.format(collection_id=quote(collection_id, safe=""))
        return self._search(
            endpoint,
            query,
            fields=fields,
            page_size=page_size,
            page_token=page_token,
            org_id=org_id,
            cancellation=cancellation,
        )

    def get_hosts(
        self,
        host_ids: Sequence[str],
        *,
        org_id: str | None = None,
        at_time: datetime | None = None,
        cancellation: CancellationToken | None = None,
    ) -> BatchResult[Host]:
        response = self._post(
            HOSTS_ENDPOINT,
            build_asset_body("host_ids", host_ids, at_time=at_time),
            org_id=org_id,
            cancellation=cancellation,
        )
        return BatchResult(meta=response.meta, items=tuple(parse_hosts(parse_asset_list(response.payload))))

    def get_certificates(
        self,
        certificate_ids: Sequence[str],
        *,
        org_id: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> BatchResult[Certificate]:
        response = self._post(
            CERTIFICATES_ENDPOINT,
            build_asset_body("certificate_ids", certificate_ids),
            org_id=org_id,
            cancellation=cancellation,
        )
        return BatchResult(
            meta=response.meta,
            items=tuple(parse_certificates(parse_asset_list(response.payload))),
        )

    def get_web_properties(
        self,
        webproperty_ids: Sequence[str],
        *,
        org_id: str | None = None,
        at_time: datetime | None = None,
        cancellation: CancellationToken | None = None,
    ) -> BatchResult[WebProperty]:
        response = self._post(
            WEB_PROPERTIES_ENDPOINT,
            build_asset_body("webproperty_ids", webproperty_ids, at_time=at_time),
            org_id=org_id,
            cancellation=cancellation,
        )
        return BatchResult(
            meta=response.meta,
            items=tuple(parse_web_properties(parse_asset_list(response.payload))),
        )

    def _search(
        self,
        endpoint: str,
        query: str,
        *,
        fields: Sequence[str],
        page_size: int | None,
        page_token: str | None,
        org_id: str | None,
        cancellation: CancellationToken | None,
    ) -> PageResult:
        response = self._post(
            endpoint,
            build_search_body(query, fields=fields, page_size=page_size, page_token=page_token),
            org_id=org_id,
            cancellation=cancellation,
        )
        return PageResult(meta=response.meta, data=parse_search_page(response.payload))

    def _post(
        self,
        endpoint: str,
        body: dict[str, object],
        *,
        org_id: str | None,
        cancellation: CancellationToken | None,
    ) -> TransportResponse:
        return self._transport.request(
            "POST",
            endpoint,
            params=build_org_params(org_id or self._org_id),
            json=body,
            cancellation=cancellation,
        )


__all__ = [
    "CensysApi",
    "RequestTransport",
    "SEARCH_ENDPOINT",
    "COLLECTION_SEARCH_ENDPOINT",
    "HOSTS_ENDPOINT",
    "CERTIFICATES_ENDPOINT",
    "WEB_PROPERTIES_ENDPOINT",
]
