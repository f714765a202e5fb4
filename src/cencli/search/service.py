"""Paginated search over the global or a collection-scoped endpoint."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..api.client import CensysApi
from ..assets.models import Asset
from ..assets.parser import parse_hits
from ..core.cancellation import CancellationToken
from ..core.errors import UsageError
from ..core.pagination import PageFetcher, PageResult, PaginatedResult, PaginationDriver, validate_pagination_params
from ..core.progress import ProgressSink
from .params import SearchParams

logger = logging.getLogger("cencli")

SearchResult = PaginatedResult[Asset]


class SearchService:
    """Runs one search query across as many pages as its bounds allow."""

    def __init__(
        self,
        api: CensysApi,
        *,
        progress: ProgressSink | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._api = api
        self._driver: PaginationDriver[Asset] = PaginationDriver(
            parse_hits,
            progress=progress,
            clock=clock,
        )

    def search(
        self,
        params: SearchParams,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SearchResult:
        query = params.query.strip()
        if not query:
            raise UsageError("search query must not be empty")
        validate_pagination_params(page_size=params.page_size, max_pages=params.max_pages)

        logger.info(
            "search start collection=%s page_size=%s max_pages=%s",
            params.collection_id,
            params.page_size,
            params.max_pages,
        )
        return self._driver.run(
            self._page_fetcher(params, query),
            max_pages=params.max_pages,
            cancellation=cancellation,
        )

    def _page_fetcher(self, params: SearchParams, query: str) -> PageFetcher:
        def fetch(token: CancellationToken, cursor: str | None) -> PageResult:
            if params.collection_id:
                return self._api.search_collection(
                    params.collection_id,
                    query,
                    fields=params.fields,
                    page_size=params.page_size,
                    page_token=cursor,
                    org_id=params.org_id,
                    cancellation=token,
                )
            return self._api.search(
                query,
                fields=params.fields,
                page_size=params.page_size,
                page_token=cursor,
                org_id=params.org_id,
                cancellation=token,
            )

        return fetch


__all__ = [
    "SearchResult",
    "SearchService",
]
