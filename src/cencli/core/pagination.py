"""Cursor-based pagination driver with partial-result semantics."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .accumulator import ResponseMetaAggregator, ResultAccumulator
from .cancellation import CancellationToken, never_cancelled
from .errors import (
    CencliError,
    InvalidPaginationParamsError,
    PartialError,
    classify_cancellation,
    ensure_cencli_error,
    to_partial_error,
)
from .models import ResponseMeta
from .progress import ProgressSink, SafeProgressSink, Stage

logger = logging.getLogger("cencli")

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class SearchPage:
    hits: Sequence[Mapping[str, Any]]
    total_hits: int
    next_cursor: str | None

    def __post_init__(self) -> None:
        if not isinstance(self.hits, tuple):
            object.__setattr__(self, "hits", tuple(self.hits))


@dataclass(slots=True, frozen=True)
class PageResult:
    """One page response; ``data is None`` means the body carried no data object."""

    meta: ResponseMeta | None
    data: SearchPage | None


PageFetcher = Callable[[CancellationToken, str | None], PageResult]


@dataclass(slots=True, frozen=True)
class PaginatedResult(Generic[T]):
    meta: ResponseMeta | None
    hits: tuple[T, ...]
    total_hits: int
    partial_error: PartialError | None = None

    @property
    def is_partial(self) -> bool:
        return self.partial_error is not None


def validate_pagination_params(
    *,
    page_size: int | None = None,
    max_pages: int | None = None,
) -> None:
    if page_size is not None and page_size <= 0:
        raise InvalidPaginationParamsError("page size must be greater than 0")
    if max_pages is not None and max_pages <= 0:
        raise InvalidPaginationParamsError("max pages must be greater than 0")


class PaginationDriver(Generic[T]):
    """Turns one logical query into a bounded sequence of page requests."""

    def __init__(
        self,
        parse_hits: Callable[[Sequence[Mapping[str, Any]]], list[T]],
        *,
        progress: ProgressSink | None = None,
        clock: Callable[[], float] | None = None,
        label: str = "search results",
    ) -> None:
        self._parse_hits = parse_hits
        self._progress = SafeProgressSink(progress)
        self._clock = clock or time.monotonic
        self._label = label

    def run(
        self,
        fetch_page: PageFetcher,
        *,
        max_pages: int | None = None,
        cancellation: CancellationToken | None = None,
    ) -> PaginatedResult[T]:
        validate_pagination_params(max_pages=max_pages)
        token = cancellation or never_cancelled()

        hits: ResultAccumulator[T] = ResultAccumulator()
        meta = ResponseMetaAggregator()
        pages_processed = 0
        deferred_error: CencliError | None = None
        cursor: str | None = None
        started_at = self._clock()

        while True:
            if max_pages is not None and pages_processed >= max_pages:
                break

            if token.triggered:
                stop_error = classify_cancellation(token)
                if pages_processed == 0:
                    logger.info("pagination stopped before first page cause=%s", stop_error.cause)
                    raise stop_error
                logger.warning(
                    "pagination stopped early pages=%s hits=%s cause=%s",
                    pages_processed,
                    hits.count,
                    stop_error.cause,
                )
                return self._finish(
                    hits=hits,
                    meta=meta,
                    pages_processed=pages_processed,
                    started_at=started_at,
                    error=stop_error,
                )

            self._report_progress(pages_processed, hits.count, max_pages)

            logger.debug("page request page=%s cursor=%s", pages_processed + 1, cursor)
            try:
                page = fetch_page(token, cursor)
                meta.record(page.meta)
                page_items = self._parse_hits(page.data.hits) if page.data is not None else []
            except Exception as exc:
                error = ensure_cencli_error(exc)
                if pages_processed == 0:
                    logger.error("first page failed cause=%s", error.cause)
                    if error is exc:
                        raise
                    raise error from exc
                deferred_error = error
                self._progress.notify_error(Stage.FETCH, error)
                logger.warning(
                    "page failed after partial progress page=%s hits=%s cause=%s",
                    pages_processed + 1,
                    hits.count,
                    error.cause,
                )
                break

            if page.data is None:
                pages_processed += 1
                logger.debug("page carried no data page=%s", pages_processed)
                break

            hits.extend(page_items)
            hits.record_total(page.data.total_hits)
            pages_processed += 1
            logger.debug(
                "page done page=%s page_hits=%s total_hits=%s",
                pages_processed,
                len(page_items),
                page.data.total_hits,
            )

            next_cursor = page.data.next_cursor
            if not next_cursor or not page_items:
                break
            if max_pages is not None and pages_processed >= max_pages:
                break
            cursor = next_cursor

        return self._finish(
            hits=hits,
            meta=meta,
            pages_processed=pages_processed,
            started_at=started_at,
            error=deferred_error,
        )

    def _finish(
        self,
        *,
        hits: ResultAccumulator[T],
        meta: ResponseMetaAggregator,
        pages_processed: int,
        started_at: float,
        error: CencliError | None,
    ) -> PaginatedResult[T]:
        finalized = meta.finalize(
            latency_seconds=self._clock() - started_at,
            page_count=pages_processed,
        )
        logger.info(
            "pagination done pages=%s hits=%s total_hits=%s partial=%s",
            pages_processed,
            hits.count,
            hits.total_hits,
            error is not None,
        )
        return PaginatedResult(
            meta=finalized,
            hits=hits.snapshot(),
            total_hits=hits.total_hits,
            partial_error=to_partial_error(error),
        )

    def _report_progress(self, page: int, hits_collected: int, max_pages: int | None) -> None:
        if page == 0:
            return
        if max_pages is not None:
            message = (
                f"Fetching {self._label} (page {page + 1}/{max_pages}, "
                f"{hits_collected} hits collected)..."
            )
        else:
            message = f"Fetching {self._label} (page {page + 1}, {hits_collected} hits collected)..."
        self._progress.notify(Stage.FETCH, message)


__all__ = [
    "SearchPage",
    "PageResult",
    "PageFetcher",
    "PaginatedResult",
    "PaginationDriver",
    "validate_pagination_params",
]
