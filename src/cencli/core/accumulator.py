"""Run-scoped bookkeeping for paginated and batched fetches."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic, TypeVar

from .models import ResponseMeta

T = TypeVar("T")


class ResultAccumulator(Generic[T]):
    """Append-only item list plus the latest reported total."""

    def __init__(self) -> None:
        self._items: list[T] = []
        self.total_hits = 0

    def extend(self, items: Iterable[T]) -> int:
        before = len(self._items)
        self._items.extend(items)
        return len(self._items) - before

    def record_total(self, total_hits: int) -> None:
        # Last page wins; totals are not reconciled across pages.
        self.total_hits = total_hits

    @property
    def count(self) -> int:
        return len(self._items)

    def snapshot(self) -> tuple[T, ...]:
        return tuple(self._items)


class ResponseMetaAggregator:
    """Tracks the latest transport meta and stamps run totals at the end."""

    def __init__(self) -> None:
        self._last: ResponseMeta | None = None

    def record(self, meta: ResponseMeta | None) -> None:
        if meta is not None:
            self._last = meta

    @property
    def last(self) -> ResponseMeta | None:
        return self._last

    def finalize(self, *, latency_seconds: float, page_count: int) -> ResponseMeta | None:
        if self._last is None:
            return None
        return self._last.finalized(latency_seconds=latency_seconds, page_count=page_count)


__all__ = [
    "ResultAccumulator",
    "ResponseMetaAggregator",
]
