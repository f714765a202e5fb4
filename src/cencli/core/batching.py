"""Batched multi-asset lookup with partial-result semantics."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from .accumulator import ResponseMetaAggregator, ResultAccumulator
from .cancellation import CancellationToken, never_cancelled
from .errors import CencliError, PartialError, classify_cancellation, ensure_cencli_error, to_partial_error
from .models import ResponseMeta
from .progress import ProgressSink, SafeProgressSink, Stage

logger = logging.getLogger("cencli")

I = TypeVar("I")
T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class BatchResult(Generic[T]):
    meta: ResponseMeta | None
    items: tuple[T, ...]


@dataclass(slots=True, frozen=True)
class BatchedResult(Generic[T]):
    meta: ResponseMeta | None
    items: tuple[T, ...]
    partial_error: PartialError | None = None


def split_batches(items: Sequence[I], batch_size: int) -> list[tuple[I, ...]]:
    if batch_size <= 0:
        return []
    return [tuple(items[i : i + batch_size]) for i in range(0, len(items), batch_size)]


class BatchDriver(Generic[I, T]):
    """Fetches identifier batches in order, demoting late failures to partial errors."""

    def __init__(
        self,
        *,
        progress: ProgressSink | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._progress = SafeProgressSink(progress)
        self._clock = clock or time.monotonic

    def run(
        self,
        batches: Sequence[Sequence[I]],
        fetch_batch: Callable[[CancellationToken, Sequence[I]], BatchResult[T]],
        *,
        describe: Callable[[int, int, Sequence[I]], str | None] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> BatchedResult[T]:
        token = cancellation or never_cancelled()
        items: ResultAccumulator[T] = ResultAccumulator()
        meta = ResponseMetaAggregator()
        batches_processed = 0
        deferred_error: CencliError | None = None
        total_batches = len(batches)
        started_at = self._clock()

        for index, batch in enumerate(batches):
            if token.triggered:
                stop_error = classify_cancellation(token)
                if items.count == 0:
                    raise stop_error
                logger.warning(
                    "batch lookup stopped early batches=%s items=%s cause=%s",
                    batches_processed,
                    items.count,
                    stop_error.cause,
                )
                deferred_error = stop_error
                break

            if describe is not None:
                message = describe(index, total_batches, batch)
                if message:
                    self._progress.notify(Stage.FETCH, message)

            try:
                result = fetch_batch(token, batch)
            except Exception as exc:
                error = ensure_cencli_error(exc)
                if index == 0:
                    logger.error("first batch failed cause=%s", error.cause)
                    if error is exc:
                        raise
                    raise error from exc
                deferred_error = error
                self._progress.notify_error(Stage.FETCH, error)
                logger.warning(
                    "batch failed after partial progress batch=%s/%s items=%s cause=%s",
                    index + 1,
                    total_batches,
                    items.count,
                    error.cause,
                )
                break

            meta.record(result.meta)
            items.extend(result.items)
            batches_processed += 1
            logger.debug(
                "batch done batch=%s/%s batch_items=%s",
                index + 1,
                total_batches,
                len(result.items),
            )

        finalized = meta.finalize(
            latency_seconds=self._clock() - started_at,
            page_count=batches_processed,
        )
        logger.info(
            "batch lookup done batches=%s items=%s partial=%s",
            batches_processed,
            items.count,
            deferred_error is not None,
        )
        return BatchedResult(
            meta=finalized,
            items=items.snapshot(),
            partial_error=to_partial_error(deferred_error),
        )


__all__ = [
    "BatchResult",
    "BatchedResult",
    "BatchDriver",
    "split_batches",
]
