from __future__ import annotations

import pytest

from cencli.core.batching import BatchDriver, BatchResult, split_batches
from cencli.core.cancellation import CancellationToken
from cencli.core.errors import CencliError, DeadlineExceededError, PartialError, ProtocolError
from cencli.core.progress import RecordingProgressSink
from tests.shared.fakes import make_meta


class _EchoBatches:
    def __init__(self, *, fail_on: int | None = None, tick=None):
        self.batches: list[tuple[str, ...]] = []
        self._fail_on = fail_on
        self._tick = tick

    def __call__(self, token: CancellationToken, batch):
        self.batches.append(tuple(batch))
        if self._tick is not None:
            self._tick()
        if self._fail_on is not None and len(self.batches) == self._fail_on:
            raise ProtocolError("result must be a list")
        return BatchResult(meta=make_meta(), items=tuple(item.upper() for item in batch))


def test_split_batches_preserves_order_and_remainder():
    assert split_batches(["a", "b", "c", "d", "e"], 2) == [("a", "b"), ("c", "d"), ("e",)]


@pytest.mark.parametrize("size", [0, -1])
def test_split_batches_with_non_positive_size_is_empty(size):
    assert split_batches(["a", "b"], size) == []


def test_split_batches_of_empty_input_is_empty():
    assert split_batches([], 10) == []


def test_driver_concatenates_batches_in_order(clock):
    fetch = _EchoBatches(tick=lambda: clock.advance(0.5))

    result = BatchDriver(clock=clock).run(split_batches(["a", "b", "c"], 2), fetch)

    assert result.items == ("A", "B", "C")
    assert fetch.batches == [("a", "b"), ("c",)]
    assert result.meta.page_count == 2
    assert result.meta.latency_seconds == pytest.approx(1.0)
    assert result.partial_error is None


def test_driver_raises_first_batch_failure():
    with pytest.raises(ProtocolError):
        BatchDriver().run([("a",), ("b",)], _EchoBatches(fail_on=1))


def test_driver_wraps_foreign_first_batch_failure():
    def fetch(token, batch):
        raise KeyError("missing")

    with pytest.raises(CencliError) as exc_info:
        BatchDriver().run([("a",)], fetch)

    assert isinstance(exc_info.value.__cause__, KeyError)


def test_driver_demotes_later_failure_to_partial():
    progress = RecordingProgressSink()
    fetch = _EchoBatches(fail_on=2)

    result = BatchDriver(progress=progress).run([("a",), ("b",), ("c",)], fetch)

    assert result.items == ("A",)
    assert isinstance(result.partial_error, PartialError)
    assert isinstance(result.partial_error.error, ProtocolError)
    assert len(fetch.batches) == 2
    assert progress.errors == [result.partial_error.error]


def test_driver_deadline_before_any_item_is_raised(clock):
    token = CancellationToken.with_timeout(0.0, clock=clock)

    with pytest.raises(DeadlineExceededError):
        BatchDriver(clock=clock).run([("a",)], _EchoBatches(), cancellation=token)


def test_driver_deadline_after_first_batch_is_partial(clock):
    token = CancellationToken.with_timeout(1.0, clock=clock)
    fetch = _EchoBatches(tick=lambda: clock.advance(2.0))

    result = BatchDriver(clock=clock).run([("a",), ("b",)], fetch, cancellation=token)

    assert result.items == ("A",)
    assert isinstance(result.partial_error.error, DeadlineExceededError)
    assert result.meta.page_count == 1


def test_driver_reports_described_batches():
    progress = RecordingProgressSink()

    def describe(index, total, batch):
        if index == 1:
            return None
        return f"batch {index + 1}/{total} ({len(batch)})"

    BatchDriver(progress=progress).run([("a", "b"), ("c",), ("d",)], _EchoBatches(), describe=describe)

    assert progress.messages == ["batch 1/3 (2)", "batch 3/3 (1)"]


def test_driver_with_no_batches_returns_empty_result():
    result = BatchDriver().run([], _EchoBatches())

    assert result.items == ()
    assert result.meta is None
    assert result.partial_error is None
