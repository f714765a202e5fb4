"""Cooperative cancellation and deadline signal."""

from __future__ import annotations

import threading
import time
from typing import Callable


class CancellationToken:
    """Stop-request signal checked by value at loop boundaries.

    Cancellation and deadline expiry are two triggers of the same signal.
    ``cancel()`` may be called from another thread or a signal handler.
    """

    def __init__(
        self,
        *,
        deadline: float | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._clock = clock or time.monotonic
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(
        cls,
        seconds: float,
        *,
        clock: Callable[[], float] | None = None,
    ) -> "CancellationToken":
        if seconds < 0:
            raise ValueError("timeout seconds must be >= 0")
        resolved_clock = clock or time.monotonic
        return cls(deadline=resolved_clock() + seconds, clock=resolved_clock)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def deadline_exceeded(self) -> bool:
        if self._cancelled.is_set():
            return False
        return self._deadline is not None and self._clock() >= self._deadline

    @property
    def triggered(self) -> bool:
        return self.cancelled or self.deadline_exceeded

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is none."""

        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())


def never_cancelled() -> CancellationToken:
    return CancellationToken()


__all__ = [
    "CancellationToken",
    "never_cancelled",
]
