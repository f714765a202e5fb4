"""Retry helpers."""

from __future__ import annotations

from ..config import BackoffType

DEFAULT_BASE_DELAY_SECONDS = 0.5


def is_retryable_http_status(status: int | None) -> bool:
    if status is None:
        return False
    return status == 429 or status >= 500


def calculate_retry_delay(
    *,
    base_delay_seconds: float,
    max_delay_seconds: float,
    backoff: BackoffType,
    attempt: int,
) -> float:
    """Delay before the next attempt.

    attempt: 1-based index of the attempt that just failed.
    """

    attempt = max(1, attempt)
    base = base_delay_seconds if base_delay_seconds > 0 else DEFAULT_BASE_DELAY_SECONDS

    if backoff is BackoffType.LINEAR:
        delay = attempt * base
    elif backoff is BackoffType.EXPONENTIAL:
        delay = float(2 ** (attempt - 1)) * base
    else:
        delay = base

    if max_delay_seconds > 0 and delay > max_delay_seconds:
        return max_delay_seconds
    return delay


def can_retry(*, attempt: int, max_attempts: int) -> bool:
    return attempt < max_attempts


__all__ = [
    "is_retryable_http_status",
    "calculate_retry_delay",
    "can_retry",
]
