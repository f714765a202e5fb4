from __future__ import annotations

import pytest

from cencli.config import BackoffType
from cencli.core.retry import calculate_retry_delay, can_retry, is_retryable_http_status


@pytest.mark.parametrize(
    ("status", "expected"),
    [(429, True), (500, True), (503, True), (400, False), (401, False), (404, False), (None, False)],
)
def test_retryable_statuses(status, expected):
    assert is_retryable_http_status(status) is expected


@pytest.mark.parametrize(
    ("backoff", "attempt", "expected"),
    [
        (BackoffType.FIXED, 1, 0.5),
        (BackoffType.FIXED, 4, 0.5),
        (BackoffType.LINEAR, 1, 0.5),
        (BackoffType.LINEAR, 3, 1.5),
        (BackoffType.EXPONENTIAL, 1, 0.5),
        (BackoffType.EXPONENTIAL, 4, 4.0),
    ],
)
def test_calculate_retry_delay(backoff, attempt, expected):
    delay = calculate_retry_delay(
        base_delay_seconds=0.5,
        max_delay_seconds=30.0,
        backoff=backoff,
        attempt=attempt,
    )
    assert delay == pytest.approx(expected)


def test_calculate_retry_delay_caps_at_max():
    delay = calculate_retry_delay(
        base_delay_seconds=1.0,
        max_delay_seconds=5.0,
        backoff=BackoffType.EXPONENTIAL,
        attempt=10,
    )
    assert delay == 5.0


def test_calculate_retry_delay_falls_back_to_default_base():
    delay = calculate_retry_delay(
        base_delay_seconds=0.0,
        max_delay_seconds=0.0,
        backoff=BackoffType.FIXED,
        attempt=1,
    )
    assert delay == 0.5


def test_can_retry_respects_attempt_limit():
    assert can_retry(attempt=1, max_attempts=2)
    assert not can_retry(attempt=2, max_attempts=2)
    assert not can_retry(attempt=1, max_attempts=1)
