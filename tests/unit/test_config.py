from __future__ import annotations

import pytest

from cencli.config import (
    UNLIMITED_PAGES,
    BackoffType,
    CencliConfig,
    RetryConfig,
    SearchConfig,
    TransportConfig,
)


def test_default_config_is_valid():
    config = CencliConfig()
    config.validate()

    assert config.retry.max_attempts == 2
    assert config.retry.base_delay_seconds == 0.5
    assert config.retry.max_delay_seconds == 30.0
    assert config.retry.backoff is BackoffType.FIXED
    assert config.search.page_size == 100
    assert config.search.max_pages == 1


def test_api_token_is_hidden_from_repr():
    assert "secret" not in repr(CencliConfig(api_token="secret"))


@pytest.mark.parametrize(
    ("config", "message"),
    [
        (CencliConfig(base_url=""), "base_url must not be empty"),
        (CencliConfig(api_token="  "), "api_token must not be blank"),
        (CencliConfig(transport=TransportConfig(timeout_read_seconds=0)), "transport.timeout_read_seconds must be > 0"),
        (CencliConfig(retry=RetryConfig(max_attempts=0)), "retry.max_attempts must be >= 1"),
        (CencliConfig(retry=RetryConfig(base_delay_seconds=-1)), "retry.base_delay_seconds must be >= 0"),
        (CencliConfig(retry=RetryConfig(max_delay_seconds=-1)), "retry.max_delay_seconds must be >= 0"),
        (CencliConfig(search=SearchConfig(page_size=0)), "search.page_size must be >= 1"),
        (CencliConfig(search=SearchConfig(max_pages=0)), "search.max_pages must be >= 1 or -1 for unlimited"),
        (CencliConfig(search=SearchConfig(max_pages=-2)), "search.max_pages must be >= 1 or -1 for unlimited"),
    ],
    ids=[
        "base-url",
        "blank-token",
        "timeout",
        "max-attempts",
        "base-delay",
        "max-delay",
        "page-size",
        "max-pages-zero",
        "max-pages-negative",
    ],
)
def test_config_validation_errors(config, message):
    with pytest.raises(ValueError, match=message):
        config.validate()


def test_unlimited_max_pages_resolves_to_none():
    assert SearchConfig(max_pages=UNLIMITED_PAGES).resolved_max_pages() is None
    assert SearchConfig(max_pages=4).resolved_max_pages() == 4


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("fixed", BackoffType.FIXED),
        (" Linear ", BackoffType.LINEAR),
        ("EXPONENTIAL", BackoffType.EXPONENTIAL),
    ],
)
def test_backoff_type_parse(text, expected):
    assert BackoffType.parse(text) is expected


def test_backoff_type_parse_rejects_unknown():
    with pytest.raises(ValueError, match="invalid backoff type: jitter"):
        BackoffType.parse("jitter")
