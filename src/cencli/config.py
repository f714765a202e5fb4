"""Client configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

UNLIMITED_PAGES = -1


class BackoffType(str, Enum):
    FIXED = "fixed"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"

    @classmethod
    def parse(cls, text: str) -> "BackoffType":
        try:
            return cls(text.strip().lower())
        except ValueError:
            raise ValueError(f"invalid backoff type: {text}") from None


@dataclass(slots=True, frozen=True)
class TransportConfig:
    """Transport-related settings."""

    timeout_connect_seconds: float = 5.0
    timeout_read_seconds: float = 30.0
    timeout_write_seconds: float = 30.0
    timeout_pool_seconds: float = 5.0

    def validate(self) -> None:
        for field_name in (
            "timeout_connect_seconds",
            "timeout_read_seconds",
            "timeout_write_seconds",
            "timeout_pool_seconds",
        ):
            if getattr(self, field_name) <= 0:
                raise ValueError(f"transport.{field_name} must be > 0")


@dataclass(slots=True, frozen=True)
class RetryConfig:
    """Retry-related settings."""

    max_attempts: int = 2
    base_delay_seconds: float = 0.5
    max_delay_seconds: float = 30.0
    backoff: BackoffType = BackoffType.FIXED

    def validate(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("retry.max_attempts must be >= 1")
        if self.base_delay_seconds < 0:
            raise ValueError("retry.base_delay_seconds must be >= 0")
        if self.max_delay_seconds < 0:
            raise ValueError("retry.max_delay_seconds must be >= 0")
        if not isinstance(self.backoff, BackoffType):
            raise ValueError("retry.backoff must be one of fixed|linear|exponential")


@dataclass(slots=True, frozen=True)
class SearchConfig:
    """Search pagination defaults."""

    page_size: int = 100
    # -1 means unlimited; 0 is rejected.
    max_pages: int = 1

    def validate(self) -> None:
        if self.page_size < 1:
            raise ValueError("search.page_size must be >= 1")
        if self.max_pages != UNLIMITED_PAGES and self.max_pages < 1:
            raise ValueError("search.max_pages must be >= 1 or -1 for unlimited")

    def resolved_max_pages(self) -> int | None:
        if self.max_pages == UNLIMITED_PAGES:
            return None
        return self.max_pages


@dataclass(slots=True, frozen=True)
class CencliConfig:
    """Runtime configuration for the Censys client."""

    base_url: str = "https://api.platform.censys.io"
    user_agent: str = "cencli-python/0.1.0"
    api_token: str | None = field(default=None, repr=False)
    org_id: str | None = None

    transport: TransportConfig = field(default_factory=TransportConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    def validate(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if self.api_token is not None and not self.api_token.strip():
            raise ValueError("api_token must not be blank")
        self.transport.validate()
        self.retry.validate()
        self.search.validate()


__all__ = [
    "UNLIMITED_PAGES",
    "BackoffType",
    "TransportConfig",
    "RetryConfig",
    "SearchConfig",
    "CencliConfig",
]
