"""Public package exports for the Censys Platform client."""

from .client import CensysClient
from .config import CencliConfig
from .core.cancellation import CancellationToken

__all__ = ["CensysClient", "CencliConfig", "CancellationToken"]
