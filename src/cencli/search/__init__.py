"""Search domain package."""

from .params import SearchParams, apply_search_defaults
from .service import SearchResult, SearchService

__all__ = [
    "SearchParams",
    "SearchResult",
    "SearchService",
    "apply_search_defaults",
]
