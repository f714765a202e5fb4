"""Search query parameters."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from ..config import SearchConfig


@dataclass(slots=True, frozen=True)
class SearchParams:
    """One logical search query.

    ``page_size`` and ``max_pages`` use ``None`` as the only unset marker:
    an unset page size lets the service choose, an unset page bound means
    the run continues until the cursor runs out.
    """

    query: str
    fields: Sequence[str] = field(default_factory=tuple)
    page_size: int | None = None
    max_pages: int | None = None
    org_id: str | None = None
    collection_id: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.fields, str):
            raise TypeError("fields must be a sequence of strings, not str")
        object.__setattr__(self, "fields", tuple(self.fields))


def apply_search_defaults(params: SearchParams, defaults: SearchConfig) -> SearchParams:
    """Fill an unset page size or page bound from configuration."""

    updates: dict[str, int | None] = {}
    if params.page_size is None:
        updates["page_size"] = defaults.page_size
    if params.max_pages is None:
        updates["max_pages"] = defaults.resolved_max_pages()
    if not updates:
        return params
    return replace(params, **updates)


__all__ = [
    "SearchParams",
    "apply_search_defaults",
]
