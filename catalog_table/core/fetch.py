"""Contract between server-mode tables and the code that fetches their rows."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class FetchParams:
    """
    Query a server-mode table asks its fetcher to answer.

    Attributes:
        page: 1-based page number
        page_size: Rows per page
        search: Trimmed search term, or None when there is none
        filters: Mapping of filter key to selected value
        sort: ``(sort_key, sort_direction)`` or None for the natural order
    """

    page: int
    page_size: int
    search: Optional[str] = None
    filters: Dict[str, str] = field(default_factory=dict)
    sort: Optional[Tuple[str, str]] = None

    def cache_key(self) -> Tuple[Any, ...]:
        """Hashable identity of the query."""
        return (
            self.page,
            self.page_size,
            self.search,
            tuple(sorted(self.filters.items())),
            self.sort,
        )


@dataclass(frozen=True)
class FetchResult:
    """
    One page of rows plus the row count across all pages.

    Attributes:
        items: Records of the requested page
        total_items: Number of rows matching the query, across all pages
    """

    items: List[Any]
    total_items: int


Fetcher = Callable[[FetchParams], FetchResult]
