"""Server-mode state owner: holds query state and fetches one page at a time."""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import streamlit as st

from ..config import get_default_page_size
from ..core.fetch import FetchParams, FetchResult, Fetcher
from ..core.resolver import MODE_SERVER
from ..core.state import (
    SORT_ASC,
    StateManager,
    ViewState,
    get_default_state_manager,
    normalize_direction,
)
from ..processing.pagination import total_pages_for

logger = logging.getLogger(__name__)

# Session state key for the last fetch of each server table.
# Each table stores exactly one entry (its current query).
_FETCH_CACHE_KEY = "_catalog_table_fetch_cache"

DEFAULT_FETCH_ERROR = "An error occurred while loading data"

FiltersUpdate = Union[Mapping[str, str], Callable[[Dict[str, str]], Dict[str, str]]]


def _get_fetch_cache() -> Dict[str, Any]:
    """Get per-table fetch cache from session state."""
    if _FETCH_CACHE_KEY not in st.session_state:
        st.session_state[_FETCH_CACHE_KEY] = {}
    return st.session_state[_FETCH_CACHE_KEY]


def clear_fetch_cache() -> None:
    """
    Drop all cached fetch results.

    Call this after the underlying data changed so every server table
    fetches again on its next render.
    """
    if _FETCH_CACHE_KEY in st.session_state:
        st.session_state[_FETCH_CACHE_KEY].clear()


class ServerTable:
    """
    Owner of a server-paginated table's query state.

    Holds page, page size, search, filters and sort in a StateManager,
    asks a fetcher for the current page and hands everything to a
    server-mode DataTable as caller-owned state.

    Every change except a page change returns to the first page. Fetch
    errors are logged and exposed through ``error``; the previously
    fetched rows stay visible.

    Example:
        users = ServerTable("users", fetcher=frame_fetcher(users_lf, columns))
        DataTable("users_table", columns=columns, **users.table_props())()
    """

    def __init__(
        self,
        table_key: str,
        fetcher: Fetcher,
        state_manager: Optional[StateManager] = None,
        initial_page: int = 1,
        initial_page_size: Optional[int] = None,
        initial_search: str = "",
        initial_filters: Optional[Mapping[str, str]] = None,
        initial_sort: Optional[Tuple[str, str]] = None,
    ):
        """
        Initialize the ServerTable.

        Args:
            table_key: Unique key for this table's query state (MANDATORY).
            fetcher: Callable mapping FetchParams to FetchResult.
            state_manager: Holder of the query state. If not provided, uses
                the default shared StateManager.
            initial_page: Page before any interaction.
            initial_page_size: Page size before any interaction.
                Defaults to CATALOG_TABLE_PAGE_SIZE (10).
            initial_search: Search term before any interaction.
            initial_filters: Filter values before any interaction, also
                restored by ``reset_filters()``.
            initial_sort: ``(key, direction)`` before any interaction.
        """
        self._table_key = table_key
        self._fetcher = fetcher
        self._state_manager = state_manager or get_default_state_manager()
        self._initial_filters = dict(initial_filters or {})
        sort_key, sort_direction = initial_sort or ("", SORT_ASC)
        self._initial_state = ViewState(
            search_text=initial_search,
            filter_values=self._initial_filters,
            sort_key=sort_key,
            sort_direction=sort_direction,
            page=initial_page,
            page_size=initial_page_size or get_default_page_size(),
        )

    @property
    def state(self) -> ViewState:
        return self._state_manager.get_view_state(
            self._table_key, self._initial_state
        )

    def _update(self, **changes: Any) -> bool:
        return self._state_manager.set_view_state(
            self._table_key, self.state.replace(**changes)
        )

    @property
    def page(self) -> int:
        return self.state.page

    @property
    def page_size(self) -> int:
        return self.state.page_size

    @property
    def search(self) -> str:
        return self.state.search_text

    @property
    def filters(self) -> Dict[str, str]:
        return dict(self.state.filter_values)

    @property
    def sort(self) -> Optional[Tuple[str, str]]:
        state = self.state
        if not state.sort_key:
            return None
        return (state.sort_key, state.sort_direction)

    def set_page(self, page: int) -> bool:
        return self._update(page=max(1, page))

    def set_page_size(self, page_size: int) -> bool:
        return self._update(page_size=max(1, page_size), page=1)

    def set_search(self, search: str) -> bool:
        return self._update(search_text=search, page=1)

    def set_filters(self, update: FiltersUpdate) -> bool:
        """
        Replace or merge filter values.

        Args:
            update: Mapping merged into the current values, or a callable
                receiving the current values and returning the new ones
        """
        current = self.filters
        if callable(update):
            filter_values = dict(update(current))
        else:
            filter_values = {**current, **update}
        return self._update(filter_values=filter_values, page=1)

    def set_filter(self, key: str, value: str) -> bool:
        return self.set_filters({key: value})

    def reset_filters(self) -> bool:
        return self._update(filter_values=dict(self._initial_filters), page=1)

    def set_sort(self, sort: Optional[Tuple[str, str]]) -> bool:
        """Set ``(key, direction)`` or clear the sort with None."""
        if sort is None:
            return self._update(sort_key="", sort_direction=SORT_ASC, page=1)
        key, direction = sort
        return self._update(
            sort_key=key, sort_direction=normalize_direction(direction), page=1
        )

    def params(self) -> FetchParams:
        """Build the fetch query from the current state."""
        state = self.state
        search = state.search_text.strip()
        return FetchParams(
            page=state.page,
            page_size=state.page_size,
            search=search or None,
            filters=dict(state.filter_values),
            sort=self.sort,
        )

    def fetch(self, force: bool = False) -> FetchResult:
        """
        Fetch the current page unless it is already cached.

        Args:
            force: Fetch even if the current query was answered before

        Returns:
            The current FetchResult (the previous one if the fetch failed)
        """
        params = self.params()
        cache = _get_fetch_cache()
        entry = cache.get(self._table_key)

        if entry is not None and entry["key"] == params.cache_key() and not force:
            return entry["result"]

        previous = entry["result"] if entry is not None else FetchResult([], 0)
        try:
            result = self._fetcher(params)
            error = None
        except Exception as exc:
            logger.exception("Fetching rows for table '%s' failed", self._table_key)
            result = previous
            error = str(exc) or DEFAULT_FETCH_ERROR

        cache[self._table_key] = {
            "key": params.cache_key(),
            "result": result,
            "error": error,
        }
        return result

    def refresh(self) -> FetchResult:
        """Fetch the current page again, ignoring the cache."""
        return self.fetch(force=True)

    @property
    def items(self) -> List[Any]:
        return list(self.fetch().items)

    @property
    def total_items(self) -> int:
        return self.fetch().total_items

    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total_items, self.page_size)

    @property
    def error(self) -> Optional[str]:
        """Message of the last failed fetch of the current query, else None."""
        self.fetch()
        entry = _get_fetch_cache().get(self._table_key)
        return entry["error"] if entry is not None else None

    def table_props(self) -> Dict[str, Any]:
        """
        Keyword arguments for a server-mode DataTable showing this query.

        Every state field is passed with its setter, so the DataTable
        treats all of them as caller-owned.
        """
        result = self.fetch()
        state = self.state
        return {
            "data": list(result.items),
            "mode": MODE_SERVER,
            "total_items": result.total_items,
            "search_value": state.search_text,
            "on_search_change": self.set_search,
            "filter_values": dict(state.filter_values),
            "on_filter_change": self.set_filter,
            "sort_key": state.sort_key,
            "sort_direction": state.sort_direction,
            "on_sort_change": lambda key, direction: self.set_sort((key, direction)),
            "current_page": state.page,
            "on_page_change": self.set_page,
            "current_page_size": state.page_size,
            "on_page_size_change": self.set_page_size,
        }

    def __repr__(self) -> str:
        return (
            f"ServerTable(table_key='{self._table_key}', "
            f"state={self.state.to_dict()})"
        )
