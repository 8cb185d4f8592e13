"""Mode resolution: merge internally-held and caller-supplied view state.

Every state field of a table is owned either by the table itself (held in a
StateManager) or by the caller (passed in as a value together with a change
callback). The resolver decides ownership field by field and produces one
immutable ResolvedState per render, so rendering and intent dispatch never
consult two sources for the same field.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .state import SORT_ASC, ViewState, normalize_direction

logger = logging.getLogger(__name__)

MODE_CLIENT = "client"
MODE_SERVER = "server"
MODES = (MODE_CLIENT, MODE_SERVER)

FIELD_SEARCH = "search"
FIELD_FILTERS = "filters"
FIELD_SORT = "sort"
FIELD_PAGE = "page"
FIELD_PAGE_SIZE = "page_size"
FIELDS = (FIELD_SEARCH, FIELD_FILTERS, FIELD_SORT, FIELD_PAGE, FIELD_PAGE_SIZE)


@dataclass(frozen=True)
class Owned:
    """Field value held by the table itself."""

    value: Any


@dataclass(frozen=True)
class Caller:
    """Field value owned by the caller, changed only through ``on_change``."""

    value: Any
    on_change: Callable[..., Any] = field(compare=False)


Source = Union[Owned, Caller]


@dataclass(frozen=True)
class Overrides:
    """
    Caller-supplied values and change callbacks.

    A field is caller-owned only when both its value and its callback are
    given. Sort is resolved on its own, so a call site can drive sorting
    from the server while leaving search to the table.
    """

    search_value: Optional[str] = None
    on_search_change: Optional[Callable[[str], Any]] = None
    filter_values: Optional[Mapping[str, str]] = None
    on_filter_change: Optional[Callable[[str, str], Any]] = None
    sort_key: Optional[str] = None
    sort_direction: Optional[str] = None
    on_sort_change: Optional[Callable[[str, str], Any]] = None
    current_page: Optional[int] = None
    on_page_change: Optional[Callable[[int], Any]] = None
    current_page_size: Optional[int] = None
    on_page_size_change: Optional[Callable[[int], Any]] = None


def choose_source(
    internal_value: Any, caller_value: Any, on_change: Optional[Callable]
) -> Source:
    """
    Pick the authoritative source of one field.

    Args:
        internal_value: Value held by the table
        caller_value: Value passed by the caller (None if not passed)
        on_change: Caller's change callback (None if not passed)

    Returns:
        Caller if both caller value and callback are present, else Owned
    """
    if caller_value is not None and on_change is not None:
        return Caller(caller_value, on_change)
    return Owned(internal_value)


@dataclass(frozen=True)
class ResolvedState:
    """
    The single authoritative view state of one render pass.

    ``page`` is the page actually displayed. It differs from
    ``requested_page`` only after ``clamped()`` pulled an out-of-range
    request back to the last page; the requester's stored value is left
    alone.
    """

    search_text: str
    filter_values: Dict[str, str]
    sort_key: str
    sort_direction: str
    page: int
    requested_page: int
    page_size: int
    mode: str = MODE_CLIENT
    sources: Dict[str, Source] = field(default_factory=dict, compare=False)

    def source(self, field_name: str) -> Source:
        return self.sources.get(field_name, Owned(None))

    def is_caller_owned(self, field_name: str) -> bool:
        return isinstance(self.sources.get(field_name), Caller)

    def ownership(self) -> Dict[str, str]:
        """Map each field to 'caller' or 'owned'."""
        return {
            name: "caller" if self.is_caller_owned(name) else "owned"
            for name in FIELDS
        }

    def active_filters(self) -> Dict[str, str]:
        return {key: value for key, value in self.filter_values.items() if value}

    def clamped(self, total_pages: int) -> "ResolvedState":
        """
        Clamp the displayed page into ``[1, total_pages]``.

        Args:
            total_pages: Number of pages of the current record set

        Returns:
            Copy with ``page`` clamped; ``requested_page`` unchanged
        """
        displayed = max(1, min(self.requested_page, max(1, total_pages)))
        if displayed != self.requested_page:
            logger.debug(
                "Displaying page %d of %d (requested %d)",
                displayed,
                total_pages,
                self.requested_page,
            )
        return replace(self, page=displayed)

    def to_view_state(self) -> ViewState:
        return ViewState(
            search_text=self.search_text,
            filter_values=self.filter_values,
            sort_key=self.sort_key,
            sort_direction=self.sort_direction,
            page=self.page,
            page_size=self.page_size,
        )


def resolve_view_state(
    internal: ViewState,
    overrides: Optional[Overrides] = None,
    mode: str = MODE_CLIENT,
    defaults: Optional[ViewState] = None,
) -> ResolvedState:
    """
    Merge internal state and caller overrides into one ResolvedState.

    Ownership is decided per field and does not depend on ``mode``. In
    server mode the rows come from the caller, so a field the caller did
    not fully control resolves to ``defaults`` (page 1, no search, no
    filters, no sort) instead of the held value.

    Args:
        internal: State held by the table
        overrides: Caller-supplied values and callbacks
        mode: 'client' or 'server'
        defaults: Safe server-mode state (``ViewState()`` if not given)

    Returns:
        ResolvedState for this render (page not yet clamped)
    """
    overrides = overrides or Overrides()
    if mode == MODE_SERVER:
        internal = defaults if defaults is not None else ViewState()

    search = choose_source(
        internal.search_text, overrides.search_value, overrides.on_search_change
    )
    filters = choose_source(
        internal.filter_values, overrides.filter_values, overrides.on_filter_change
    )
    sort = choose_source(
        (internal.sort_key, internal.sort_direction),
        (
            (overrides.sort_key, overrides.sort_direction or SORT_ASC)
            if overrides.sort_key is not None
            else None
        ),
        overrides.on_sort_change,
    )
    page = choose_source(
        internal.page, overrides.current_page, overrides.on_page_change
    )
    page_size = choose_source(
        internal.page_size,
        overrides.current_page_size,
        overrides.on_page_size_change,
    )

    sort_key, sort_direction = sort.value
    requested_page = max(1, int(page.value))

    return ResolvedState(
        search_text=search.value or "",
        filter_values={
            key: "" if value is None else str(value)
            for key, value in dict(filters.value).items()
        },
        sort_key=sort_key or "",
        sort_direction=normalize_direction(sort_direction),
        page=requested_page,
        requested_page=requested_page,
        page_size=max(1, int(page_size.value)),
        mode=mode,
        sources={
            FIELD_SEARCH: search,
            FIELD_FILTERS: filters,
            FIELD_SORT: sort,
            FIELD_PAGE: page,
            FIELD_PAGE_SIZE: page_size,
        },
    )
