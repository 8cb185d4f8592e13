"""Typed state-change intents and the reducer for table-owned state.

Every user gesture on a table becomes one of these intents. The component
routes each intent either to the caller's callback (caller-owned field) or
through ``reduce_view_state`` into the StateManager (table-owned field).
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from .descriptors import ColumnDescriptor
from .state import SORT_ASC, SORT_DESC, ViewState


@dataclass(frozen=True)
class SearchChanged:
    text: str


@dataclass(frozen=True)
class FilterChanged:
    key: str
    value: str


@dataclass(frozen=True)
class SortToggled:
    key: str


@dataclass(frozen=True)
class PageChanged:
    page: int


@dataclass(frozen=True)
class PageSizeChanged:
    page_size: int


@dataclass(frozen=True)
class RowClicked:
    record: Any


def find_column(
    columns: Sequence[ColumnDescriptor], key: str
) -> Optional[ColumnDescriptor]:
    """Return the column with the given key, or None."""
    for column in columns:
        if column.key == key:
            return column
    return None


def toggle_sort(
    columns: Sequence[ColumnDescriptor],
    sort_key: str,
    sort_direction: str,
    clicked_key: str,
) -> Optional[Tuple[str, str]]:
    """
    Compute the sort after a header click.

    Clicking the active sortable column flips the direction; clicking
    another sortable column sorts by it ascending.

    Args:
        columns: Column descriptors of the table
        sort_key: Currently active sort key ('' if none)
        sort_direction: Currently active direction
        clicked_key: Key of the clicked column

    Returns:
        New ``(sort_key, sort_direction)``, or None if the click is a no-op
        (non-sortable or unknown column)
    """
    column = find_column(columns, clicked_key)
    if column is None or not column.sortable:
        return None
    if sort_key == clicked_key:
        return (clicked_key, SORT_DESC if sort_direction == SORT_ASC else SORT_ASC)
    return (clicked_key, SORT_ASC)


def reduce_view_state(
    state: ViewState,
    intent: Any,
    columns: Sequence[ColumnDescriptor],
) -> ViewState:
    """
    Apply an intent to table-owned state.

    Search, filter, sort and page-size changes return to the first page,
    since the previous page number no longer refers to the same rows.

    Args:
        state: Current table-owned state
        intent: One of the intent types of this module
        columns: Column descriptors (needed for sort toggling)

    Returns:
        New ViewState (``state`` itself if the intent changes nothing)
    """
    if isinstance(intent, SearchChanged):
        if intent.text == state.search_text:
            return state
        return state.replace(search_text=intent.text, page=1)

    if isinstance(intent, FilterChanged):
        if state.filter_values.get(intent.key, "") == intent.value:
            return state
        filter_values = dict(state.filter_values)
        filter_values[intent.key] = intent.value
        return state.replace(filter_values=filter_values, page=1)

    if isinstance(intent, SortToggled):
        toggled = toggle_sort(
            columns, state.sort_key, state.sort_direction, intent.key
        )
        if toggled is None:
            return state
        sort_key, sort_direction = toggled
        return state.replace(sort_key=sort_key, sort_direction=sort_direction, page=1)

    if isinstance(intent, PageChanged):
        return state.replace(page=max(1, intent.page))

    if isinstance(intent, PageSizeChanged):
        page_size = max(1, intent.page_size)
        if page_size == state.page_size:
            return state
        return state.replace(page_size=page_size, page=1)

    # RowClicked and unknown intents never touch view state
    return state
