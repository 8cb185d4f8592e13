"""Presentation adapter: turn resolved state and a derived slice into a render tree.

The render tree is plain data. It fixes *what* a table shows (toolbar
values, header sort indicators, cell contents, empty state, pagination)
without deciding *how* it is drawn, so the Streamlit bridge stays a thin
drawing layer and the content rules can be tested without a UI.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from ..config import TableLabels
from ..core.descriptors import ColumnDescriptor, EmptyState, FilterSet
from ..core.resolver import ResolvedState
from ..processing.pagination import PaginationState
from ..processing.reconcile import DerivedSlice


@dataclass(frozen=True)
class Badge:
    """Affirmative/negative marker shown for boolean values."""

    label: str
    positive: bool


@dataclass(frozen=True)
class SearchControl:
    value: str
    placeholder: str


@dataclass(frozen=True)
class FilterControl:
    key: str
    label: str
    kind: str
    value: str
    options: Tuple[Tuple[str, str], ...] = ()
    placeholder: Optional[str] = None


@dataclass(frozen=True)
class Toolbar:
    search: Optional[SearchControl]
    filters: Tuple[FilterControl, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.search is None and not self.filters


@dataclass(frozen=True)
class HeaderCell:
    """
    One column header.

    Attributes:
        sort_indicator: 'asc' or 'desc' on the active sort column, else None
    """

    key: str
    title: str
    align: str
    width: Optional[str]
    sortable: bool
    sort_indicator: Optional[str] = None


@dataclass(frozen=True)
class Cell:
    key: str
    content: Any
    align: str


@dataclass(frozen=True)
class Row:
    index: int
    record: Any
    cells: Tuple[Cell, ...]


@dataclass(frozen=True)
class MobileField:
    label: str
    content: Any


@dataclass(frozen=True)
class MobileCard:
    index: int
    record: Any
    fields: Tuple[MobileField, ...]


@dataclass(frozen=True)
class PaginationView:
    state: PaginationState
    summary: str
    page_size_options: Tuple[int, ...] = ()


@dataclass(frozen=True)
class RenderTree:
    """
    Everything one render pass of a table shows.

    ``empty_state`` is set exactly when the current page has no rows; the
    drawing layer shows it instead of an empty table body.
    """

    toolbar: Toolbar
    header: Tuple[HeaderCell, ...]
    rows: Tuple[Row, ...]
    mobile_cards: Tuple[MobileCard, ...]
    empty_state: Optional[EmptyState]
    pagination: Optional[PaginationView]
    clickable_rows: bool = False


def display_value(value: Any, labels: TableLabels) -> Any:
    """
    Default cell content for a column without a renderer.

    Booleans become an affirmative/negative Badge, missing values an
    empty string, everything else its string form.
    """
    if isinstance(value, (bool, np.bool_)):
        return Badge(
            label=labels.affirmative if value else labels.negative,
            positive=bool(value),
        )
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value)


def cell_content(column: ColumnDescriptor, record: Any, labels: TableLabels) -> Any:
    """Content of one cell: the column's renderer, else the display value."""
    value = column.extract(record)
    if column.render is not None:
        return column.render(value, record)
    return display_value(value, labels)


def mobile_content(
    column: ColumnDescriptor, record: Any, labels: TableLabels
) -> Any:
    if column.mobile_render is not None:
        return column.mobile_render(record)
    return cell_content(column, record, labels)


def build_header(
    columns: Sequence[ColumnDescriptor], resolved: ResolvedState
) -> Tuple[HeaderCell, ...]:
    return tuple(
        HeaderCell(
            key=column.key,
            title=column.title,
            align=column.align,
            width=column.width,
            sortable=column.sortable,
            sort_indicator=(
                resolved.sort_direction
                if column.sortable and column.key == resolved.sort_key
                else None
            ),
        )
        for column in columns
    )


def build_toolbar(
    filters: FilterSet,
    resolved: ResolvedState,
    labels: TableLabels,
    searchable: bool = True,
    search_placeholder: Optional[str] = None,
) -> Toolbar:
    search = None
    if searchable:
        search = SearchControl(
            value=resolved.search_text,
            placeholder=search_placeholder or labels.search_placeholder,
        )
    controls = tuple(
        FilterControl(
            key=descriptor.key,
            label=descriptor.label,
            kind=descriptor.kind,
            value=resolved.filter_values.get(descriptor.key, ""),
            options=descriptor.options,
            placeholder=descriptor.placeholder or descriptor.label,
        )
        for descriptor in filters
    )
    return Toolbar(search=search, filters=controls)


def build_render_tree(
    columns: Sequence[ColumnDescriptor],
    filters: FilterSet,
    resolved: ResolvedState,
    derived: DerivedSlice,
    labels: Optional[TableLabels] = None,
    searchable: bool = True,
    search_placeholder: Optional[str] = None,
    show_pagination: bool = True,
    empty_state: Optional[EmptyState] = None,
    mobile_columns: int = 3,
    page_size_options: Sequence[int] = (),
    clickable_rows: bool = False,
) -> RenderTree:
    """
    Build the render tree of one table render pass.

    Args:
        columns: Column descriptors
        filters: Filter descriptors
        resolved: Resolved (and clamped) view state
        derived: Slice to show
        labels: User-facing strings
        searchable: Whether to show the search box
        search_placeholder: Placeholder overriding the label default
        show_pagination: Whether paging controls are shown
        empty_state: Caller-supplied empty-state block
        mobile_columns: Number of columns in the compact layout
        page_size_options: Choices for the page size selector (none = hidden)
        clickable_rows: Whether rows react to clicks

    Returns:
        RenderTree
    """
    labels = labels or TableLabels()

    rows = tuple(
        Row(
            index=index,
            record=record,
            cells=tuple(
                Cell(
                    key=column.key,
                    content=cell_content(column, record, labels),
                    align=column.align,
                )
                for column in columns
            ),
        )
        for index, record in enumerate(derived.paged)
    )

    mobile = tuple(columns[: max(0, mobile_columns)])
    mobile_cards = tuple(
        MobileCard(
            index=index,
            record=record,
            fields=tuple(
                MobileField(
                    label=column.title,
                    content=mobile_content(column, record, labels),
                )
                for column in mobile
            ),
        )
        for index, record in enumerate(derived.paged)
    )

    empty = None
    if derived.is_empty:
        empty = empty_state or EmptyState()
        if not empty.title:
            empty = EmptyState(
                title=labels.empty_title,
                description=empty.description,
                icon=empty.icon,
                action=empty.action,
            )

    pagination = None
    if show_pagination:
        state = PaginationState(
            page=resolved.page,
            total_pages=derived.total_pages,
            page_size=resolved.page_size,
            total_items=derived.total_count,
        )
        pagination = PaginationView(
            state=state,
            summary=labels.format_summary(
                state.start_item, state.end_item, state.total_items
            ),
            page_size_options=tuple(page_size_options),
        )

    return RenderTree(
        toolbar=build_toolbar(
            filters, resolved, labels, searchable, search_placeholder
        ),
        header=build_header(columns, resolved),
        rows=rows,
        mobile_cards=mobile_cards,
        empty_state=empty,
        pagination=pagination,
        clickable_rows=clickable_rows,
    )
