"""Dual-mode data table backing list views."""

from typing import Any, Callable, Dict, Optional, Sequence

from ..config import TableLabels, get_default_mobile_columns, get_default_page_size
from ..core.base import BaseComponent, TableView
from ..core.descriptors import EmptyState, FilterDescriptor
from ..core.errors import DescriptorError
from ..core.registry import register_component
from ..core.resolver import (
    FIELD_SORT,
    MODE_CLIENT,
    MODE_SERVER,
    MODES,
    Overrides,
    ResolvedState,
    resolve_view_state,
)
from ..core.state import ViewState
from ..processing.frames import records_from_frame
from ..processing.pagination import total_pages_for
from ..processing.reconcile import passthrough_slice, reconcile
from ..rendering.tree import build_render_tree


@register_component("data_table")
class DataTable(BaseComponent):
    """
    Searchable, filterable, sortable, paged table over a record collection.

    Features:
    - Free-text search over string-valued columns
    - Select and free-text filters (exact match)
    - Single-column stable sort by clicking headers
    - Paging with a 5-page numbered window
    - Empty-state block, boolean badges, compact card layout
    - CSV download of the current sorted rows

    In client mode the table filters, sorts and pages ``data`` itself. In
    server mode ``data`` is assumed to be the already processed current
    page and ``total_items`` the count across all pages.

    Each state field (search, filters, sort, page, page size) is owned by
    the caller when both its value and its change callback are passed,
    and by the table otherwise. Sort is decided on its own, so sorting can
    be server-driven while search stays client-side.

    Example:
        # Self-contained list view
        users = DataTable(
            table_key="users",
            data=user_records,
            columns=[
                ColumnDescriptor("name", "Name", sortable=True),
                ColumnDescriptor("active", "Active"),
            ],
            filters=[FilterDescriptor("role", "All roles", options=roles)],
        )
        users()

        # Server-paginated list view
        history = DataTable(
            table_key="history",
            data=page_items,
            columns=columns,
            mode="server",
            total_items=total,
            current_page=page,
            on_page_change=set_page,
        )
    """

    _component_type: str = "data_table"

    def __init__(
        self,
        table_key: str,
        data: Any,
        columns: Sequence[Any],
        filters: Optional[Sequence[FilterDescriptor]] = None,
        mode: str = MODE_CLIENT,
        searchable: bool = True,
        search_placeholder: Optional[str] = None,
        page_size: Optional[int] = None,
        show_pagination: bool = True,
        page_size_options: Sequence[int] = (),
        empty_state: Optional[EmptyState] = None,
        labels: Optional[TableLabels] = None,
        mobile_columns: Optional[int] = None,
        on_row_click: Optional[Callable[[Any], Any]] = None,
        search_value: Optional[str] = None,
        on_search_change: Optional[Callable[[str], Any]] = None,
        filter_values: Optional[Dict[str, str]] = None,
        on_filter_change: Optional[Callable[[str, str], Any]] = None,
        sort_key: Optional[str] = None,
        sort_direction: Optional[str] = None,
        on_sort_change: Optional[Callable[[str, str], Any]] = None,
        current_page: Optional[int] = None,
        on_page_change: Optional[Callable[[int], Any]] = None,
        current_page_size: Optional[int] = None,
        on_page_size_change: Optional[Callable[[int], Any]] = None,
        total_items: Optional[int] = None,
        **kwargs,
    ):
        """
        Initialize the DataTable component.

        Args:
            table_key: Unique key for the table's own state (MANDATORY).
            data: Record collection: a sequence of mappings/objects, or a
                polars/pandas frame (converted to records).
            columns: ColumnDescriptor instances or column definition dicts.
            filters: FilterDescriptor instances, rendered next to the search.
            mode: 'client' (table filters/sorts/pages ``data``) or 'server'
                (``data`` is shown as given).
            searchable: Show the free-text search box.
            search_placeholder: Placeholder of the search box.
            page_size: Initial rows per page of table-owned paging.
                Defaults to CATALOG_TABLE_PAGE_SIZE (10).
            show_pagination: Enable paging. If False all rows are shown.
            page_size_options: Choices for a page size selector (hidden if empty).
            empty_state: Block shown when the current page has no rows.
            labels: User-facing strings (already localized).
            mobile_columns: Columns shown per card in the compact layout.
                Defaults to CATALOG_TABLE_MOBILE_COLUMNS (3).
            on_row_click: Called with the record when a row is clicked.
            search_value / on_search_change: Caller-owned search text.
            filter_values / on_filter_change: Caller-owned filter values;
                the callback receives ``(key, value)``.
            sort_key / sort_direction / on_sort_change: Caller-owned sort;
                the callback receives ``(key, direction)``.
            current_page / on_page_change: Caller-owned page.
            current_page_size / on_page_size_change: Caller-owned page size.
            total_items: Row count across all pages (server mode).
            **kwargs: Additional configuration options
                (``downloadable=True`` adds a CSV download of the sorted rows)

        Raises:
            DescriptorError: If ``mode`` or descriptors are invalid
        """
        if mode not in MODES:
            raise DescriptorError(
                f"Invalid mode '{mode}'. Expected one of {list(MODES)}"
            )

        super().__init__(
            table_key=table_key,
            columns=columns,
            filters=filters,
            labels=labels,
            empty_state=empty_state,
            on_row_click=on_row_click,
            **kwargs,
        )

        self._records = records_from_frame(data) if data is not None else []
        self._mode = mode
        self._searchable = searchable
        self._search_placeholder = search_placeholder
        self._page_size = page_size if page_size else get_default_page_size()
        self._show_pagination = show_pagination
        self._page_size_options = tuple(page_size_options)
        self._mobile_columns = (
            mobile_columns
            if mobile_columns is not None
            else get_default_mobile_columns()
        )
        self._total_items = total_items
        self._overrides = Overrides(
            search_value=search_value,
            on_search_change=on_search_change,
            filter_values=filter_values,
            on_filter_change=on_filter_change,
            sort_key=sort_key,
            sort_direction=sort_direction,
            on_sort_change=on_sort_change,
            current_page=current_page,
            on_page_change=on_page_change,
            current_page_size=current_page_size,
            on_page_size_change=on_page_size_change,
        )

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def records(self) -> list:
        return list(self._records)

    def initial_state(self) -> ViewState:
        return ViewState(page_size=self._page_size)

    def resolve(self, internal: ViewState) -> ResolvedState:
        return resolve_view_state(
            internal, self._overrides, self._mode, defaults=self.initial_state()
        )

    def prepare_view(self, internal: ViewState) -> TableView:
        """
        Resolve state, derive the slice to show and build the render tree.

        Args:
            internal: Table-owned state from the StateManager

        Returns:
            TableView
        """
        resolved = self.resolve(internal)

        if self._mode == MODE_SERVER:
            derived = passthrough_slice(
                self._records,
                self._total_items,
                resolved.page_size,
                paginate=self._show_pagination,
            )
            resolved = resolved.clamped(derived.total_pages)
        else:
            # A caller-owned sort means the caller delivers rows in order
            sort_key = resolved.sort_key
            if resolved.is_caller_owned(FIELD_SORT):
                sort_key = ""
            unpaged = reconcile(
                self._records,
                self._columns,
                search_text=resolved.search_text,
                filter_values=resolved.filter_values,
                sort_key=sort_key,
                sort_direction=resolved.sort_direction,
                filters=self._filters,
                paginate=False,
            )
            if self._show_pagination:
                resolved = resolved.clamped(
                    total_pages_for(unpaged.total_count, resolved.page_size)
                )
                derived = unpaged.paginated(resolved.page, resolved.page_size)
            else:
                resolved = resolved.clamped(1)
                derived = unpaged

        tree = build_render_tree(
            self._columns,
            self._filters,
            resolved,
            derived,
            labels=self._labels,
            searchable=self._searchable,
            search_placeholder=self._search_placeholder,
            show_pagination=self._show_pagination,
            empty_state=self._empty_state,
            mobile_columns=self._mobile_columns,
            page_size_options=self._page_size_options,
            clickable_rows=self._on_row_click is not None,
        )
        return TableView(resolved=resolved, derived=derived, tree=tree)
