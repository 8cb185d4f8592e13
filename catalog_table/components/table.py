"""Plain table: records rendered in the order the caller delivers them."""

from typing import Any, Callable, Optional, Sequence

from ..core.base import BaseComponent, TableView
from ..core.descriptors import EmptyState
from ..core.intents import SortToggled
from ..core.registry import register_component
from ..core.resolver import (
    MODE_SERVER,
    Overrides,
    ResolvedState,
    resolve_view_state,
)
from ..core.state import SORT_ASC, ViewState
from ..processing.frames import records_from_frame
from ..processing.reconcile import passthrough_slice
from ..rendering.tree import build_render_tree


def _ignore_sort(key: str, direction: str) -> None:
    pass


@register_component("table")
class Table(BaseComponent):
    """
    Table without search, filters or paging.

    Sorting is entirely the caller's: header clicks call
    ``on_sort(key, direction)`` and the caller re-renders with sorted
    records. Without ``on_sort`` header clicks do nothing.

    Example:
        Table(
            table_key="attribute_values",
            data=sorted_values,
            columns=columns,
            sort_key=sort_key,
            sort_direction=sort_direction,
            on_sort=set_sort,
        )()
    """

    _component_type: str = "table"

    def __init__(
        self,
        table_key: str,
        data: Any,
        columns: Sequence[Any],
        sort_key: Optional[str] = None,
        sort_direction: Optional[str] = None,
        on_sort: Optional[Callable[[str, str], Any]] = None,
        on_row_click: Optional[Callable[[Any], Any]] = None,
        empty_state: Optional[EmptyState] = None,
        **kwargs,
    ):
        """
        Initialize the Table component.

        Args:
            table_key: Unique key of the table (MANDATORY).
            data: Records in display order (sequence or polars/pandas frame).
            columns: ColumnDescriptor instances or column definition dicts.
            sort_key: Active sort column, drawn as a header indicator.
            sort_direction: Active sort direction ('asc' or 'desc').
            on_sort: Called with ``(key, direction)`` on sortable header clicks.
            on_row_click: Called with the record when a row is clicked.
            empty_state: Block shown when there are no records.
            **kwargs: Additional configuration options (labels, ...)
        """
        super().__init__(
            table_key=table_key,
            columns=columns,
            empty_state=empty_state,
            on_row_click=on_row_click,
            **kwargs,
        )
        self._records = records_from_frame(data) if data is not None else []
        self._on_sort = on_sort
        # The sort is always the caller's, even when it cannot be changed
        self._overrides = Overrides(
            sort_key=sort_key if sort_key is not None else "",
            sort_direction=sort_direction or SORT_ASC,
            on_sort_change=on_sort or _ignore_sort,
        )

    def initial_state(self) -> ViewState:
        return ViewState(page_size=max(1, len(self._records)))

    def resolve(self, internal: ViewState) -> ResolvedState:
        return resolve_view_state(
            internal, self._overrides, MODE_SERVER, defaults=self.initial_state()
        )

    def dispatch(self, intent: Any, state_manager) -> bool:
        if isinstance(intent, SortToggled) and self._on_sort is None:
            return False
        return super().dispatch(intent, state_manager)

    def prepare_view(self, internal: ViewState) -> TableView:
        resolved = self.resolve(internal)
        derived = passthrough_slice(
            self._records, None, resolved.page_size, paginate=False
        )
        resolved = resolved.clamped(derived.total_pages)
        tree = build_render_tree(
            self._columns,
            self._filters,
            resolved,
            derived,
            labels=self._labels,
            searchable=False,
            show_pagination=False,
            empty_state=self._empty_state,
            clickable_rows=self._on_row_click is not None,
        )
        return TableView(resolved=resolved, derived=derived, tree=tree)
