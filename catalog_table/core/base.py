"""Base component class for all table components."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

from ..config import TableLabels
from .descriptors import (
    ColumnDescriptor,
    EmptyState,
    FilterDescriptor,
    FilterSet,
    columns_from_definitions,
)
from .errors import DescriptorError
from .intents import (
    FilterChanged,
    PageChanged,
    PageSizeChanged,
    RowClicked,
    SearchChanged,
    SortToggled,
    reduce_view_state,
    toggle_sort,
)
from .resolver import (
    FIELD_FILTERS,
    FIELD_PAGE,
    FIELD_PAGE_SIZE,
    FIELD_SEARCH,
    FIELD_SORT,
    MODE_SERVER,
    Caller,
    ResolvedState,
)
from .state import ViewState

if TYPE_CHECKING:
    from ..processing.reconcile import DerivedSlice
    from ..rendering.tree import RenderTree
    from .state import StateManager

logger = logging.getLogger(__name__)

_INTENT_FIELDS = {
    SearchChanged: FIELD_SEARCH,
    FilterChanged: FIELD_FILTERS,
    SortToggled: FIELD_SORT,
    PageChanged: FIELD_PAGE,
    PageSizeChanged: FIELD_PAGE_SIZE,
}


@dataclass(frozen=True)
class TableView:
    """Result of one render pass: resolved state, data slice and render tree."""

    resolved: ResolvedState
    derived: "DerivedSlice"
    tree: "RenderTree"


class BaseComponent(ABC):
    """
    Abstract base class for all table components.

    A component is rebuilt on every Streamlit rerun from the caller's
    current arguments. Whatever state it owns itself lives in a
    StateManager under ``table_key``, so it survives reruns.

    Attributes:
        _table_key: Unique key of this table's state
        _columns: Column descriptors
        _filters: Filter descriptor set
        _labels: User-facing strings
        _empty_state: Caller-supplied empty-state block
        _on_row_click: Caller's row click callback
        _config: Extra options passed through to the renderer
        _component_type: Class-level component type identifier
    """

    _component_type: str = ""

    def __init__(
        self,
        table_key: str,
        columns: Sequence[Any],
        filters: Optional[Sequence[FilterDescriptor]] = None,
        labels: Optional[TableLabels] = None,
        empty_state: Optional[EmptyState] = None,
        on_row_click: Optional[Callable[[Any], Any]] = None,
        **kwargs,
    ):
        """
        Initialize the component.

        Args:
            table_key: Unique key for this table's internally held state
                (MANDATORY). Two tables with the same key share state.
            columns: ColumnDescriptor instances, or column definition dicts
                (see ``columns_from_definitions``)
            filters: FilterDescriptor instances (keys must be unique)
            labels: User-facing strings (already localized)
            empty_state: Block shown when the current page has no rows
            on_row_click: Called with the record when a row is clicked
            **kwargs: Extra options passed through to the renderer

        Raises:
            DescriptorError: If descriptors are invalid
        """
        if not table_key:
            raise DescriptorError("table_key must be a non-empty string")

        column_list = [
            column
            if isinstance(column, ColumnDescriptor)
            else columns_from_definitions([column])[0]
            for column in columns
        ]

        self._table_key = table_key
        self._columns: List[ColumnDescriptor] = column_list
        self._filters = FilterSet(filters or ())
        self._labels = labels or TableLabels()
        self._empty_state = empty_state
        self._on_row_click = on_row_click
        self._config: Dict[str, Any] = kwargs

    @property
    def table_key(self) -> str:
        return self._table_key

    @property
    def columns(self) -> List[ColumnDescriptor]:
        return list(self._columns)

    @property
    def filters(self) -> FilterSet:
        return self._filters

    @abstractmethod
    def initial_state(self) -> ViewState:
        """Return the state a table starts with before any interaction."""
        pass

    @abstractmethod
    def resolve(self, internal: ViewState) -> ResolvedState:
        """
        Resolve the view state of a render pass (page not yet clamped).

        Args:
            internal: State held by the StateManager

        Returns:
            ResolvedState
        """
        pass

    @abstractmethod
    def prepare_view(self, internal: ViewState) -> TableView:
        """
        Compute everything a render pass shows.

        Args:
            internal: State held by the StateManager

        Returns:
            TableView with clamped resolved state, derived slice and tree
        """
        pass

    def get_internal_state(self, state_manager: "StateManager") -> ViewState:
        return state_manager.get_view_state(self._table_key, self.initial_state())

    def dispatch(self, intent: Any, state_manager: "StateManager") -> bool:
        """
        Route a state-change intent to its owner.

        Caller-owned fields go to the caller's callback; table-owned fields
        go through the reducer into the StateManager, except in server mode
        where they are dropped. Row clicks always go to ``on_row_click``.

        Args:
            intent: One of the intent types from ``core.intents``
            state_manager: Holder of this table's own state

        Returns:
            True if a callback ran or the held state changed
        """
        if isinstance(intent, RowClicked):
            if self._on_row_click is None:
                return False
            self._on_row_click(intent.record)
            return True

        field_name = _INTENT_FIELDS.get(type(intent))
        if field_name is None:
            logger.debug("Ignoring unknown intent %r", intent)
            return False

        internal = self.get_internal_state(state_manager)
        resolved = self.resolve(internal)
        source = resolved.source(field_name)

        if isinstance(source, Caller):
            logger.debug(
                "Dispatching %r to caller of table '%s'", intent, self._table_key
            )
            return self._notify_caller(intent, source, resolved)

        if resolved.mode == MODE_SERVER:
            # The caller's rows would not follow a table-owned change
            logger.debug(
                "Ignoring %r: table '%s' does not own server-mode state",
                intent,
                self._table_key,
            )
            return False

        logger.debug("Applying %r to table '%s'", intent, self._table_key)
        new_state = reduce_view_state(internal, intent, self._columns)
        return state_manager.set_view_state(self._table_key, new_state)

    def _notify_caller(
        self, intent: Any, source: Caller, resolved: ResolvedState
    ) -> bool:
        if isinstance(intent, SearchChanged):
            source.on_change(intent.text)
        elif isinstance(intent, FilterChanged):
            source.on_change(intent.key, intent.value)
        elif isinstance(intent, SortToggled):
            toggled = toggle_sort(
                self._columns,
                resolved.sort_key,
                resolved.sort_direction,
                intent.key,
            )
            if toggled is None:
                return False
            source.on_change(*toggled)
        elif isinstance(intent, PageChanged):
            source.on_change(max(1, intent.page))
        elif isinstance(intent, PageSizeChanged):
            source.on_change(max(1, intent.page_size))
        return True

    def __call__(
        self,
        key: Optional[str] = None,
        state_manager: Optional["StateManager"] = None,
        compact: bool = False,
    ) -> TableView:
        """
        Render the component in Streamlit.

        Args:
            key: Optional widget key prefix (defaults to the table key)
            state_manager: Optional StateManager holding table-owned state.
                If not provided, uses a default shared StateManager.
            compact: Render the small-viewport card layout instead of a grid

        Returns:
            The TableView that was drawn
        """
        from ..rendering.bridge import render_component
        from .state import get_default_state_manager

        if state_manager is None:
            state_manager = get_default_state_manager()

        return render_component(
            component=self, state_manager=state_manager, key=key, compact=compact
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"table_key='{self._table_key}', "
            f"columns={[column.key for column in self._columns]}, "
            f"filters={self._filters.keys()}, "
            f"config={self._config})"
        )
