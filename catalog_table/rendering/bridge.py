"""Bridge between table components and Streamlit widgets."""

import html
import logging
import re
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

import pandas as pd
import streamlit as st

from ..core.descriptors import FILTER_SELECT, ColumnDescriptor, EmptyState
from ..core.intents import (
    FilterChanged,
    PageChanged,
    PageSizeChanged,
    RowClicked,
    SearchChanged,
    SortToggled,
)
from ..core.state import SORT_DESC
from .tree import Badge, FilterControl, PaginationView, RenderTree

if TYPE_CHECKING:
    from ..config import TableLabels
    from ..core.base import BaseComponent, TableView
    from ..core.state import StateManager

logger = logging.getLogger(__name__)

_SORT_ARROWS = {SORT_DESC: " ▼"}
_DEFAULT_SORT_ARROW = " ▲"

# Characters st.markdown would treat as formatting, LaTeX or directives
_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-!|~$:])")


def _dispatch(
    component: "BaseComponent", state_manager: "StateManager", intent: Any
) -> None:
    changed = component.dispatch(intent, state_manager)
    logger.debug(
        "Table '%s' handled %r (changed=%s)", component.table_key, intent, changed
    )


def _dispatch_widget_value(
    component: "BaseComponent",
    state_manager: "StateManager",
    widget_key: str,
    make_intent: Any,
) -> None:
    """on_change callback: read the widget value and dispatch its intent."""
    _dispatch(component, state_manager, make_intent(st.session_state[widget_key]))


def _sync_widget(widget_key: str, value: Any) -> None:
    """
    Push the resolved value into a widget before it is created.

    Caller-owned values can change between reruns without the widget
    being touched, so the widget must follow the resolved state.
    """
    if st.session_state.get(widget_key) != value:
        st.session_state[widget_key] = value


def _column_weight(width: Optional[str]) -> float:
    if width is None:
        return 1
    try:
        return max(float(width), 0.1)
    except (TypeError, ValueError):
        return 1


def escape_markdown(text: str) -> str:
    """Escape text so st.markdown shows it literally (no formatting, LaTeX or HTML)."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", html.escape(text, quote=False))


def _draw_content(content: Any, align: str = "left") -> None:
    if isinstance(content, Badge):
        color = "green" if content.positive else "gray"
        st.markdown(f":{color}-background[{escape_markdown(content.label)}]")
    elif isinstance(content, str):
        if align == "left":
            st.markdown(escape_markdown(content))
        else:
            st.markdown(
                f'<div style="text-align: {align}">{escape_markdown(content)}</div>',
                unsafe_allow_html=True,
            )
    elif callable(content):
        # Renderers may return a drawing function
        content()
    else:
        st.write(content)


def _draw_filter(
    component: "BaseComponent",
    state_manager: "StateManager",
    control: FilterControl,
    widget_key: str,
    labels: "TableLabels",
) -> None:
    def make_intent(value):
        return FilterChanged(control.key, value or "")

    callback_args = (component, state_manager, widget_key, make_intent)

    if control.kind == FILTER_SELECT:
        option_labels = dict(control.options)
        options = [""] + [value for value, _ in control.options]
        _sync_widget(widget_key, control.value if control.value in options else "")
        st.selectbox(
            control.label,
            options=options,
            format_func=lambda value: option_labels.get(value, labels.all_option),
            key=widget_key,
            on_change=_dispatch_widget_value,
            args=callback_args,
            label_visibility="collapsed",
        )
    else:
        _sync_widget(widget_key, control.value)
        st.text_input(
            control.label,
            key=widget_key,
            placeholder=control.placeholder,
            on_change=_dispatch_widget_value,
            args=callback_args,
            label_visibility="collapsed",
        )


def _draw_toolbar(
    component: "BaseComponent",
    state_manager: "StateManager",
    tree: RenderTree,
    key: str,
    labels: "TableLabels",
) -> None:
    toolbar = tree.toolbar
    if toolbar.is_empty:
        return

    slots = (1 if toolbar.search is not None else 0) + len(toolbar.filters)
    columns = st.columns(slots)
    slot = 0

    if toolbar.search is not None:
        widget_key = f"{key}_search"
        _sync_widget(widget_key, toolbar.search.value)
        with columns[slot]:
            st.text_input(
                toolbar.search.placeholder,
                key=widget_key,
                placeholder=toolbar.search.placeholder,
                on_change=_dispatch_widget_value,
                args=(component, state_manager, widget_key, SearchChanged),
                label_visibility="collapsed",
            )
        slot += 1

    for control in toolbar.filters:
        with columns[slot]:
            _draw_filter(
                component,
                state_manager,
                control,
                f"{key}_filter_{control.key}",
                labels,
            )
        slot += 1


def _draw_grid(
    component: "BaseComponent",
    state_manager: "StateManager",
    tree: RenderTree,
    key: str,
    labels: "TableLabels",
) -> None:
    if not tree.header:
        return

    weights: List[float] = [_column_weight(cell.width) for cell in tree.header]
    if tree.clickable_rows:
        weights.append(0.6)

    header_columns = st.columns(weights)
    for cell, column in zip(tree.header, header_columns):
        with column:
            title = cell.title
            if cell.sort_indicator is not None:
                title += _SORT_ARROWS.get(cell.sort_indicator, _DEFAULT_SORT_ARROW)
            st.button(
                title,
                key=f"{key}_sort_{cell.key}",
                on_click=_dispatch,
                args=(component, state_manager, SortToggled(cell.key)),
                disabled=not cell.sortable,
                type="tertiary",
            )

    for row in tree.rows:
        row_columns = st.columns(weights)
        for cell, column in zip(row.cells, row_columns):
            with column:
                _draw_content(cell.content, cell.align)
        if tree.clickable_rows:
            with row_columns[-1]:
                st.button(
                    labels.open_row,
                    key=f"{key}_row_{row.index}",
                    on_click=_dispatch,
                    args=(component, state_manager, RowClicked(row.record)),
                )


def _draw_cards(
    component: "BaseComponent",
    state_manager: "StateManager",
    tree: RenderTree,
    key: str,
    labels: "TableLabels",
) -> None:
    for card in tree.mobile_cards:
        with st.container(border=True):
            for field in card.fields:
                st.caption(field.label)
                _draw_content(field.content)
            if tree.clickable_rows:
                st.button(
                    labels.open_row,
                    key=f"{key}_card_{card.index}",
                    on_click=_dispatch,
                    args=(component, state_manager, RowClicked(card.record)),
                )


def _draw_empty_state(empty: EmptyState) -> None:
    with st.container(border=True):
        if isinstance(empty.icon, str):
            st.markdown(f"### {empty.icon}")
        elif callable(empty.icon):
            empty.icon()
        st.markdown(f"**{escape_markdown(empty.title)}**")
        if empty.description:
            st.caption(empty.description)
        if callable(empty.action):
            empty.action()
        elif empty.action is not None:
            st.markdown(str(empty.action))


def _draw_pagination(
    component: "BaseComponent",
    state_manager: "StateManager",
    pagination: PaginationView,
    key: str,
    labels: "TableLabels",
) -> None:
    state = pagination.state
    window = state.window
    controls = st.columns([1.5] + [0.6] * len(window) + [1.5])

    with controls[0]:
        st.button(
            labels.previous,
            key=f"{key}_previous",
            on_click=_dispatch,
            args=(component, state_manager, PageChanged(state.previous_page())),
            disabled=not state.has_previous,
        )
    for number, column in zip(window, controls[1:-1]):
        with column:
            st.button(
                str(number),
                key=f"{key}_page_{number}",
                on_click=_dispatch,
                args=(component, state_manager, PageChanged(state.goto(number))),
                type="primary" if number == state.page else "secondary",
            )
    with controls[-1]:
        st.button(
            labels.next,
            key=f"{key}_next",
            on_click=_dispatch,
            args=(component, state_manager, PageChanged(state.next_page())),
            disabled=not state.has_next,
        )

    summary_column, size_column = st.columns([3, 1])
    with summary_column:
        st.caption(pagination.summary)

    if pagination.page_size_options:
        options = sorted(set(pagination.page_size_options) | {state.page_size})
        widget_key = f"{key}_page_size"
        _sync_widget(widget_key, state.page_size)
        with size_column:
            st.selectbox(
                labels.page_size,
                options=options,
                key=widget_key,
                on_change=_dispatch_widget_value,
                args=(component, state_manager, widget_key, PageSizeChanged),
            )


def records_to_frame(
    records: Sequence[Any], columns: Sequence[ColumnDescriptor]
) -> pd.DataFrame:
    """
    Build the export frame of a record set.

    One column per descriptor, titled like the header, holding the raw
    extracted values (renderers are display-only).
    """
    return pd.DataFrame(
        [[column.extract(record) for column in columns] for record in records],
        columns=[column.title for column in columns],
    )


def render_component(
    component: "BaseComponent",
    state_manager: "StateManager",
    key: Optional[str] = None,
    compact: bool = False,
) -> "TableView":
    """
    Render a component in Streamlit.

    This function:
    1. Gets the table-owned state from the StateManager
    2. Calls component.prepare_view() to resolve state and derive the slice
    3. Draws toolbar, grid or cards (or the empty state) and pagination
    4. Wires widget callbacks to intents dispatched through the component

    Widget callbacks run before the next rerun, so a gesture is visible in
    the render that follows it.

    Args:
        component: The component to render
        state_manager: StateManager holding table-owned state
        key: Optional widget key prefix (defaults to the table key)
        compact: Draw cards for small viewports instead of a grid

    Returns:
        The TableView that was drawn
    """
    if key is None:
        key = f"ct_{component.table_key}"

    view = component.prepare_view(component.get_internal_state(state_manager))
    tree = view.tree
    labels = component._labels

    _draw_toolbar(component, state_manager, tree, key, labels)

    if tree.empty_state is not None:
        _draw_empty_state(tree.empty_state)
    elif compact:
        _draw_cards(component, state_manager, tree, key, labels)
    else:
        _draw_grid(component, state_manager, tree, key, labels)

    if tree.pagination is not None:
        _draw_pagination(component, state_manager, tree.pagination, key, labels)

    if component._config.get("downloadable", False) and view.derived.sorted:
        st.download_button(
            labels.download,
            data=records_to_frame(view.derived.sorted, component.columns)
            .to_csv(index=False)
            .encode("utf-8"),
            file_name=f"{component.table_key}.csv",
            mime="text/csv",
            key=f"{key}_download",
        )

    return view
