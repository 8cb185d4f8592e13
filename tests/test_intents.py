"""Tests for sort toggling and the table-owned state reducer."""

import pytest

from catalog_table.core.descriptors import ColumnDescriptor
from catalog_table.core.intents import (
    FilterChanged,
    PageChanged,
    PageSizeChanged,
    RowClicked,
    SearchChanged,
    SortToggled,
    reduce_view_state,
    toggle_sort,
)
from catalog_table.core.state import ViewState

COLUMNS = [
    ColumnDescriptor("name", sortable=True),
    ColumnDescriptor("age", sortable=True),
    ColumnDescriptor("notes"),
]


class TestToggleSort:
    def test_new_column_sorts_ascending(self):
        assert toggle_sort(COLUMNS, "", "asc", "name") == ("name", "asc")

    def test_same_column_flips_direction(self):
        assert toggle_sort(COLUMNS, "name", "asc", "name") == ("name", "desc")
        assert toggle_sort(COLUMNS, "name", "desc", "name") == ("name", "asc")

    def test_switching_column_resets_to_ascending(self):
        assert toggle_sort(COLUMNS, "name", "desc", "age") == ("age", "asc")

    def test_unsortable_column_is_noop(self):
        assert toggle_sort(COLUMNS, "name", "asc", "notes") is None

    def test_unknown_column_is_noop(self):
        assert toggle_sort(COLUMNS, "name", "asc", "missing") is None


class TestReduceViewState:
    @pytest.mark.parametrize(
        "intent",
        [
            SearchChanged("tea"),
            FilterChanged("status", "active"),
            SortToggled("name"),
            PageSizeChanged(25),
        ],
    )
    def test_changes_return_to_first_page(self, intent):
        state = ViewState(page=4)
        assert reduce_view_state(state, intent, COLUMNS).page == 1

    def test_search(self):
        state = reduce_view_state(ViewState(), SearchChanged("tea"), COLUMNS)
        assert state.search_text == "tea"

    def test_filter_merges_with_existing(self):
        state = ViewState(filter_values={"status": "active"})
        state = reduce_view_state(state, FilterChanged("role", "admin"), COLUMNS)
        assert state.filter_values == {"status": "active", "role": "admin"}

    def test_filter_cleared_with_empty_value(self):
        state = ViewState(filter_values={"status": "active"})
        state = reduce_view_state(state, FilterChanged("status", ""), COLUMNS)
        assert state.active_filters() == {}

    def test_sort_toggle_twice(self):
        state = reduce_view_state(ViewState(), SortToggled("name"), COLUMNS)
        assert (state.sort_key, state.sort_direction) == ("name", "asc")
        state = reduce_view_state(state, SortToggled("name"), COLUMNS)
        assert (state.sort_key, state.sort_direction) == ("name", "desc")

    def test_page_change_keeps_other_fields(self):
        state = ViewState(search_text="tea", page=1)
        state = reduce_view_state(state, PageChanged(3), COLUMNS)
        assert state.page == 3
        assert state.search_text == "tea"

    def test_page_below_one_raised_to_one(self):
        assert reduce_view_state(ViewState(page=2), PageChanged(-1), COLUMNS).page == 1

    @pytest.mark.parametrize(
        "intent",
        [
            SearchChanged(""),
            FilterChanged("status", ""),
            SortToggled("notes"),
            PageSizeChanged(10),
            RowClicked({"name": "A"}),
            object(),
        ],
    )
    def test_noops_return_same_state(self, intent):
        state = ViewState(page=3)
        assert reduce_view_state(state, intent, COLUMNS) is state
