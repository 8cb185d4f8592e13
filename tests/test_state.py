"""Tests for ViewState and the session-backed StateManager."""

import pytest

from catalog_table.core.state import (
    StateManager,
    ViewState,
    get_default_state_manager,
    normalize_direction,
    reset_default_state_manager,
)


class TestViewState:
    def test_defaults(self):
        state = ViewState()
        assert state.search_text == ""
        assert state.filter_values == {}
        assert state.sort_key == ""
        assert state.sort_direction == "asc"
        assert state.page == 1
        assert state.page_size == 10

    @pytest.mark.parametrize("page, expected", [(0, 1), (-3, 1), (4, 4)])
    def test_page_at_least_one(self, page, expected):
        assert ViewState(page=page).page == expected

    def test_page_size_at_least_one(self):
        assert ViewState(page_size=0).page_size == 1

    def test_unknown_direction_becomes_asc(self):
        assert ViewState(sort_direction="sideways").sort_direction == "asc"
        assert normalize_direction(None) == "asc"
        assert normalize_direction("desc") == "desc"

    def test_replace_returns_new_value(self):
        state = ViewState()
        changed = state.replace(search_text="tea")
        assert state.search_text == ""
        assert changed.search_text == "tea"

    def test_filter_values_copied(self):
        values = {"status": "active"}
        state = ViewState(filter_values=values)
        values["status"] = "inactive"
        assert state.filter_values == {"status": "active"}

    def test_active_filters_skip_empty(self):
        state = ViewState(filter_values={"status": "active", "role": ""})
        assert state.active_filters() == {"status": "active"}

    def test_dict_round_trip(self):
        state = ViewState(
            search_text="co",
            filter_values={"status": "active"},
            sort_key="name",
            sort_direction="desc",
            page=3,
            page_size=25,
        )
        assert ViewState.from_dict(state.to_dict()) == state


class TestStateManager:
    def test_initializes_session_state(self, mock_streamlit):
        StateManager()
        assert "catalog_table_state" in mock_streamlit
        stored = mock_streamlit["catalog_table_state"]
        assert stored["counter"] == 0
        assert stored["views"] == {}
        assert set(stored) == {"counter", "views"}

    def test_get_returns_default_without_storing(self, state_manager):
        default = ViewState(page_size=25)
        assert state_manager.get_view_state("users", default) is default
        assert not state_manager.has_view_state("users")
        assert state_manager.get_view_state("users") == ViewState()

    def test_set_increments_counter_only_on_change(self, state_manager):
        state = ViewState(search_text="tea")
        assert state_manager.set_view_state("users", state) is True
        assert state_manager.counter == 1
        assert state_manager.set_view_state("users", ViewState(search_text="tea")) is False
        assert state_manager.counter == 1
        assert state_manager.get_view_state("users") == state

    def test_tables_are_independent(self, state_manager):
        state_manager.set_view_state("users", ViewState(page=2))
        state_manager.set_view_state("roles", ViewState(page=5))
        assert state_manager.get_view_state("users").page == 2
        assert state_manager.get_view_state("roles").page == 5
        assert set(state_manager.get_all_view_states()) == {"users", "roles"}

    def test_clear_view_state(self, state_manager):
        state_manager.set_view_state("users", ViewState(page=2))
        assert state_manager.clear_view_state("users") is True
        assert state_manager.clear_view_state("users") is False
        assert not state_manager.has_view_state("users")

    def test_clear(self, state_manager):
        state_manager.set_view_state("users", ViewState(page=2))
        state_manager.clear()
        assert state_manager.counter == 0
        assert state_manager.get_all_view_states() == {}

    def test_separate_session_keys(self, mock_streamlit):
        first = StateManager("first")
        second = StateManager("second")
        first.set_view_state("users", ViewState(page=3))
        assert not second.has_view_state("users")

    def test_state_survives_new_manager_instance(self, mock_streamlit):
        StateManager().set_view_state("users", ViewState(page=4))
        assert StateManager().get_view_state("users").page == 4

    def test_repr(self, state_manager):
        state_manager.set_view_state("users", ViewState())
        assert "users" in repr(state_manager)


def test_default_state_manager_is_shared(mock_streamlit):
    reset_default_state_manager()
    assert get_default_state_manager() is get_default_state_manager()
    reset_default_state_manager()
