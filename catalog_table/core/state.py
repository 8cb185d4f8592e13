"""View state and its session-backed owner for self-controlled tables."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_DIRECTIONS = (SORT_ASC, SORT_DESC)

# Shared manager used by components rendered without one
_default_state_manager: Optional["StateManager"] = None


def get_default_state_manager() -> "StateManager":
    """
    Return the StateManager shared by components rendered without one.

    Returns:
        The shared StateManager
    """
    global _default_state_manager
    if _default_state_manager is None:
        _default_state_manager = StateManager()
    return _default_state_manager


def reset_default_state_manager() -> None:
    """Forget the shared StateManager so the next call creates a new one."""
    global _default_state_manager
    _default_state_manager = None


def normalize_direction(direction: Optional[str]) -> str:
    """Map anything that is not 'desc' to 'asc'."""
    return SORT_DESC if direction == SORT_DESC else SORT_ASC


@dataclass(frozen=True)
class ViewState:
    """
    Mutable-by-replacement state of one table view.

    Instances are never modified in place; every change produces a new
    value through ``replace()``, so a render never observes a half-applied
    update.

    Attributes:
        search_text: Free-text search term ('' = no search)
        filter_values: Mapping of filter key to selected value ('' = inactive)
        sort_key: Column key to sort by ('' = collection order)
        sort_direction: 'asc' or 'desc'
        page: 1-based page number
        page_size: Rows per page
    """

    search_text: str = ""
    filter_values: Dict[str, str] = field(default_factory=dict)
    sort_key: str = ""
    sort_direction: str = SORT_ASC
    page: int = 1
    page_size: int = 10

    def __post_init__(self) -> None:
        object.__setattr__(self, "search_text", self.search_text or "")
        object.__setattr__(self, "filter_values", dict(self.filter_values or {}))
        object.__setattr__(self, "sort_key", self.sort_key or "")
        object.__setattr__(
            self, "sort_direction", normalize_direction(self.sort_direction)
        )
        object.__setattr__(self, "page", max(1, int(self.page)))
        object.__setattr__(self, "page_size", max(1, int(self.page_size)))

    def replace(self, **changes: Any) -> "ViewState":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def active_filters(self) -> Dict[str, str]:
        """Return only the filters that currently restrict the record set."""
        return {key: value for key, value in self.filter_values.items() if value}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "search_text": self.search_text,
            "filter_values": dict(self.filter_values),
            "sort_key": self.sort_key,
            "sort_direction": self.sort_direction,
            "page": self.page,
            "page_size": self.page_size,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ViewState":
        return cls(
            search_text=data.get("search_text", ""),
            filter_values=data.get("filter_values") or {},
            sort_key=data.get("sort_key", ""),
            sort_direction=data.get("sort_direction", SORT_ASC),
            page=data.get("page", 1),
            page_size=data.get("page_size", 10),
        )


class StateManager:
    """
    Owns the view state of self-controlled tables.

    Features:
        - One ViewState per table key, replaced atomically
        - Counter incremented on every effective change
        - Stored in st.session_state, so it survives reruns

    Tables in client mode read their internal state from here on every
    render and write the reducer's result back when the user interacts.
    """

    def __init__(self, session_key: str = "catalog_table_state"):
        """
        Create a manager over one session_state entry.

        Args:
            session_key: session_state entry holding the view states. Use
                different keys for independent groups of tables.
        """
        self._session_key = session_key
        self._ensure_session_state()

    def _ensure_session_state(self) -> None:
        """Create the stored dict on first use in this session."""
        import streamlit as st

        if self._session_key not in st.session_state:
            st.session_state[self._session_key] = {
                "counter": 0,
                "views": {},
            }

    @property
    def _state(self) -> Dict[str, Any]:
        """The stored dict holding counter and views."""
        import streamlit as st

        self._ensure_session_state()
        return st.session_state[self._session_key]

    @property
    def counter(self) -> int:
        """Number of effective view state changes in this session."""
        return self._state["counter"]

    def get_view_state(
        self, table_key: str, default: Optional[ViewState] = None
    ) -> ViewState:
        """
        Get the view state held for a table.

        Args:
            table_key: Unique key of the table
            default: State to return (and not store) if none is held yet

        Returns:
            The held ViewState, ``default``, or a fresh ViewState
        """
        current = self._state["views"].get(table_key)
        if current is not None:
            return current
        return default if default is not None else ViewState()

    def has_view_state(self, table_key: str) -> bool:
        return table_key in self._state["views"]

    def set_view_state(self, table_key: str, state: ViewState) -> bool:
        """
        Replace the view state held for a table.

        Args:
            table_key: Unique key of the table
            state: The new state

        Returns:
            True if the held state changed
        """
        current = self._state["views"].get(table_key)
        if current == state:
            return False

        self._state["views"][table_key] = state
        self._state["counter"] += 1
        return True

    def clear_view_state(self, table_key: str) -> bool:
        """
        Forget the view state of a table.

        Returns:
            True if a state was cleared, False if none was held
        """
        if table_key in self._state["views"]:
            del self._state["views"][table_key]
            self._state["counter"] += 1
            return True
        return False

    def get_all_view_states(self) -> Dict[str, ViewState]:
        return self._state["views"].copy()

    def clear(self) -> None:
        """Clear all view states and reset counter."""
        self._state["views"] = {}
        self._state["counter"] = 0

    def __repr__(self) -> str:
        return (
            f"StateManager(session_key='{self._session_key}', "
            f"counter={self.counter}, "
            f"tables={list(self._state['views'].keys())})"
        )
