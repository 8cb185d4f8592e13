"""Pytest configuration and shared fixtures for catalog-table tests."""

from typing import Any, Dict, List
from unittest.mock import patch

import polars as pl
import pytest

from catalog_table.core.descriptors import ColumnDescriptor, FilterDescriptor
from catalog_table.core.state import StateManager, reset_default_state_manager


class MockSessionState(dict):
    """Mock Streamlit session_state that behaves like a dict."""
    pass


@pytest.fixture
def mock_streamlit():
    """
    Mock Streamlit's session_state for testing components.

    This fixture patches st.session_state to allow testing components
    without running a full Streamlit server.
    """
    mock_session_state = MockSessionState()

    with patch('streamlit.session_state', mock_session_state):
        reset_default_state_manager()
        yield mock_session_state
        reset_default_state_manager()


@pytest.fixture
def state_manager(mock_streamlit) -> StateManager:
    """StateManager backed by the mocked session state."""
    return StateManager()


@pytest.fixture
def product_records() -> List[Dict[str, Any]]:
    """Catalog-like records with strings, numbers, booleans and gaps."""
    return [
        {"id": 1, "name": "Coffee beans", "category": "drinks", "price": 12.5, "active": True},
        {"id": 2, "name": "Green tea", "category": "drinks", "price": 4.0, "active": True},
        {"id": 3, "name": "Cocoa powder", "category": "baking", "price": 6.25, "active": False},
        {"id": 4, "name": "Flour", "category": "baking", "price": None, "active": True},
        {"id": 5, "name": "Oat milk", "category": "drinks", "price": 3.2, "active": False},
        {"id": 6, "name": "Sugar", "category": "baking", "price": 2.0, "active": True},
        {"id": 7, "name": "Espresso cups", "category": "kitchen", "price": 18.0, "active": True},
    ]


@pytest.fixture
def product_columns() -> List[ColumnDescriptor]:
    return [
        ColumnDescriptor("name", "Name", sortable=True),
        ColumnDescriptor("category", "Category", sortable=True),
        ColumnDescriptor("price", "Price", sortable=True, align="right"),
        ColumnDescriptor("active", "Active"),
    ]


@pytest.fixture
def category_filter() -> FilterDescriptor:
    return FilterDescriptor(
        "category",
        "All categories",
        options=[("drinks", "Drinks"), ("baking", "Baking"), ("kitchen", "Kitchen")],
    )


@pytest.fixture
def product_frame(product_records) -> pl.LazyFrame:
    """The product records as a LazyFrame."""
    return pl.LazyFrame(product_records)


@pytest.fixture
def large_frame() -> pl.LazyFrame:
    """500 rows for server-side paging tests."""
    n_rows = 500
    return pl.LazyFrame(
        {
            "id": list(range(n_rows)),
            "name": [f"item_{i:03d}" for i in range(n_rows)],
            "status": [["active", "inactive"][i % 2] for i in range(n_rows)],
            "score": [float(i % 7) for i in range(n_rows)],
        }
    )
