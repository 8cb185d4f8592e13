"""
Catalog Table - Dual-mode data tables for Streamlit list views.

This package provides searchable, filterable, sortable and paged tables
whose state is held either by the table itself or by the caller, field
by field, with client-side or server-side data processing.
"""

from .components.data_table import DataTable
from .components.server_table import ServerTable, clear_fetch_cache
from .components.table import Table
from .config import TableLabels
from .core.base import BaseComponent, TableView
from .core.descriptors import ColumnDescriptor, EmptyState, FilterDescriptor
from .core.errors import DescriptorError
from .core.fetch import FetchParams, FetchResult
from .core.registry import create_component, get_component_class, register_component
from .core.state import StateManager, ViewState
from .processing.frames import frame_fetcher, records_from_frame

__version__ = "0.1.0"

__all__ = [
    # Core
    "BaseComponent",
    "TableView",
    "StateManager",
    "ViewState",
    "register_component",
    "get_component_class",
    "create_component",
    "DescriptorError",
    # Descriptors
    "ColumnDescriptor",
    "FilterDescriptor",
    "EmptyState",
    "TableLabels",
    # Components
    "DataTable",
    "Table",
    "ServerTable",
    # Server-side data
    "FetchParams",
    "FetchResult",
    "frame_fetcher",
    "records_from_frame",
    "clear_fetch_cache",
]
