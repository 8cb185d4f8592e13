"""Core infrastructure for catalog_table."""

from .base import BaseComponent, TableView
from .descriptors import ColumnDescriptor, EmptyState, FilterDescriptor, FilterSet
from .errors import DescriptorError
from .registry import create_component, get_component_class, register_component
from .resolver import ResolvedState, resolve_view_state
from .state import StateManager, ViewState

__all__ = [
    "BaseComponent",
    "TableView",
    "StateManager",
    "ViewState",
    "ResolvedState",
    "resolve_view_state",
    "ColumnDescriptor",
    "FilterDescriptor",
    "FilterSet",
    "EmptyState",
    "register_component",
    "get_component_class",
    "create_component",
    "DescriptorError",
]
