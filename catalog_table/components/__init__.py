"""Table components."""

from .data_table import DataTable
from .server_table import ServerTable
from .table import Table

__all__ = [
    "DataTable",
    "Table",
    "ServerTable",
]
