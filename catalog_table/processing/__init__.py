"""Record processing: search, filters, sorting, paging and frame queries."""

from .frames import frame_fetcher, query_frame, records_from_frame
from .pagination import PaginationState, clamp_page, page_window, total_pages_for
from .reconcile import (
    DerivedSlice,
    filter_records,
    page_records,
    passthrough_slice,
    reconcile,
    sort_records,
)

__all__ = [
    "reconcile",
    "filter_records",
    "sort_records",
    "page_records",
    "passthrough_slice",
    "DerivedSlice",
    "PaginationState",
    "page_window",
    "clamp_page",
    "total_pages_for",
    "query_frame",
    "frame_fetcher",
    "records_from_frame",
]
