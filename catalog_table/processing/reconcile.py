"""Client-side reconciliation of search, filters, sort and paging.

All functions here are pure: they never mutate the record collection and
return the same result for the same inputs.
"""

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from decimal import Decimal
from numbers import Number
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.descriptors import ColumnDescriptor, FilterSet, filter_text, get_field
from ..core.intents import find_column
from ..core.state import SORT_DESC
from .pagination import total_pages_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivedSlice:
    """
    Filtered, sorted and paged view over a record collection.

    Attributes:
        filtered: Records matching search and filters, in collection order
        sorted: ``filtered`` in display order
        paged: The rows of the displayed page
        total_count: Number of rows across all pages
        total_pages: Number of pages (at least 1)
    """

    filtered: Tuple[Any, ...]
    sorted: Tuple[Any, ...]
    paged: Tuple[Any, ...]
    total_count: int
    total_pages: int

    @property
    def is_empty(self) -> bool:
        return len(self.paged) == 0

    def paginated(self, page: int, page_size: int) -> "DerivedSlice":
        """
        Slice out one page of the sorted rows.

        Args:
            page: Page to show (callers clamp it beforehand)
            page_size: Rows per page

        Returns:
            Copy with ``paged`` and ``total_pages`` set for the page
        """
        return replace(
            self,
            paged=tuple(page_records(self.sorted, page, page_size)),
            total_pages=total_pages_for(self.total_count, page_size),
        )


def matches_search(
    record: Any, columns: Sequence[ColumnDescriptor], search_text: str
) -> bool:
    """
    Check whether any string-valued column contains the search text.

    Matching is a case-insensitive substring test. Non-string values
    (numbers, booleans, dates) are not searched.

    Args:
        record: The record to test
        columns: Columns whose extracted values are searched
        search_text: Search term ('' matches everything)

    Returns:
        True if the record matches
    """
    if not search_text:
        return True
    needle = search_text.lower()
    for column in columns:
        value = column.extract(record)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False


def matches_filters(
    record: Any,
    filter_values: Dict[str, str],
    filters: Optional[FilterSet] = None,
) -> bool:
    """
    Check whether a record satisfies every active filter.

    A filter is active when its selected value is non-empty. The text form
    of the record's value (see ``filter_text``) must equal it exactly.

    Args:
        record: The record to test
        filter_values: Mapping of filter key to selected value
        filters: Filter descriptors (used for their accessors, if any)

    Returns:
        True if every active filter matches
    """
    for key, selected in filter_values.items():
        if not selected:
            continue
        descriptor = filters.get(key) if filters is not None else None
        value = descriptor.extract(record) if descriptor else get_field(record, key)
        if filter_text(value) != selected:
            return False
    return True


def filter_records(
    records: Sequence[Any],
    columns: Sequence[ColumnDescriptor],
    search_text: str = "",
    filter_values: Optional[Dict[str, str]] = None,
    filters: Optional[FilterSet] = None,
) -> List[Any]:
    """
    Keep records matching the search AND every active filter.

    Returns:
        Matching records in collection order
    """
    filter_values = filter_values or {}
    return [
        record
        for record in records
        if matches_search(record, columns, search_text)
        and matches_filters(record, filter_values, filters)
    ]


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    # NaN never compares equal to anything, treat it like a missing value
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def natural_sort_key(value: Any) -> Tuple[int, Any]:
    """
    Sort key giving a total order over heterogeneous values.

    Numbers compare numerically, strings lexicographically and temporal
    values chronologically. Values of different kinds are grouped by kind
    so mixed columns never raise TypeError.

    Args:
        value: A non-missing extracted value

    Returns:
        ``(kind_rank, comparable)`` tuple
    """
    if isinstance(value, (bool, int, float, Decimal)):
        return (0, value)
    if isinstance(value, Number):
        try:
            return (0, float(value))
        except (TypeError, ValueError):
            return (6, str(value))
    if isinstance(value, str):
        return (1, value)
    if isinstance(value, datetime):
        # Naive and aware datetimes cannot be compared with each other
        return (3, value) if value.tzinfo is not None else (2, value)
    if isinstance(value, date):
        return (4, value)
    if isinstance(value, time):
        return (5, value)
    return (6, str(value))


def sort_records(
    records: Sequence[Any],
    columns: Sequence[ColumnDescriptor],
    sort_key: str,
    sort_direction: str,
) -> List[Any]:
    """
    Stable sort by a column's extracted values.

    Records with equal values keep their relative order in both directions.
    Missing values (None, NaN) go last in both directions. An empty sort
    key, or one that does not name a sortable column, leaves the order
    unchanged.

    Args:
        records: Records to sort
        columns: Column descriptors
        sort_key: Key of the column to sort by
        sort_direction: 'asc' or 'desc'

    Returns:
        New list in display order
    """
    if not sort_key:
        return list(records)

    column = find_column(columns, sort_key)
    if column is None or not column.sortable:
        logger.debug("Ignoring sort by unknown or unsortable column '%s'", sort_key)
        return list(records)

    present = []
    missing = []
    for record in records:
        value = column.extract(record)
        if _is_missing(value):
            missing.append(record)
        else:
            present.append((natural_sort_key(value), record))

    # sorted() is stable, also with reverse=True
    ordered = sorted(
        present, key=lambda pair: pair[0], reverse=sort_direction == SORT_DESC
    )
    return [record for _, record in ordered] + missing


def page_records(records: Sequence[Any], page: int, page_size: int) -> List[Any]:
    """
    Slice out one page.

    Returns:
        Rows of ``page`` (empty if the page lies beyond the records)
    """
    page_size = max(1, page_size)
    start = (max(1, page) - 1) * page_size
    return list(records[start : start + page_size])


def reconcile(
    records: Sequence[Any],
    columns: Sequence[ColumnDescriptor],
    search_text: str = "",
    filter_values: Optional[Dict[str, str]] = None,
    sort_key: str = "",
    sort_direction: str = "asc",
    page: int = 1,
    page_size: int = 10,
    filters: Optional[FilterSet] = None,
    paginate: bool = True,
) -> DerivedSlice:
    """
    Derive the filtered/sorted/paged slice of a record collection.

    Args:
        records: The record collection (not modified)
        columns: Column descriptors
        search_text: Free-text search term
        filter_values: Mapping of filter key to selected value
        sort_key: Column key to sort by ('' for collection order)
        sort_direction: 'asc' or 'desc'
        page: Page to slice out (callers clamp it beforehand)
        page_size: Rows per page
        filters: Filter descriptors (optional, for custom accessors)
        paginate: If False, ``paged`` holds every sorted row

    Returns:
        DerivedSlice
    """
    filtered = filter_records(records, columns, search_text, filter_values, filters)
    ordered = tuple(sort_records(filtered, columns, sort_key, sort_direction))
    unpaged = DerivedSlice(
        filtered=tuple(filtered),
        sorted=ordered,
        paged=ordered,
        total_count=len(ordered),
        total_pages=1,
    )
    if not paginate:
        return unpaged
    return unpaged.paginated(page, page_size)


def passthrough_slice(
    records: Sequence[Any],
    total_items: Optional[int],
    page_size: int,
    paginate: bool = True,
) -> DerivedSlice:
    """
    Slice for server mode: the caller already filtered, sorted and paged.

    Args:
        records: The page of records delivered by the caller
        total_items: Caller-reported row count across all pages
            (``len(records)`` if not given)
        page_size: Rows per page
        paginate: Whether paging is enabled

    Returns:
        DerivedSlice with filtered == sorted == paged == records
    """
    rows = tuple(records)
    total_count = len(rows) if total_items is None else max(0, int(total_items))
    total_pages = total_pages_for(total_count, page_size) if paginate else 1
    return DerivedSlice(
        filtered=rows,
        sorted=rows,
        paged=rows,
        total_count=total_count,
        total_pages=total_pages,
    )
