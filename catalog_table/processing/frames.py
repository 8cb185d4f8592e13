"""Record providers and server-side querying backed by polars.

Tables accept plain sequences of records. This module turns polars and
pandas frames into such sequences, and implements a fetcher for
server-mode tables that answers queries by pushing search, filters, sort
and slicing into a polars query plan instead of materializing every row.
"""

from typing import Any, List, Optional, Sequence, Tuple, Union

import pandas as pd
import polars as pl

from ..core.descriptors import ColumnDescriptor
from ..core.fetch import FetchParams, FetchResult, Fetcher
from ..core.state import SORT_DESC

FrameLike = Union[pl.LazyFrame, pl.DataFrame, pd.DataFrame]


def records_from_frame(data: Any) -> List[Any]:
    """
    Convert a frame into a list of record dicts.

    Args:
        data: polars LazyFrame/DataFrame, pandas DataFrame, or any iterable
            of records (returned as a list unchanged)

    Returns:
        List of records
    """
    if isinstance(data, pl.LazyFrame):
        return data.collect().to_dicts()
    if isinstance(data, pl.DataFrame):
        return data.to_dicts()
    if isinstance(data, pd.DataFrame):
        return data.to_dict(orient="records")
    return list(data)


def _as_lazy(data: FrameLike) -> pl.LazyFrame:
    if isinstance(data, pl.LazyFrame):
        return data
    if isinstance(data, pl.DataFrame):
        return data.lazy()
    if isinstance(data, pd.DataFrame):
        return pl.from_pandas(data).lazy()
    raise TypeError(
        f"Expected a polars or pandas frame, got {type(data).__name__}"
    )


def _searchable_columns(
    schema: pl.Schema, columns: Optional[Sequence[ColumnDescriptor]]
) -> List[str]:
    """String columns covered by free-text search."""
    if columns is None:
        candidates = schema.names()
    else:
        # Columns with custom accessors have no counterpart in the frame
        candidates = [c.key for c in columns if c.accessor is None]
    return [
        name
        for name in candidates
        if name in schema and schema[name] in (pl.Utf8, pl.Categorical)
    ]


def _sort_column(
    schema: pl.Schema,
    columns: Optional[Sequence[ColumnDescriptor]],
    sort_key: str,
) -> Optional[str]:
    if not sort_key or sort_key not in schema:
        return None
    if columns is None:
        return sort_key
    for column in columns:
        if column.key == sort_key and column.sortable and column.accessor is None:
            return sort_key
    return None


def _filter_text_expr(name: str, dtype: Any) -> pl.Expr:
    """Column as the text ``filter_text`` gives for the same values."""
    text = pl.col(name).cast(pl.Utf8)
    if dtype == pl.Boolean:
        # polars writes booleans lowercase
        return text.replace({"true": "True", "false": "False"})
    if dtype.is_float():
        return pl.when(pl.col(name).is_nan()).then(None).otherwise(text)
    return text


def query_frame(
    data: FrameLike,
    params: FetchParams,
    columns: Optional[Sequence[ColumnDescriptor]] = None,
) -> Tuple[pl.DataFrame, int]:
    """
    Answer a table query against a frame.

    Semantics match the client-side engine: case-insensitive substring
    search over string columns, exact string equality for filters, stable
    sort with missing values last, then the requested page.

    Args:
        data: Frame holding all rows
        params: The query
        columns: Column descriptors (limit search/sort to declared columns)

    Returns:
        Tuple of (page DataFrame, total matching rows)
    """
    lf = _as_lazy(data)
    schema = lf.collect_schema()

    if params.search:
        needle = params.search.lower()
        predicates = [
            pl.col(name)
            .cast(pl.Utf8)
            .str.to_lowercase()
            .str.contains(needle, literal=True)
            for name in _searchable_columns(schema, columns)
        ]
        if predicates:
            lf = lf.filter(pl.any_horizontal(predicates).fill_null(False))
        else:
            lf = lf.head(0)

    for key, value in params.filters.items():
        if not value:
            continue
        if key not in schema:
            # Filtering on a field the rows do not have matches nothing
            lf = lf.head(0)
            continue
        lf = lf.filter(_filter_text_expr(key, schema[key]) == value)

    if params.sort is not None:
        sort_key, sort_direction = params.sort
        sort_column = _sort_column(schema, columns, sort_key)
        if sort_column is not None:
            lf = lf.sort(
                sort_column,
                descending=sort_direction == SORT_DESC,
                nulls_last=True,
                maintain_order=True,
            )

    total = lf.select(pl.len()).collect().item()
    page_size = max(1, params.page_size)
    offset = (max(1, params.page) - 1) * page_size
    page = lf.slice(offset, page_size).collect()
    return page, int(total)


def frame_fetcher(
    data: FrameLike,
    columns: Optional[Sequence[ColumnDescriptor]] = None,
) -> Fetcher:
    """
    Build a ServerTable fetcher over a frame.

    Example:
        fetcher = frame_fetcher(pl.scan_parquet("items.parquet"), columns)
        items = ServerTable("items", fetcher=fetcher)

    Args:
        data: Frame holding all rows (a LazyFrame keeps it out of memory)
        columns: Column descriptors of the table

    Returns:
        Callable mapping FetchParams to FetchResult
    """
    lf = _as_lazy(data)

    def fetch(params: FetchParams) -> FetchResult:
        page, total = query_frame(lf, params, columns)
        return FetchResult(items=page.to_dicts(), total_items=total)

    return fetch
