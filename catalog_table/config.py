"""Runtime defaults and user-facing labels for table components."""

import os
from dataclasses import dataclass

DEFAULT_PAGE_SIZE = 10
DEFAULT_MOBILE_COLUMNS = 3

# Upper bound on numbered page buttons shown at once
PAGE_WINDOW_SIZE = 5


def _int_from_env(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to default."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_default_page_size() -> int:
    """
    Get the page size used when a table is created without one.

    Reads CATALOG_TABLE_PAGE_SIZE so deployments can tune list views
    without touching call sites.

    Returns:
        Positive page size
    """
    return _int_from_env("CATALOG_TABLE_PAGE_SIZE", DEFAULT_PAGE_SIZE)


def get_default_mobile_columns() -> int:
    """Get how many columns the compact (small viewport) layout shows."""
    return _int_from_env("CATALOG_TABLE_MOBILE_COLUMNS", DEFAULT_MOBILE_COLUMNS)


@dataclass(frozen=True)
class TableLabels:
    """
    User-facing strings rendered by table components.

    Translation is the caller's job: pass an instance holding already
    localized text.

    Attributes:
        affirmative: Badge text for True values
        negative: Badge text for False values
        empty_title: Title of the empty-state block when none is supplied
        search_placeholder: Placeholder of the free-text search box
        previous: Label of the previous-page control
        next: Label of the next-page control
        summary: Format string for the pagination summary, receives
            ``start``, ``end`` and ``total``
        page_size: Label of the page size selector
        download: Label of the CSV download button
        all_option: Label of the "no value selected" entry in select filters
        open_row: Label of the per-row button of clickable rows
    """

    affirmative: str = "Yes"
    negative: str = "No"
    empty_title: str = "No data found"
    search_placeholder: str = "Search..."
    previous: str = "Previous"
    next: str = "Next"
    summary: str = "Showing {start} to {end} of {total} results"
    page_size: str = "Rows per page"
    download: str = "Download CSV"
    all_option: str = "All"
    open_row: str = "Open"

    def format_summary(self, start: int, end: int, total: int) -> str:
        return self.summary.format(start=start, end=end, total=total)
