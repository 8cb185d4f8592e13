"""Pagination control: bounded page state machine and numbered-page window."""

import math
from dataclasses import dataclass
from typing import List

from ..config import PAGE_WINDOW_SIZE

KIND_SINGLE = "single"
KIND_FIRST = "first"
KIND_MIDDLE = "middle"
KIND_LAST = "last"


def total_pages_for(total_items: int, page_size: int) -> int:
    """
    Number of pages needed for ``total_items`` rows.

    An empty record set still has one (empty) page.

    Args:
        total_items: Number of rows across all pages
        page_size: Rows per page

    Returns:
        Page count, at least 1
    """
    page_size = max(1, page_size)
    return max(1, math.ceil(max(0, total_items) / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a page number into ``[1, total_pages]``."""
    return max(1, min(page, max(1, total_pages)))


def page_window(
    page: int, total_pages: int, size: int = PAGE_WINDOW_SIZE
) -> List[int]:
    """
    Page numbers to show as numbered controls.

    Shows all pages if they fit; otherwise a window of ``size`` pages
    centered on ``page``, pinned to the first or last pages near either end.

    Args:
        page: Current page
        total_pages: Total number of pages
        size: Maximum number of numbered controls

    Returns:
        Ascending list of page numbers
    """
    if total_pages <= size:
        return list(range(1, total_pages + 1))
    half = size // 2
    if page <= half + 1:
        start = 1
    elif page >= total_pages - half:
        start = total_pages - size + 1
    else:
        start = page - half
    return list(range(start, start + size))


@dataclass(frozen=True)
class PaginationState:
    """
    Pagination control over ``page`` in ``[1, total_pages]``.

    Transitions return the target page number; they never mutate. The
    component turns them into PageChanged intents.
    """

    page: int
    total_pages: int
    page_size: int
    total_items: int

    @property
    def kind(self) -> str:
        """One of 'single', 'first', 'middle', 'last'."""
        if self.total_pages <= 1:
            return KIND_SINGLE
        if self.page <= 1:
            return KIND_FIRST
        if self.page >= self.total_pages:
            return KIND_LAST
        return KIND_MIDDLE

    @property
    def has_previous(self) -> bool:
        return self.kind in (KIND_MIDDLE, KIND_LAST)

    @property
    def has_next(self) -> bool:
        return self.kind in (KIND_FIRST, KIND_MIDDLE)

    @property
    def window(self) -> List[int]:
        if self.total_pages <= 1:
            return [1]
        return page_window(self.page, self.total_pages)

    @property
    def start_item(self) -> int:
        """1-based index of the first row on this page (0 if no rows)."""
        if self.total_items <= 0:
            return 0
        return min((self.page - 1) * self.page_size + 1, self.total_items)

    @property
    def end_item(self) -> int:
        """1-based index of the last row on this page (0 if no rows)."""
        return min(self.page * self.page_size, max(0, self.total_items))

    def previous_page(self) -> int:
        return clamp_page(self.page - 1, self.total_pages)

    def next_page(self) -> int:
        return clamp_page(self.page + 1, self.total_pages)

    def goto(self, page: int) -> int:
        """Numbered controls set the page to their literal number."""
        return page
