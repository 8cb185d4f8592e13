"""Tests for the pagination control and its page window."""

import pytest

from catalog_table.processing.pagination import (
    PaginationState,
    clamp_page,
    page_window,
    total_pages_for,
)


@pytest.mark.parametrize(
    "total, size, expected",
    [(0, 10, 1), (1, 10, 1), (10, 10, 1), (11, 10, 2), (500, 10, 50), (5, 0, 5)],
)
def test_total_pages_for(total, size, expected):
    assert total_pages_for(total, size) == expected


@pytest.mark.parametrize(
    "page, total, expected", [(0, 4, 1), (10, 4, 4), (2, 4, 2), (3, 0, 1)]
)
def test_clamp_page(page, total, expected):
    assert clamp_page(page, total) == expected


class TestPageWindow:
    def test_all_pages_when_few(self):
        assert page_window(2, 4) == [1, 2, 3, 4]

    @pytest.mark.parametrize(
        "page, expected",
        [
            (1, [1, 2, 3, 4, 5]),
            (3, [1, 2, 3, 4, 5]),
            (4, [2, 3, 4, 5, 6]),
            (10, [8, 9, 10, 11, 12]),
            (17, [15, 16, 17, 18, 19]),
            (18, [16, 17, 18, 19, 20]),
            (20, [16, 17, 18, 19, 20]),
        ],
    )
    def test_window_of_five(self, page, expected):
        assert page_window(page, 20) == expected

    @pytest.mark.parametrize("total", range(1, 30))
    def test_window_contains_current_page(self, total):
        for page in range(1, total + 1):
            window = page_window(page, total)
            assert page in window
            assert len(window) == min(5, total)
            assert window == list(range(window[0], window[-1] + 1))
            assert 1 <= window[0] and window[-1] <= total


class TestPaginationState:
    def test_server_scenario(self):
        state = PaginationState(
            page=1, total_pages=total_pages_for(500, 10), page_size=10, total_items=500
        )
        assert state.total_pages == 50
        assert state.window == [1, 2, 3, 4, 5]

    @pytest.mark.parametrize(
        "page, total_pages, kind, has_previous, has_next",
        [
            (1, 1, "single", False, False),
            (1, 3, "first", False, True),
            (2, 3, "middle", True, True),
            (3, 3, "last", True, False),
        ],
    )
    def test_kinds(self, page, total_pages, kind, has_previous, has_next):
        state = PaginationState(page, total_pages, 10, total_pages * 10)
        assert state.kind == kind
        assert state.has_previous is has_previous
        assert state.has_next is has_next

    def test_single_page_window(self):
        assert PaginationState(1, 1, 10, 0).window == [1]

    def test_transitions_stay_in_bounds(self):
        first = PaginationState(1, 3, 10, 30)
        last = PaginationState(3, 3, 10, 30)
        assert first.previous_page() == 1
        assert first.next_page() == 2
        assert last.next_page() == 3
        assert last.previous_page() == 2
        assert first.goto(3) == 3

    def test_summary_items(self):
        state = PaginationState(page=3, total_pages=3, page_size=2, total_items=5)
        assert (state.start_item, state.end_item) == (5, 5)

    def test_summary_items_empty(self):
        state = PaginationState(page=1, total_pages=1, page_size=10, total_items=0)
        assert (state.start_item, state.end_item) == (0, 0)
