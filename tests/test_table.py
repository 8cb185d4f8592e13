"""Tests for the plain Table component."""

from catalog_table import Table
from catalog_table.core.intents import PageChanged, RowClicked, SearchChanged, SortToggled


def _view(table, state_manager):
    return table.prepare_view(table.get_internal_state(state_manager))


def test_records_rendered_in_given_order(state_manager, product_records, product_columns):
    table = Table("values", product_records, product_columns, sort_key="name")
    view = _view(table, state_manager)
    assert list(view.derived.paged) == product_records
    assert view.tree.pagination is None
    assert view.tree.toolbar.is_empty


def test_sort_indicator(state_manager, product_records, product_columns):
    table = Table(
        "values", product_records, product_columns, sort_key="price", sort_direction="desc"
    )
    header = {cell.key: cell.sort_indicator for cell in _view(table, state_manager).tree.header}
    assert header["price"] == "desc"


def test_header_click_calls_on_sort(state_manager, product_records, product_columns):
    calls = []
    table = Table(
        "values",
        product_records,
        product_columns,
        sort_key="price",
        sort_direction="asc",
        on_sort=lambda key, direction: calls.append((key, direction)),
    )
    assert table.dispatch(SortToggled("price"), state_manager) is True
    assert table.dispatch(SortToggled("name"), state_manager) is True
    assert calls == [("price", "desc"), ("name", "asc")]


def test_header_click_without_on_sort_is_noop(state_manager, product_records, product_columns):
    table = Table("values", product_records, product_columns)
    assert table.dispatch(SortToggled("price"), state_manager) is False
    assert not state_manager.has_view_state("values")


def test_all_rows_on_one_page(state_manager, product_records, product_columns):
    table = Table("values", product_records, product_columns)
    table.dispatch(PageChanged(4), state_manager)
    view = _view(table, state_manager)
    assert view.resolved.page == 1
    assert len(view.derived.paged) == len(product_records)


def test_search_intent_does_not_filter(state_manager, product_records, product_columns):
    table = Table("values", product_records, product_columns)
    table.dispatch(SearchChanged("tea"), state_manager)
    assert len(_view(table, state_manager).derived.paged) == len(product_records)


def test_empty_state(state_manager, product_columns):
    view = _view(Table("values", [], product_columns), state_manager)
    assert view.tree.empty_state.title == "No data found"


def test_row_click(state_manager, product_records, product_columns):
    clicked = []
    table = Table("values", product_records, product_columns, on_row_click=clicked.append)
    table.dispatch(RowClicked(product_records[2]), state_manager)
    assert clicked == [product_records[2]]
