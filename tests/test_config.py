"""Tests for runtime defaults and labels."""

import pytest

from catalog_table.config import (
    DEFAULT_MOBILE_COLUMNS,
    DEFAULT_PAGE_SIZE,
    TableLabels,
    get_default_mobile_columns,
    get_default_page_size,
)


def test_defaults_without_environment(monkeypatch):
    monkeypatch.delenv("CATALOG_TABLE_PAGE_SIZE", raising=False)
    monkeypatch.delenv("CATALOG_TABLE_MOBILE_COLUMNS", raising=False)
    assert get_default_page_size() == DEFAULT_PAGE_SIZE == 10
    assert get_default_mobile_columns() == DEFAULT_MOBILE_COLUMNS == 3


@pytest.mark.parametrize("raw, expected", [("25", 25), ("0", 10), ("-5", 10), ("ten", 10)])
def test_page_size_from_environment(monkeypatch, raw, expected):
    monkeypatch.setenv("CATALOG_TABLE_PAGE_SIZE", raw)
    assert get_default_page_size() == expected


def test_mobile_columns_from_environment(monkeypatch):
    monkeypatch.setenv("CATALOG_TABLE_MOBILE_COLUMNS", "2")
    assert get_default_mobile_columns() == 2


def test_summary_format():
    assert TableLabels().format_summary(11, 20, 57) == "Showing 11 to 20 of 57 results"


def test_localized_summary():
    labels = TableLabels(summary="{total} sonuçtan {start}-{end} arası")
    assert labels.format_summary(1, 10, 50) == "50 sonuçtan 1-10 arası"
