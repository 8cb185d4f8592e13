"""Tests for column and filter descriptors."""

from types import SimpleNamespace

import pytest

from catalog_table.core.descriptors import (
    ColumnDescriptor,
    EmptyState,
    FilterDescriptor,
    FilterSet,
    columns_from_definitions,
    columns_from_schema,
    get_field,
)
from catalog_table.core.errors import DescriptorError


class TestGetField:
    def test_mapping_record(self):
        assert get_field({"name": "Tea"}, "name") == "Tea"

    def test_object_record(self):
        record = SimpleNamespace(name="Tea")
        assert get_field(record, "name") == "Tea"

    def test_missing_field_reads_none(self):
        assert get_field({"name": "Tea"}, "price") is None
        assert get_field(SimpleNamespace(), "price") is None


class TestColumnDescriptor:
    def test_title_derived_from_key(self):
        column = ColumnDescriptor("created_at")
        assert column.title == "Created At"

    def test_explicit_title_kept(self):
        assert ColumnDescriptor("name", "Product").title == "Product"

    def test_defaults(self):
        column = ColumnDescriptor("name")
        assert column.sortable is False
        assert column.align == "left"
        assert column.render is None

    def test_invalid_align_raises(self):
        with pytest.raises(DescriptorError, match="invalid align"):
            ColumnDescriptor("name", align="justify")

    def test_empty_key_raises(self):
        with pytest.raises(DescriptorError):
            ColumnDescriptor("")

    def test_accessor_overrides_key_lookup(self):
        column = ColumnDescriptor(
            "full_name", accessor=lambda r: f"{r['first']} {r['last']}"
        )
        assert column.extract({"first": "Ada", "last": "Lovelace"}) == "Ada Lovelace"

    def test_descriptor_error_is_value_error(self):
        with pytest.raises(ValueError):
            ColumnDescriptor("name", align="middle")


class TestFilterDescriptor:
    def test_options_normalized_from_mixed_shapes(self):
        descriptor = FilterDescriptor(
            "status",
            options=[("a", "Active"), {"value": "i", "label": "Inactive"}, "x"],
        )
        assert descriptor.options == (("a", "Active"), ("i", "Inactive"), ("x", "x"))

    def test_option_label(self):
        descriptor = FilterDescriptor("status", options=[("a", "Active")])
        assert descriptor.option_label("a") == "Active"
        assert descriptor.option_label("zzz") == "zzz"

    def test_select_without_options_raises(self):
        with pytest.raises(DescriptorError, match="needs at least one option"):
            FilterDescriptor("status")

    def test_search_filter_needs_no_options(self):
        descriptor = FilterDescriptor("sku", kind="search", placeholder="SKU")
        assert descriptor.options == ()
        assert descriptor.label == "Sku"

    def test_invalid_kind_raises(self):
        with pytest.raises(DescriptorError, match="invalid kind"):
            FilterDescriptor("status", kind="range", options=["a"])


class TestFilterSet:
    def test_duplicate_keys_rejected(self):
        with pytest.raises(DescriptorError, match="Duplicate filter key"):
            FilterSet(
                [
                    FilterDescriptor("status", options=["a"]),
                    FilterDescriptor("status", kind="search"),
                ]
            )

    def test_lookup_and_order(self):
        filters = FilterSet(
            [
                FilterDescriptor("status", options=["a"]),
                FilterDescriptor("sku", kind="search"),
            ]
        )
        assert filters.keys() == ["status", "sku"]
        assert "sku" in filters
        assert len(filters) == 2
        assert filters.get("missing") is None
        assert [f.key for f in filters] == ["status", "sku"]


class TestColumnsFromDefinitions:
    def test_tabulator_style_keys(self):
        columns = columns_from_definitions(
            [
                {"field": "price", "title": "Price", "sorter": "number", "hozAlign": "right"},
                {"key": "name"},
            ]
        )
        assert columns[0].key == "price"
        assert columns[0].sortable is True
        assert columns[0].align == "right"
        assert columns[1].title == "Name"
        assert columns[1].sortable is False

    def test_missing_key_raises(self):
        with pytest.raises(DescriptorError, match="needs a 'key' or 'field'"):
            columns_from_definitions([{"title": "Nameless"}])


def test_columns_from_schema():
    columns = columns_from_schema(["name", "price"], numeric=["price"])
    assert [c.key for c in columns] == ["name", "price"]
    assert all(c.sortable for c in columns)
    assert columns[1].align == "right"


def test_empty_state_defaults():
    empty = EmptyState()
    assert empty.title == ""
    assert empty.action is None
