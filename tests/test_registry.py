"""Tests for the component registry."""

import pytest

from catalog_table import DataTable, Table
from catalog_table.core.registry import (
    create_component,
    get_component_class,
    is_registered,
    list_registered_components,
    register_component,
)


def test_builtin_components_registered():
    assert get_component_class("data_table") is DataTable
    assert get_component_class("table") is Table
    assert {"data_table", "table"} <= set(list_registered_components())


def test_unknown_component():
    assert not is_registered("pivot_table")
    with pytest.raises(KeyError, match="pivot_table"):
        get_component_class("pivot_table")


def test_duplicate_registration_rejected():
    with pytest.raises(ValueError, match="already registered"):

        @register_component("data_table")
        class Duplicate(DataTable):
            pass

    assert get_component_class("data_table") is DataTable


def test_component_built_from_configuration(state_manager, product_records):
    config = {
        "type": "data_table",
        "table_key": "configured",
        "columns": [{"key": "name", "sortable": True}],
        "page_size": 2,
    }
    table = create_component(config, data=product_records)
    assert isinstance(table, DataTable)
    view = table.prepare_view(table.get_internal_state(state_manager))
    assert len(view.derived.paged) == 2
    assert config["type"] == "data_table"


def test_configuration_without_type():
    with pytest.raises(KeyError, match="'type'"):
        create_component({"table_key": "t"})
