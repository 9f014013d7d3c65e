"""Unit tests for selection resolution, fetch requests, and titles."""

from __future__ import annotations

import pytest

from analysis.dimensions import AXIS_ORDER, NO_GROUPING, AxisKind, DatasetType, catalog_for
from analysis.dto import FetchRequest
from analysis.selection import (
    OVERVIEW_MARKER,
    AxisSelection,
    FilterState,
    breadcrumb_items,
    build_fetch_request,
    chart_title,
    describe_active_selections,
    resolve,
)

pytestmark = pytest.mark.unit


def _sel(axis: AxisKind, dataset_type: DatasetType, level_key: str) -> AxisSelection:
    return AxisSelection.from_entry(resolve(catalog_for(axis, dataset_type), level_key))


def test_resolve_round_trips_every_catalog_entry() -> None:
    """Resolving an entry's own key returns that entry."""

    for dataset_type in DatasetType:
        for axis in AXIS_ORDER:
            catalog = catalog_for(axis, dataset_type)
            for level_key in catalog:
                entry = catalog.get(level_key)
                assert resolve(catalog, entry.level_key) == entry


def test_resolve_unknown_key_falls_back_to_default() -> None:
    """Unknown keys resolve to the catalog's `[]` entry."""

    catalog = catalog_for(AxisKind.customer, DatasetType.sales)
    assert resolve(catalog, '["s.MaCuaHang"]') == catalog.default
    assert resolve(catalog, "garbage") == catalog.default


def test_fetch_request_ids_are_always_declared() -> None:
    """Every id in a fetch request is declared in its axis catalog."""

    for dataset_type in DatasetType:
        for axis in AXIS_ORDER:
            for level_key in catalog_for(axis, dataset_type):
                state = FilterState.initial(dataset_type).select(axis, level_key)
                request = state.fetch_request()
                ids = request.as_json()
                for other in AXIS_ORDER:
                    assert ids[other.value] in catalog_for(other, dataset_type).ids()

    stale = FilterState.from_level_keys(DatasetType.sales, {AxisKind.customer: '["s.MaCuaHang"]'})
    assert stale.fetch_request().customer_id == 0


def test_build_fetch_request_defaults_missing_axes() -> None:
    """Axes absent from the selection mapping resolve to id 0."""

    request = build_fetch_request(
        DatasetType.inventory,
        {AxisKind.geo: _sel(AxisKind.geo, DatasetType.inventory, '["g.Bang"]')},
    )
    assert request == FetchRequest(DatasetType.inventory, 0, 0, 0, 1)


def test_all_defaults_describe_as_overview() -> None:
    """With no active axis the description is the overview marker."""

    state = FilterState.initial()
    assert state.active_selections() == (OVERVIEW_MARKER,)
    assert not state.has_active_axis()
    assert state.fetch_request().is_overview()


def test_single_active_axis_describes_one_entry() -> None:
    """Only the non-default axis is described."""

    state = FilterState.initial(DatasetType.inventory).select(AxisKind.customer, '["s.MaCuaHang"]')
    assert state.active_selections() == ("Store: Store Code",)


def test_active_axes_are_described_in_fixed_order() -> None:
    """Order is time, customer/store, item, geo regardless of mapping order."""

    selections = {
        AxisKind.geo: _sel(AxisKind.geo, DatasetType.sales, '["g.Bang"]'),
        AxisKind.item: _sel(AxisKind.item, DatasetType.sales, '["i.MaMH"]'),
        AxisKind.time: _sel(AxisKind.time, DatasetType.sales, '["t.Thang"]'),
        AxisKind.customer: _sel(AxisKind.customer, DatasetType.sales, '["LoaiKH"]'),
    }
    assert describe_active_selections(DatasetType.sales, selections) == (
        "Time: Month",
        "Customer: Customer Type",
        "Item: Product Code",
        "Geo: State",
    )


def test_sales_overview_scenario() -> None:
    """All-default sales selections produce the overview request and title."""

    state = FilterState.initial(DatasetType.sales)
    assert state.fetch_request().as_json() == {"dataType": "sales", "time": 0, "customer": 0, "item": 0, "geo": 0}
    assert state.title() == "Overall Sales Summary"
    assert state.breadcrumb() == ("All Sales Data Overview",)


def test_sales_year_and_size_scenario() -> None:
    """Year + Size selections produce ids (1, 0, 1, 0) and the combined title."""

    state = (
        FilterState.initial(DatasetType.sales)
        .select(AxisKind.time, '["t.Nam"]')
        .select(AxisKind.item, '["i.KichCo"]')
    )
    assert state.fetch_request() == FetchRequest(DatasetType.sales, 1, 0, 1, 0)
    assert state.title() == "Sales Analysis by Time: Year, Item: Size"
    assert state.breadcrumb() == ("Sales Data by:", "Time: Year", "Item: Size")


def test_inventory_titles_use_inventory_wording() -> None:
    selections = {AxisKind.time: _sel(AxisKind.time, DatasetType.inventory, '["t.Quy"]')}
    assert chart_title(DatasetType.inventory, {}) == "Overall Inventory Summary"
    assert chart_title(DatasetType.inventory, selections) == "Inventory Analysis by Time: Quarter"
    assert breadcrumb_items(DatasetType.inventory, {}) == ("All Inventory Data Overview",)


def test_dataset_switch_resets_customer_only() -> None:
    """Switching dataset type keeps time/item/geo and resets the customer axis."""

    state = (
        FilterState.initial(DatasetType.sales)
        .select(AxisKind.time, '["t.Nam"]')
        .select(AxisKind.customer, '["LoaiKH"]')
        .select(AxisKind.item, '["WeightRange"]')
        .select(AxisKind.geo, '["g.Bang", "g.MaThanhPho"]')
    )
    switched = state.with_dataset_type(DatasetType.inventory)

    assert switched.dataset_type is DatasetType.inventory
    assert switched.customer == AxisSelection(NO_GROUPING, "All Stores")
    assert switched.time == state.time
    assert switched.item == state.item
    assert switched.geo == state.geo


def test_payload_round_trip_and_stale_keys() -> None:
    """Handoff payloads decode back to the same state; stale keys resolve to defaults."""

    state = FilterState.initial(DatasetType.inventory).select(AxisKind.customer, '["s.MaCuaHang"]')
    assert FilterState.from_payload(state.to_payload()) == state

    payload = state.to_payload()
    payload["dataType"] = "sales"
    decoded = FilterState.from_payload(payload)
    assert decoded.customer == AxisSelection(NO_GROUPING, "All Customers")


def test_from_payload_rejects_malformed_input() -> None:
    with pytest.raises(ValueError):
        FilterState.from_payload(["not", "a", "mapping"])
    with pytest.raises(ValueError):
        FilterState.from_payload({"dataType": "unknown"})
    with pytest.raises(ValueError):
        FilterState.from_payload({"dataType": "sales", "time": "[]"})


def test_from_payload_ignores_stored_display_labels() -> None:
    """Display labels come from the catalog, not from the payload."""

    decoded = FilterState.from_payload(
        {"dataType": "sales", "time": {"level": '["t.Nam"]', "display": "Tampered"}}
    )
    assert decoded.time == AxisSelection('["t.Nam"]', "Year")


def test_activity_is_plain_string_inequality_with_no_grouping_key() -> None:
    """Keys that merely look empty still count as active and resolve to the default label."""

    selections = {
        AxisKind.time: AxisSelection("", ""),
        AxisKind.item: AxisSelection("[ ]", ""),
        AxisKind.geo: AxisSelection(NO_GROUPING, "All Regions"),
    }
    assert describe_active_selections(DatasetType.sales, selections) == ("Time: All Time", "Item: All Items")
