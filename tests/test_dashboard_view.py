"""Django integration tests for the dashboard view."""

from __future__ import annotations

import pytest
from django.contrib.messages import get_messages

from analysis.dimensions import DatasetType
from analysis.selection import AxisSelection
from core import gateway
from core.dashboard_state import ROWSET_SESSION_KEY, STATE_SESSION_KEY

pytestmark = pytest.mark.integration

SALES_FILTERS = {
    "dataset_type": "sales",
    "time": '["t.Nam"]',
    "customer": "[]",
    "item": '["i.KichCo"]',
    "geo": "[]",
}


def _messages(response) -> list[str]:
    return [str(message) for message in get_messages(response.wsgi_request)]


@pytest.mark.django_db
def test_dashboard_renders_overview_empty_state(client) -> None:
    """A fresh session shows the sales overview with nothing fetched yet."""

    response = client.get("/")

    assert response.status_code == 200
    assert response.context["breadcrumb"] == ("All Sales Data Overview",)
    assert response.context["visualization"].empty
    assert response.context["visualization"].title == "Overall Sales Summary"
    assert response.context["has_rows"] is False
    assert response.context["fetch_request"].is_overview()
    assert b"No Data to Display" in response.content


@pytest.mark.django_db
def test_apply_fetches_and_stores_rowset(client) -> None:
    response = client.post("/", {**SALES_FILTERS, "action": "apply"})

    assert response.status_code == 302
    assert response["Location"] == "/"
    assert _messages(response) == ["Data loaded successfully"]
    stored = client.session[ROWSET_SESSION_KEY]
    assert stored["columns"] == ["Year", "Size", "revenue"]
    assert stored["dataType"] == "sales"

    page = client.get("/")
    visualization = page.context["visualization"]
    assert visualization.title == "Sales Analysis by Time: Year, Item: Size"
    assert visualization.table.record_count == 6
    assert page.context["breadcrumb"] == ("Sales Data by:", "Time: Year", "Item: Size")
    assert page.context["has_rows"] is True


@pytest.mark.django_db
def test_update_stores_selections_without_fetching(client) -> None:
    response = client.post("/", {**SALES_FILTERS, "action": "update"})

    assert response.status_code == 302
    assert ROWSET_SESSION_KEY not in client.session
    assert client.session[STATE_SESSION_KEY]["time"]["level"] == '["t.Nam"]'


@pytest.mark.django_db
def test_failed_fetch_leaves_rowset_unset(client, monkeypatch) -> None:
    """Gateway errors surface as a notification; nothing is stored and nothing raises."""

    def boom(*args, **kwargs):
        raise RuntimeError("warehouse offline")

    monkeypatch.setattr(gateway, "generate_rows", boom)
    response = client.post("/", {**SALES_FILTERS, "action": "apply"})

    assert response.status_code == 302
    assert _messages(response) == ["warehouse offline"]
    assert ROWSET_SESSION_KEY not in client.session


@pytest.mark.django_db
def test_failed_fetch_keeps_previous_rowset(client, monkeypatch) -> None:
    client.post("/", {**SALES_FILTERS, "action": "apply"})
    previous = client.session[ROWSET_SESSION_KEY]

    def boom(*args, **kwargs):
        raise RuntimeError("warehouse offline")

    monkeypatch.setattr(gateway, "generate_rows", boom)
    client.post("/", {**SALES_FILTERS, "geo": '["g.Bang"]', "action": "apply"})

    assert client.session[ROWSET_SESSION_KEY] == previous


@pytest.mark.django_db
def test_switch_dataset_resets_customer_and_clears_rows(client) -> None:
    client.post("/", {**SALES_FILTERS, "customer": '["LoaiKH"]', "action": "apply"})

    response = client.post("/", {"dataset_type": "inventory", "action": "switch_dataset"})
    assert response.status_code == 302
    assert ROWSET_SESSION_KEY not in client.session

    page = client.get("/")
    state = page.context["state"]
    assert state.dataset_type is DatasetType.inventory
    assert state.customer == AxisSelection("[]", "All Stores")
    assert state.time == AxisSelection('["t.Nam"]', "Year")
    assert page.context["filter_form"].fields["customer"].label == "Store Dimension"
    assert page.context["visualization"].title == "Inventory Analysis by Time: Year, Item: Size"


@pytest.mark.django_db
def test_chart_type_survives_dataset_switch(client) -> None:
    client.post("/", {**SALES_FILTERS, "chart_type": "bar", "action": "apply"})

    page = client.get("/")
    assert page.context["visualization"].chart_type == "bar"
    assert page.context["chart_payload"]["labels"][0] == "2020"
    assert b'id="chart-data"' in page.content

    client.post("/", {"dataset_type": "inventory", "action": "switch_dataset"})
    assert client.get("/").context["visualization"].chart_type == "bar"


@pytest.mark.django_db
def test_advanced_requires_fetched_rows(client) -> None:
    response = client.post("/", {**SALES_FILTERS, "action": "advanced"})

    assert response.status_code == 302
    assert response["Location"] == "/"
    assert _messages(response) == ["Please apply filters first to see available columns"]


@pytest.mark.django_db
def test_invalid_selection_reports_error(client) -> None:
    invalid = client.post("/", {"dataset_type": "weather", "action": "apply"})
    assert invalid.status_code == 302
    assert _messages(invalid) == ["Could not update filters: invalid selection."]


@pytest.mark.django_db
def test_unknown_action_reports_error(client) -> None:
    unknown = client.post("/", {**SALES_FILTERS, "action": "explode"})
    assert unknown.status_code == 302
    assert _messages(unknown) == ["Unknown action."]


@pytest.mark.django_db
def test_undisplayed_error_is_shown_once_on_next_page(client) -> None:
    """A pending error is rendered by the next page and then cleared."""

    client.post("/", {"dataset_type": "weather", "action": "apply"})
    page = client.get("/")
    assert _messages(page) == ["Could not update filters: invalid selection."]

    unknown = client.post("/", {**SALES_FILTERS, "action": "explode"})
    assert _messages(unknown) == ["Unknown action."]


@pytest.mark.django_db
def test_malformed_session_state_falls_back_to_defaults(client) -> None:
    session = client.session
    session[STATE_SESSION_KEY] = {"dataType": "weather"}
    session.save()

    response = client.get("/")
    assert response.status_code == 200
    assert response.context["state"].dataset_type is DatasetType.sales


@pytest.mark.django_db
def test_summary_cards_list_every_axis(client) -> None:
    """Inactive axes keep their summary card next to the grouped ones."""

    fresh = client.get("/")
    assert b"Current Dimension Selections" in fresh.content
    assert b"No grouping applied" in fresh.content

    client.post("/", {**SALES_FILTERS, "action": "apply"})
    page = client.get("/")

    assert b"No grouping applied" not in page.content
    assert b"<strong>All Customers</strong>" in page.content
    assert b"<strong>All Regions</strong>" in page.content


@pytest.mark.django_db
def test_table_value_cells_are_right_aligned(client) -> None:
    client.post("/", {**SALES_FILTERS, "chart_type": "table", "action": "apply"})
    page = client.get("/")

    assert page.context["visualization"].chart_type == "table"
    assert b'<th class="numeric">Revenue</th>' in page.content
    assert b'<td class="numeric">' in page.content
