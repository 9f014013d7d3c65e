"""Django integration tests for the JSON data endpoint."""

from __future__ import annotations

import pytest

from core import gateway

pytestmark = pytest.mark.integration


@pytest.mark.django_db
def test_data_api_returns_rows_for_ids(client) -> None:
    response = client.get("/api/data/", {"dataType": "sales", "time": 1, "customer": 0, "item": 1, "geo": 0})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["columns"] == ["Year", "Size", "revenue"]
    assert len(payload["data"]) == 6


@pytest.mark.django_db
def test_data_api_undeclared_ids_resolve_to_default(client) -> None:
    """Unknown or malformed ids behave like 0, yielding the overview row."""

    response = client.get("/api/data/", {"dataType": "inventory", "time": 9, "customer": "x", "item": -1})

    payload = response.json()
    assert payload["columns"] == ["chart_label", "stock"]
    assert payload["data"][0]["chart_label"] == "Overall - All"


@pytest.mark.django_db
def test_data_api_rejects_unknown_dataset_type(client) -> None:
    response = client.get("/api/data/", {"dataType": "weather"})

    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.django_db
def test_data_api_reports_gateway_failure(client, monkeypatch) -> None:
    def boom(*args, **kwargs):
        raise RuntimeError("warehouse offline")

    monkeypatch.setattr(gateway, "generate_rows", boom)
    response = client.get("/api/data/")

    assert response.status_code == 502
    assert response.json() == {"data": [], "columns": [], "success": False, "message": "warehouse offline"}


@pytest.mark.django_db
def test_data_api_is_read_only(client) -> None:
    assert client.post("/api/data/").status_code == 405
