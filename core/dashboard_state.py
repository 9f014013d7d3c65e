"""Session persistence for the dashboard's working state.

The dashboard keeps three things per browser session: the current filter
state, the chosen visualization mode, and the last successfully fetched
row-set. Reads are best-effort: anything that fails to decode is treated as
missing and replaced with defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from django.http import HttpRequest

from analysis.dimensions import DatasetType, parse_dataset_type
from analysis.dto import FetchResponse, Row
from analysis.formatting import ChartType, parse_chart_type
from analysis.selection import FilterState

logger = logging.getLogger(__name__)

STATE_SESSION_KEY: Final[str] = "dashboard_state"
CHART_TYPE_SESSION_KEY: Final[str] = "dashboard_chart_type"
ROWSET_SESSION_KEY: Final[str] = "dashboard_rowset"


@dataclass(frozen=True, slots=True)
class StoredRowSet:
    """The last successfully fetched row-set and the dataset it belongs to."""

    dataset_type: DatasetType
    rows: tuple[Row, ...]
    columns: tuple[str, ...]


def load_filter_state(request: HttpRequest) -> FilterState:
    """Return the session filter state, or the sales defaults."""

    payload = request.session.get(STATE_SESSION_KEY)
    if payload is None:
        return FilterState.initial()
    try:
        return FilterState.from_payload(payload)
    except ValueError as exc:
        logger.warning("Discarding malformed dashboard state: %s", exc)
        return FilterState.initial()


def save_filter_state(request: HttpRequest, state: FilterState) -> None:
    request.session[STATE_SESSION_KEY] = state.to_payload()
    request.session.modified = True


def load_chart_type(request: HttpRequest) -> ChartType:
    return parse_chart_type(request.session.get(CHART_TYPE_SESSION_KEY))


def save_chart_type(request: HttpRequest, chart_type: str) -> None:
    request.session[CHART_TYPE_SESSION_KEY] = parse_chart_type(chart_type)
    request.session.modified = True


def load_rowset(request: HttpRequest) -> StoredRowSet | None:
    """Return the stored row-set, or None when absent or malformed."""

    payload = request.session.get(ROWSET_SESSION_KEY)
    if not isinstance(payload, dict):
        return None
    rows = payload.get("data")
    columns = payload.get("columns")
    if not isinstance(rows, list) or not isinstance(columns, list):
        return None
    try:
        dataset_type = parse_dataset_type(payload.get("dataType"))
    except ValueError:
        return None
    return StoredRowSet(
        dataset_type=dataset_type,
        rows=tuple(dict(row) for row in rows if isinstance(row, dict)),
        columns=tuple(str(column) for column in columns),
    )


def save_rowset(request: HttpRequest, dataset_type: DatasetType, response: FetchResponse) -> None:
    """Replace the stored row-set with a successful response (last write wins)."""

    payload = response.as_json()
    payload["dataType"] = dataset_type.value
    payload.pop("message", None)
    payload.pop("success", None)
    request.session[ROWSET_SESSION_KEY] = payload
    request.session.modified = True


def clear_rowset(request: HttpRequest) -> None:
    if request.session.pop(ROWSET_SESSION_KEY, None) is not None:
        request.session.modified = True
