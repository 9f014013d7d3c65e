"""Render a fetched row-set as a table or a Chart.js payload.

Rendering is purely a function of (rows, dataset type, chart type, title); it
never touches the session or the gateway.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Final

from analysis.dimensions import DatasetType
from analysis.formatting import CHART_COLORS, ChartType, format_number, format_thousands, x_axis_key

from .schema import ChartData, ChartDataset, RenderedVisualization, TableCell, TableColumn, TableView, ValueAxis

MAX_PIE_SEGMENTS: Final[int] = 10
EMPTY_STATE_TITLE: Final[str] = "No Data to Display"
NO_POSITIVE_PIE_VALUES: Final[str] = "No positive values available for pie chart."
VALUE_AXIS_TICKS: Final[int] = 5


def render_visualization(
    *,
    rows: Sequence[Mapping[str, object]] | None,
    dataset_type: DatasetType,
    chart_type: ChartType,
    title: str,
) -> RenderedVisualization:
    """Render the dashboard visualization panel.

    Args:
        rows: Last fetched row-set, or None when nothing was fetched yet.
        dataset_type: Dataset type used to pick the value column.
        chart_type: Requested visualization mode.
        title: Panel title (see `FilterState.title`).

    Returns:
        RenderedVisualization for the template.
    """

    if not rows:
        return RenderedVisualization(chart_type=chart_type, title=title, empty=True)

    value_field = dataset_type.value_field
    value_title = dataset_type.value_field_title
    x_key = x_axis_key(rows)

    if chart_type == "table":
        return RenderedVisualization(
            chart_type=chart_type,
            title=title,
            table=_table_view(rows, value_field=value_field, value_title=value_title),
            x_axis_key=x_key,
            value_title=value_title,
        )

    if chart_type == "pie":
        return _render_pie(rows, title=title, value_field=value_field, value_title=value_title, x_key=x_key)

    dataset: ChartDataset = {
        "label": value_title,
        "data": [_as_number(row.get(value_field)) for row in rows],
        "borderColor": CHART_COLORS[0],
        "backgroundColor": CHART_COLORS[0],
    }
    if chart_type == "bar":
        dataset["borderRadius"] = 4
    else:
        dataset["borderWidth"] = 2
        dataset["pointRadius"] = 4
        dataset["pointHoverRadius"] = 8
        dataset["tension"] = 0.3
    chart: ChartData = {
        "labels": [str(row.get(x_key, "")) for row in rows],
        "datasets": [dataset],
        "valueLabels": [format_thousands(row.get(value_field)) for row in rows],
        "valueAxis": value_axis(dataset["data"]),
    }
    return RenderedVisualization(
        chart_type=chart_type,
        title=title,
        chart=chart,
        x_axis_key=x_key,
        value_title=value_title,
    )


def _render_pie(
    rows: Sequence[Mapping[str, object]],
    *,
    title: str,
    value_field: str,
    value_title: str,
    x_key: str,
) -> RenderedVisualization:
    """Render a pie chart from the positive-valued rows only."""

    pie_rows = [row for row in rows if (_as_number(row.get(value_field)) or 0) > 0]
    if not pie_rows:
        return RenderedVisualization(
            chart_type="pie",
            title=title,
            x_axis_key=x_key,
            value_title=value_title,
            error=NO_POSITIVE_PIE_VALUES,
        )

    warnings: tuple[str, ...] = ()
    if len(pie_rows) > MAX_PIE_SEGMENTS:
        warnings = (
            f"Pie chart may be less effective with {len(pie_rows)} categories. "
            "Consider Bar chart or more filters.",
        )
    dataset: ChartDataset = {
        "label": value_title,
        "data": [_as_number(row.get(value_field)) for row in pie_rows],
        "borderColor": "#ffffff",
        "backgroundColor": [CHART_COLORS[idx % len(CHART_COLORS)] for idx in range(len(pie_rows))],
    }
    return RenderedVisualization(
        chart_type="pie",
        title=title,
        chart={
            "labels": [str(row.get(x_key, "")) for row in pie_rows],
            "datasets": [dataset],
            "valueLabels": [format_thousands(row.get(value_field)) for row in pie_rows],
        },
        x_axis_key=x_key,
        value_title=value_title,
        warnings=warnings,
    )


def _table_view(rows: Sequence[Mapping[str, object]], *, value_field: str, value_title: str) -> TableView:
    """Build the table payload; the value column gets its display title and grouping."""

    keys = tuple(rows[0].keys())
    columns = tuple(
        TableColumn(key=key, title=value_title, numeric=True) if key == value_field else TableColumn(key=key, title=key)
        for key in keys
    )
    body = tuple(
        tuple(
            TableCell(format_thousands(row.get(key)), numeric=True)
            if key == value_field
            else TableCell(str(row.get(key, "")))
            for key in keys
        )
        for row in rows
    )
    return TableView(columns=columns, rows=body)


def value_axis(values: Sequence[float | None]) -> ValueAxis:
    """Return a zero-based value scale with K/M-abbreviated tick labels.

    Args:
        values: Plotted values; None entries are ignored.

    Returns:
        A ValueAxis whose ticks are multiples of a 1/2/5 step covering the
        largest value.
    """

    top = max((value for value in values if value is not None), default=0.0)
    step = _nice_step(top / VALUE_AXIS_TICKS)
    count = max(1, math.ceil(top / step))
    ticks = [step * idx for idx in range(count + 1)]
    return {
        "max": ticks[-1],
        "stepSize": step,
        "tickLabels": {str(tick): format_number(tick) for tick in ticks},
    }


def _nice_step(raw: float) -> int:
    if raw <= 1:
        return 1
    magnitude = 10 ** math.floor(math.log10(raw))
    for multiple in (1, 2, 5, 10):
        if multiple * magnitude >= raw:
            return int(multiple * magnitude)
    return int(10 * magnitude)


def _as_number(value: object) -> float | None:
    """Coerce a cell to a float for chart data (None when not numeric)."""

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value))
    except (TypeError, ValueError):
        return None
