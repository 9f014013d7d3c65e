"""Payload types for dashboard visualizations.

A rendered visualization is either a table (header + formatted cells) or a
Chart.js payload (labels + datasets). The template picks the branch from
`RenderedVisualization.chart_type`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NotRequired, TypedDict

from analysis.formatting import ChartType


class ChartDataset(TypedDict, total=False):
    """A Chart.js dataset payload for the dashboard."""

    label: str
    data: list[float | None]
    borderColor: str
    backgroundColor: str | list[str]
    borderWidth: int
    borderRadius: int
    pointRadius: int
    pointHoverRadius: int
    tension: float


class ValueAxis(TypedDict):
    """Fixed value-axis scale with abbreviated tick labels (keyed by tick value)."""

    max: int
    stepSize: int
    tickLabels: dict[str, str]


class ChartData(TypedDict):
    """The full Chart.js payload for the chart panel.

    `valueLabels` holds the grouped tooltip text for each data point;
    `valueAxis` is present for bar and line charts only.
    """

    labels: list[str]
    datasets: list[ChartDataset]
    valueLabels: list[str]
    valueAxis: NotRequired[ValueAxis]


@dataclass(frozen=True, slots=True)
class TableCell:
    """A formatted body cell; value cells are right-aligned."""

    text: str
    numeric: bool = False


@dataclass(frozen=True, slots=True)
class TableColumn:
    """A table header cell.

    Args:
        key: Row key the column reads from.
        title: Header text.
        numeric: Whether cells are right-aligned value cells.
    """

    key: str
    title: str
    numeric: bool = False


@dataclass(frozen=True, slots=True)
class TableView:
    """Formatted table rows for the table visualization."""

    columns: tuple[TableColumn, ...]
    rows: tuple[tuple[TableCell, ...], ...]

    @property
    def record_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True, slots=True)
class RenderedVisualization:
    """A rendered visualization panel.

    Args:
        chart_type: Requested visualization mode.
        title: Panel title.
        empty: True when there is nothing to show (no row-set yet, or no rows).
        table: Table payload when `chart_type == "table"`.
        chart: Chart.js payload for bar/line/pie.
        x_axis_key: Category column used for chart labels.
        value_title: Human label for the value column.
        error: Message shown instead of the chart when it cannot be drawn.
        warnings: Advisory notes shown above the chart.
    """

    chart_type: ChartType
    title: str
    empty: bool = False
    table: TableView | None = None
    chart: ChartData | None = None
    x_axis_key: str = ""
    value_title: str = ""
    error: str | None = None
    warnings: tuple[str, ...] = ()
