"""Display helpers shared by the table and chart renderers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, Literal

ChartType = Literal["table", "bar", "line", "pie"]

CHART_TYPES: Final[tuple[ChartType, ...]] = ("table", "bar", "line", "pie")

CHART_COLORS: Final[tuple[str, ...]] = (
    "#3b82f6",
    "#10b981",
    "#8b5cf6",
    "#f59e0b",
    "#ef4444",
    "#ec4899",
    "#06b6d4",
    "#14b8a6",
    "#6366f1",
)

_CHART_TYPE_DISPLAY: Final[dict[str, str]] = {
    "table": "📊 Table View",
    "bar": "📶 Bar Chart",
    "line": "📈 Line Chart",
    "pie": "🥧 Pie Chart",
}

NON_DIMENSION_KEYS: Final[frozenset[str]] = frozenset({"revenue", "stock", "chart_label"})


def chart_type_display(chart_type: str) -> str:
    """Return the menu label for a chart type (the raw value when unknown)."""

    return _CHART_TYPE_DISPLAY.get(chart_type, chart_type)


def parse_chart_type(value: object) -> ChartType:
    """Parse a chart type, defaulting to the table view."""

    raw = str(value or "").strip().lower()
    for chart_type in CHART_TYPES:
        if raw == chart_type:
            return chart_type
    return "table"


def format_number(value: float) -> str:
    """Abbreviate large numbers for axis ticks (1.2M, 3.4K).

    Args:
        value: Number to format.

    Returns:
        One-decimal M/K abbreviations at or above 1,000; plain text otherwise.
    """

    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_thousands(value: object) -> str:
    """Format numeric values with thousands separators; other values as text."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.3f}".rstrip("0").rstrip(".")
    return f"{int(value):,}"


def x_axis_key(rows: Sequence[Mapping[str, object]]) -> str:
    """Return the category column for charts.

    The first column that is not a value or label column wins; a row-set with
    no dimension columns falls back to `chart_label`.
    """

    if not rows:
        return ""
    for key in rows[0].keys():
        if key not in NON_DIMENSION_KEYS:
            return key
    return "chart_label"
