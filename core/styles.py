"""Per-axis presentation: icon, accent colour, and titles for filter/summary cards."""

from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never

from analysis.dimensions import AxisKind, DatasetType, axis_label


@dataclass(frozen=True, slots=True)
class AxisStyle:
    """Visual treatment for one axis.

    Args:
        axis: Axis the style applies to.
        icon: Emoji icon shown next to the card title.
        accent: CSS colour for the card border and badge.
        tint: CSS background colour for summary cards.
        card_title: Filter card heading (e.g. "Store Dimension").
        summary_title: Summary card heading (e.g. "Store").
    """

    axis: AxisKind
    icon: str
    accent: str
    tint: str
    card_title: str
    summary_title: str


def axis_style(axis: AxisKind, dataset_type: DatasetType) -> AxisStyle:
    """Return the style for an axis; the customer axis follows the dataset type."""

    match axis:
        case AxisKind.time:
            icon, accent, tint, heading = "🕒", "#3b82f6", "#eff6ff", "Time Dimension"
        case AxisKind.customer:
            if dataset_type is DatasetType.sales:
                icon, heading = "👥", "Customer Dimension"
            else:
                icon, heading = "🏬", "Store Dimension"
            accent, tint = "#10b981", "#ecfdf5"
        case AxisKind.item:
            icon, accent, tint, heading = "📦", "#8b5cf6", "#f5f3ff", "Item Dimension"
        case AxisKind.geo:
            icon, accent, tint, heading = "🌐", "#f59e0b", "#fffbeb", "Geography Dimension"
        case _:
            assert_never(axis)
    return AxisStyle(
        axis=axis,
        icon=icon,
        accent=accent,
        tint=tint,
        card_title=heading,
        summary_title=axis_label(axis, dataset_type),
    )
