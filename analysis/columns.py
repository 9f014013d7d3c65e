"""Column-driven filter availability for the advanced filters screen.

The advanced screen only offers refinements for dimensions that actually
appeared in the last fetched row-set. Availability is a plain set-membership
test over column names; unrecognised columns are ignored.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from .dimensions import AXIS_ORDER, AxisKind, DatasetType

TIME_COLUMNS: Final[frozenset[str]] = frozenset({"Year", "Quarter", "Month"})
ITEM_COLUMNS: Final[frozenset[str]] = frozenset({"Size", "WeightRange", "ProductCode"})
GEO_COLUMNS: Final[frozenset[str]] = frozenset({"State", "City"})
CUSTOMER_COLUMN: Final[dict[DatasetType, str]] = {
    DatasetType.sales: "CustomerType",
    DatasetType.inventory: "StoreCode",
}


class FilterControl(StrEnum):
    """Individual refinement controls on the advanced filters screen."""

    year = "year"
    quarter = "quarter"
    month = "month"
    customer_type = "customer_type"
    store_code = "store_code"
    item_code = "item_code"
    sizes = "sizes"
    weight_ranges = "weight_ranges"
    state = "state"
    city = "city"


CONTROL_COLUMN: Final[dict[FilterControl, str]] = {
    FilterControl.year: "Year",
    FilterControl.quarter: "Quarter",
    FilterControl.month: "Month",
    FilterControl.customer_type: "CustomerType",
    FilterControl.store_code: "StoreCode",
    FilterControl.item_code: "ProductCode",
    FilterControl.sizes: "Size",
    FilterControl.weight_ranges: "WeightRange",
    FilterControl.state: "State",
    FilterControl.city: "City",
}

SECTION_CONTROLS: Final[dict[AxisKind, tuple[FilterControl, ...]]] = {
    AxisKind.time: (FilterControl.year, FilterControl.quarter, FilterControl.month),
    AxisKind.item: (FilterControl.item_code, FilterControl.sizes, FilterControl.weight_ranges),
    AxisKind.geo: (FilterControl.state, FilterControl.city),
}


def axis_columns(axis: AxisKind, dataset_type: DatasetType) -> frozenset[str]:
    """Return the column names that make an axis section visible."""

    if axis is AxisKind.time:
        return TIME_COLUMNS
    if axis is AxisKind.customer:
        return frozenset({CUSTOMER_COLUMN[dataset_type]})
    if axis is AxisKind.item:
        return ITEM_COLUMNS
    return GEO_COLUMNS


def has_column_type(columns: Iterable[str], axis: AxisKind, dataset_type: DatasetType) -> bool:
    """Return True when any column recognised for `axis` occurs in `columns`."""

    return not axis_columns(axis, dataset_type).isdisjoint(columns)


def has_control(columns: Iterable[str], control: FilterControl) -> bool:
    """Return True when the control's own column occurs in `columns`."""

    return CONTROL_COLUMN[control] in set(columns)


def section_controls(axis: AxisKind, dataset_type: DatasetType) -> tuple[FilterControl, ...]:
    """Return the controls belonging to an axis section for a dataset type."""

    if axis is AxisKind.customer:
        if dataset_type is DatasetType.sales:
            return (FilterControl.customer_type,)
        return (FilterControl.store_code,)
    return SECTION_CONTROLS[axis]


@dataclass(frozen=True, slots=True)
class FilterSection:
    """A visible advanced-filter section and its visible controls."""

    axis: AxisKind
    controls: tuple[FilterControl, ...]


def available_sections(columns: Iterable[str], dataset_type: DatasetType) -> tuple[FilterSection, ...]:
    """Return the visible sections, in axis order, for an observed column set.

    A section is visible when `has_column_type` holds; within it, each
    control is shown only when its literal column is present.
    """

    observed = frozenset(columns)
    sections: list[FilterSection] = []
    for axis in AXIS_ORDER:
        if not has_column_type(observed, axis, dataset_type):
            continue
        controls = tuple(
            control for control in section_controls(axis, dataset_type) if has_control(observed, control)
        )
        sections.append(FilterSection(axis=axis, controls=controls))
    return tuple(sections)
