"""Filter state and dimension resolution.

`FilterState` holds the active dataset type plus one selection per axis and
derives everything the rest of the dashboard needs from it:

- the numeric ids for the data gateway (`fetch_request`),
- the active-selection strings shared by the breadcrumb and the chart title.

Every selection is resolved against the catalog for the current dataset type,
so a stale level key (for example a store key left over after switching to
sales) degrades to the catalog default instead of failing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Final

from .dimensions import (
    AXIS_ORDER,
    NO_GROUPING,
    AxisKind,
    CatalogEntry,
    DatasetType,
    DimensionCatalog,
    axis_label,
    catalog_for,
    parse_dataset_type,
)
from .dto import FetchRequest

logger = logging.getLogger(__name__)

OVERVIEW_MARKER: Final[str] = "Overview"


@dataclass(frozen=True, slots=True)
class AxisSelection:
    """The active level on one axis."""

    level_key: str
    display: str

    @property
    def is_active(self) -> bool:
        """Return True when the level key is not the "no grouping" key."""

        return self.level_key != NO_GROUPING

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> AxisSelection:
        return cls(level_key=entry.level_key, display=entry.display)


Selections = Mapping[AxisKind, AxisSelection]


def resolve(catalog: DimensionCatalog, level_key: str) -> CatalogEntry:
    """Resolve a level key against a catalog.

    Args:
        catalog: Catalog for the axis (already chosen for the dataset type).
        level_key: Level key from the current selection.

    Returns:
        The matching entry, or the catalog default when the key is unknown.
    """

    entry = catalog.get(level_key)
    if entry is None:
        logger.debug("Unknown %s level key %r; using catalog default.", catalog.axis, level_key)
        return catalog.default
    return entry


def build_fetch_request(dataset_type: DatasetType, selections: Selections) -> FetchRequest:
    """Build the gateway request for the current selections.

    Axes missing from `selections` resolve to their catalog default, so the
    request always carries all four ids.
    """

    ids = {
        axis: resolve(catalog_for(axis, dataset_type), _level_key(selections, axis)).id
        for axis in AXIS_ORDER
    }
    return FetchRequest(
        dataset_type=dataset_type,
        time_id=ids[AxisKind.time],
        customer_id=ids[AxisKind.customer],
        item_id=ids[AxisKind.item],
        geo_id=ids[AxisKind.geo],
    )


def describe_active_selections(dataset_type: DatasetType, selections: Selections) -> tuple[str, ...]:
    """Describe the non-default axes as `"<Axis>: <display>"` strings.

    Axes are emitted in the fixed order time, customer/store, item, geo. An
    axis is active iff its level key differs from the "no grouping" key.

    Returns:
        The active-axis strings, or `(OVERVIEW_MARKER,)` when none is active.
    """

    described: list[str] = []
    for axis in AXIS_ORDER:
        level_key = _level_key(selections, axis)
        if level_key == NO_GROUPING:
            continue
        entry = resolve(catalog_for(axis, dataset_type), level_key)
        described.append(f"{axis_label(axis, dataset_type)}: {entry.display}")
    if not described:
        return (OVERVIEW_MARKER,)
    return tuple(described)


def breadcrumb_items(dataset_type: DatasetType, selections: Selections) -> tuple[str, ...]:
    """Return breadcrumb segments for the current view."""

    active = describe_active_selections(dataset_type, selections)
    if active == (OVERVIEW_MARKER,):
        return (f"All {dataset_type.title} Data {OVERVIEW_MARKER}",)
    return (f"{dataset_type.title} Data by:", *active)


def chart_title(dataset_type: DatasetType, selections: Selections) -> str:
    """Return the chart title for the current view."""

    active = describe_active_selections(dataset_type, selections)
    if active == (OVERVIEW_MARKER,):
        return f"Overall {dataset_type.title} Summary"
    return f"{dataset_type.title} Analysis by {', '.join(active)}"


def _level_key(selections: Selections, axis: AxisKind) -> str:
    selection = selections.get(axis)
    return selection.level_key if selection is not None else NO_GROUPING


@dataclass(frozen=True, slots=True)
class FilterState:
    """Dataset type plus one resolved selection per axis.

    Instances are immutable; every edit returns a new state whose selections
    are valid lookups into the catalogs for its dataset type.
    """

    dataset_type: DatasetType
    time: AxisSelection
    customer: AxisSelection
    item: AxisSelection
    geo: AxisSelection

    @classmethod
    def initial(cls, dataset_type: DatasetType = DatasetType.sales) -> FilterState:
        """Return the all-default state for a dataset type."""

        defaults = {
            axis.value: AxisSelection.from_entry(catalog_for(axis, dataset_type).default)
            for axis in AXIS_ORDER
        }
        return cls(dataset_type=dataset_type, **defaults)

    @classmethod
    def from_level_keys(cls, dataset_type: DatasetType, level_keys: Mapping[AxisKind, str]) -> FilterState:
        """Build a state from raw level keys, resolving each against its catalog."""

        resolved = {
            axis.value: AxisSelection.from_entry(
                resolve(catalog_for(axis, dataset_type), level_keys.get(axis, NO_GROUPING))
            )
            for axis in AXIS_ORDER
        }
        return cls(dataset_type=dataset_type, **resolved)

    @property
    def selections(self) -> dict[AxisKind, AxisSelection]:
        """Return the per-axis selections keyed by AxisKind, in axis order."""

        return {axis: getattr(self, axis.value) for axis in AXIS_ORDER}

    def select(self, axis: AxisKind, level_key: str) -> FilterState:
        """Return a copy with one axis set to `level_key` (resolved)."""

        entry = resolve(catalog_for(axis, self.dataset_type), level_key)
        return replace(self, **{axis.value: AxisSelection.from_entry(entry)})

    def with_dataset_type(self, dataset_type: DatasetType) -> FilterState:
        """Return a copy for another dataset type.

        The customer/store axis always resets to its default for the new
        dataset type; time, item, and geo selections are kept.
        """

        customer_default = CUSTOMER_DEFAULTS[dataset_type]
        return replace(self, dataset_type=dataset_type, customer=customer_default)

    def fetch_request(self) -> FetchRequest:
        return build_fetch_request(self.dataset_type, self.selections)

    def active_selections(self) -> tuple[str, ...]:
        return describe_active_selections(self.dataset_type, self.selections)

    def breadcrumb(self) -> tuple[str, ...]:
        return breadcrumb_items(self.dataset_type, self.selections)

    def title(self) -> str:
        return chart_title(self.dataset_type, self.selections)

    def has_active_axis(self) -> bool:
        return any(selection.is_active for selection in self.selections.values())

    def to_payload(self) -> dict[str, Any]:
        """Encode as the handoff payload (`dataType` plus per-axis `level`/`display`)."""

        payload: dict[str, Any] = {"dataType": self.dataset_type.value}
        for axis, selection in self.selections.items():
            payload[axis.value] = {"level": selection.level_key, "display": selection.display}
        return payload

    @classmethod
    def from_payload(cls, payload: object) -> FilterState:
        """Decode a handoff payload produced by `to_payload`.

        Unknown level keys fall back to catalog defaults. Stored display labels
        are ignored in favour of the catalog's own labels.

        Raises:
            ValueError: When the payload is not a mapping, or its dataType is unknown.
        """

        if not isinstance(payload, Mapping):
            raise ValueError("Filter payload must be a JSON object.")
        dataset_type = parse_dataset_type(payload.get("dataType"))
        level_keys: dict[AxisKind, str] = {}
        for axis in AXIS_ORDER:
            raw = payload.get(axis.value)
            if raw is None:
                continue
            if not isinstance(raw, Mapping):
                raise ValueError(f"Filter payload axis {axis.value!r} must be an object.")
            level_keys[axis] = str(raw.get("level") or NO_GROUPING)
        return cls.from_level_keys(dataset_type, level_keys)


CUSTOMER_DEFAULTS: Final[dict[DatasetType, AxisSelection]] = {
    dataset_type: AxisSelection.from_entry(catalog_for(AxisKind.customer, dataset_type).default)
    for dataset_type in DatasetType
}
