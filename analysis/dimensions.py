"""Dimension catalogs for the four filter axes.

Each catalog maps a canonical level key (the serialized list of grouping
columns) to a small integer id and a display label. The integer id is what the
data gateway receives in place of the grouping-column list itself.

Catalogs are static, immutable, and shared by every request.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Final

NO_GROUPING: Final[str] = "[]"


class AxisKind(StrEnum):
    """The four filter axes, in their fixed display order."""

    time = "time"
    customer = "customer"
    item = "item"
    geo = "geo"


AXIS_ORDER: Final[tuple[AxisKind, ...]] = (
    AxisKind.time,
    AxisKind.customer,
    AxisKind.item,
    AxisKind.geo,
)


class DatasetType(StrEnum):
    """Dataset selector; controls the value column and the customer/store catalog."""

    sales = "sales"
    inventory = "inventory"

    @property
    def value_field(self) -> str:
        """Return the row column holding the numeric measure."""

        return "revenue" if self is DatasetType.sales else "stock"

    @property
    def value_field_title(self) -> str:
        """Return the human label for the value column."""

        return "Revenue" if self is DatasetType.sales else "Stock Level"

    @property
    def title(self) -> str:
        """Return the capitalized dataset name ("Sales", "Inventory")."""

        return self.value.capitalize()


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """A single grouping level within an axis catalog.

    Args:
        level_key: Canonical serialized grouping-column list (e.g. `'["t.Nam"]'`).
        id: Integer discriminator sent to the data gateway.
        display: Label shown to the user.
    """

    level_key: str
    id: int
    display: str


class DimensionCatalog:
    """Immutable, ordered mapping of level key to CatalogEntry."""

    def __init__(self, axis: AxisKind, entries: Iterable[CatalogEntry]) -> None:
        """Build a catalog, enforcing unique keys and a single default entry."""

        by_key: dict[str, CatalogEntry] = {}
        for entry in entries:
            if entry.level_key in by_key:
                raise ValueError(f"Duplicate level key in {axis} catalog: {entry.level_key!r}")
            if entry.id < 0:
                raise ValueError(f"Catalog ids must be non-negative ({axis}: {entry.level_key!r}).")
            by_key[entry.level_key] = entry
        if NO_GROUPING not in by_key:
            raise ValueError(f"The {axis} catalog is missing the {NO_GROUPING!r} default entry.")
        self.axis = axis
        self._entries = MappingProxyType(by_key)

    def __contains__(self, level_key: object) -> bool:
        return level_key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DimensionCatalog(axis={self.axis.value!r}, keys={list(self._entries)!r})"

    def get(self, level_key: str) -> CatalogEntry | None:
        """Return the entry for a level key, or None when missing."""

        return self._entries.get(level_key)

    @property
    def default(self) -> CatalogEntry:
        """Return the "no grouping" entry."""

        return self._entries[NO_GROUPING]

    def ids(self) -> frozenset[int]:
        """Return the set of declared ids."""

        return frozenset(entry.id for entry in self._entries.values())

    def choices(self) -> tuple[tuple[str, str], ...]:
        """Return `(level_key, display)` pairs for form select widgets."""

        return tuple((entry.level_key, entry.display) for entry in self._entries.values())


TIME_DIMENSIONS: Final[DimensionCatalog] = DimensionCatalog(
    AxisKind.time,
    (
        CatalogEntry(NO_GROUPING, 0, "All Time"),
        CatalogEntry('["t.Nam"]', 1, "Year"),
        CatalogEntry('["t.Quy"]', 2, "Quarter"),
        CatalogEntry('["t.Thang"]', 3, "Month"),
    ),
)

CUSTOMER_DIMENSIONS: Final[MappingProxyType[DatasetType, DimensionCatalog]] = MappingProxyType(
    {
        DatasetType.sales: DimensionCatalog(
            AxisKind.customer,
            (
                CatalogEntry(NO_GROUPING, 0, "All Customers"),
                CatalogEntry('["LoaiKH"]', 1, "Customer Type"),
            ),
        ),
        DatasetType.inventory: DimensionCatalog(
            AxisKind.customer,
            (
                CatalogEntry(NO_GROUPING, 0, "All Stores"),
                CatalogEntry('["s.MaCuaHang"]', 1, "Store Code"),
            ),
        ),
    }
)

ITEM_DIMENSIONS: Final[DimensionCatalog] = DimensionCatalog(
    AxisKind.item,
    (
        CatalogEntry(NO_GROUPING, 0, "All Items"),
        CatalogEntry('["i.KichCo"]', 1, "Size"),
        CatalogEntry('["WeightRange"]', 2, "Weight Range"),
        CatalogEntry('["i.MaMH"]', 3, "Product Code"),
        CatalogEntry('["i.KichCo", "WeightRange"]', 4, "Size & Weight"),
    ),
)

GEO_DIMENSIONS: Final[DimensionCatalog] = DimensionCatalog(
    AxisKind.geo,
    (
        CatalogEntry(NO_GROUPING, 0, "All Regions"),
        CatalogEntry('["g.Bang"]', 1, "State"),
        CatalogEntry('["g.Bang", "g.MaThanhPho"]', 2, "State-City"),
    ),
)


def catalog_for(axis: AxisKind, dataset_type: DatasetType) -> DimensionCatalog:
    """Return the catalog that applies to an axis for a dataset type.

    Only the customer/store axis depends on the dataset type; the other three
    catalogs are shared.
    """

    if axis is AxisKind.customer:
        return CUSTOMER_DIMENSIONS[dataset_type]
    if axis is AxisKind.time:
        return TIME_DIMENSIONS
    if axis is AxisKind.item:
        return ITEM_DIMENSIONS
    return GEO_DIMENSIONS


def axis_label(axis: AxisKind, dataset_type: DatasetType) -> str:
    """Return the short axis label used in breadcrumbs and chart titles."""

    if axis is AxisKind.customer:
        return "Customer" if dataset_type is DatasetType.sales else "Store"
    return axis.value.capitalize()


def parse_dataset_type(value: object, *, default: DatasetType | None = None) -> DatasetType:
    """Parse a dataset type string.

    Args:
        value: Raw value (typically from a form, query string, or payload).
        default: Returned for unknown values; when None, unknown values raise.

    Returns:
        The parsed DatasetType.

    Raises:
        ValueError: When `value` is unknown and no default is given.
    """

    try:
        return DatasetType(str(value).strip().lower())
    except ValueError:
        if default is not None:
            return default
        raise ValueError(f"Unknown dataset type: {value!r}") from None
