"""Advanced-filter refinements and their mapping back to catalog levels.

The advanced screen collects concrete attribute values (a year, a store code,
a set of sizes, ...). Submitting it translates those values into one level key
per axis, which the dashboard then uses as its new selections.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .dimensions import NO_GROUPING, AxisKind, DatasetType
from .selection import FilterState

AVAILABLE_SIZES: Final[tuple[str, ...]] = ("XS", "S", "M", "L", "XL", "XXL")
AVAILABLE_WEIGHT_RANGES: Final[tuple[str, ...]] = (
    "0-5kg",
    "5-10kg",
    "10-15kg",
    "15-20kg",
    "20-25kg",
    "25-30kg",
)
AVAILABLE_CITIES: Final[dict[str, tuple[str, ...]]] = {
    "California": ("Los Angeles", "San Francisco", "San Diego", "Sacramento"),
    "New York": ("New York City", "Buffalo", "Rochester", "Albany"),
    "Texas": ("Houston", "Austin", "Dallas", "San Antonio"),
    "Florida": ("Miami", "Orlando", "Tampa", "Jacksonville"),
    "Illinois": ("Chicago", "Springfield", "Peoria", "Rockford"),
    "Arizona": ("Phoenix", "Tucson", "Mesa", "Chandler"),
}
AVAILABLE_STATES: Final[tuple[str, ...]] = tuple(AVAILABLE_CITIES)

YEAR_MIN: Final[int] = 2000
YEAR_MAX: Final[int] = 2030

TIME_YEAR: Final[str] = '["t.Nam"]'
TIME_QUARTER: Final[str] = '["t.Quy"]'
TIME_MONTH: Final[str] = '["t.Thang"]'
CUSTOMER_TYPE: Final[str] = '["LoaiKH"]'
STORE_CODE: Final[str] = '["s.MaCuaHang"]'
ITEM_SIZE: Final[str] = '["i.KichCo"]'
ITEM_WEIGHT: Final[str] = '["WeightRange"]'
ITEM_CODE: Final[str] = '["i.MaMH"]'
ITEM_SIZE_WEIGHT: Final[str] = '["i.KichCo", "WeightRange"]'
GEO_STATE: Final[str] = '["g.Bang"]'
GEO_STATE_CITY: Final[str] = '["g.Bang", "g.MaThanhPho"]'


@dataclass(frozen=True, slots=True)
class Refinement:
    """Concrete values entered on the advanced filters screen.

    Empty strings, empty tuples, and None all mean "not set".
    """

    year: int | None = None
    quarter: int | None = None
    month: int | None = None
    customer_type: str = ""
    store_code: str = ""
    item_code: str = ""
    sizes: tuple[str, ...] = ()
    weight_ranges: tuple[str, ...] = ()
    state: str = ""
    city: str = ""


def cities_for_state(state: str) -> tuple[str, ...]:
    """Return the selectable cities for a state (empty for unknown states)."""

    return AVAILABLE_CITIES.get(state, ())


def time_level(refinement: Refinement) -> str:
    """Quarter and month only count once a year is chosen; month wins over quarter."""

    if not refinement.year:
        return NO_GROUPING
    if refinement.month:
        return TIME_MONTH
    if refinement.quarter:
        return TIME_QUARTER
    return TIME_YEAR


def customer_level(refinement: Refinement, dataset_type: DatasetType) -> str:
    if dataset_type is DatasetType.sales and refinement.customer_type.strip():
        return CUSTOMER_TYPE
    if dataset_type is DatasetType.inventory and refinement.store_code.strip():
        return STORE_CODE
    return NO_GROUPING


def item_level(refinement: Refinement) -> str:
    """An explicit item code takes precedence over size/weight selections."""

    if refinement.item_code.strip():
        return ITEM_CODE
    if refinement.sizes and refinement.weight_ranges:
        return ITEM_SIZE_WEIGHT
    if refinement.sizes:
        return ITEM_SIZE
    if refinement.weight_ranges:
        return ITEM_WEIGHT
    return NO_GROUPING


def geo_level(refinement: Refinement) -> str:
    """A city only counts when it belongs to the selected state."""

    if not refinement.state:
        return NO_GROUPING
    if refinement.city and refinement.city in cities_for_state(refinement.state):
        return GEO_STATE_CITY
    return GEO_STATE


def derive_levels(dataset_type: DatasetType, refinement: Refinement) -> dict[AxisKind, str]:
    """Map a refinement to one level key per axis."""

    return {
        AxisKind.time: time_level(refinement),
        AxisKind.customer: customer_level(refinement, dataset_type),
        AxisKind.item: item_level(refinement),
        AxisKind.geo: geo_level(refinement),
    }


def refinement_to_state(dataset_type: DatasetType, refinement: Refinement) -> FilterState:
    """Build the FilterState handed back to the dashboard."""

    return FilterState.from_level_keys(dataset_type, derive_levels(dataset_type, refinement))

