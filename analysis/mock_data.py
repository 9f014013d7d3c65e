"""Fixture row generator standing in for the aggregation backend.

Rows are fabricated from the request's integer ids: each non-zero id adds one
or two dimension columns, and every row carries the dataset's value column.
Randomness comes from an injectable `random.Random`, so callers (and tests)
can make the output reproducible.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from typing import Final

from .dimensions import DatasetType
from .dto import FetchRequest, Row

OVERALL_LABEL: Final[str] = "Overall - All"
MIN_ROWS: Final[int] = 5
MAX_ROWS: Final[int] = 20

_SIZES: Final[tuple[str, ...]] = ("S", "M", "L", "XL")

TIME_COLUMNS_BY_ID: Final[dict[int, tuple[str, ...]]] = {
    1: ("Year",),
    2: ("Quarter",),
    3: ("Month",),
}
ITEM_COLUMNS_BY_ID: Final[dict[int, tuple[str, ...]]] = {
    1: ("Size",),
    2: ("WeightRange",),
    3: ("ProductCode",),
    4: ("Size", "WeightRange"),
}
GEO_COLUMNS_BY_ID: Final[dict[int, tuple[str, ...]]] = {
    1: ("State",),
    2: ("State", "City"),
}

COLUMN_VALUES: Final[dict[str, Callable[[int], object]]] = {
    "Year": lambda i: 2020 + i % 5,
    "Quarter": lambda i: f"Q{1 + i % 4}",
    "Month": lambda i: f"Month {1 + i % 12}",
    "CustomerType": lambda i: f"Type {1 + i % 3}",
    "StoreCode": lambda i: f"Store {10 + i}",
    "Size": lambda i: _SIZES[i % 4],
    "WeightRange": lambda i: f"{(i % 3 + 1) * 5}-{(i % 3 + 2) * 5}kg",
    "ProductCode": lambda i: f"PROD-{1000 + i}",
    "State": lambda i: f"State {chr(65 + i % 10)}",
    "City": lambda i: f"City {i + 1}",
}


def dimension_columns(request: FetchRequest) -> tuple[str, ...]:
    """Return the dimension columns emitted for a request, in axis order."""

    columns: list[str] = []
    columns.extend(TIME_COLUMNS_BY_ID.get(request.time_id, ()))
    if request.customer_id > 0:
        columns.append("CustomerType" if request.dataset_type is DatasetType.sales else "StoreCode")
    columns.extend(ITEM_COLUMNS_BY_ID.get(request.item_id, ()))
    columns.extend(GEO_COLUMNS_BY_ID.get(request.geo_id, ()))
    return tuple(columns)


def row_count(dimension_total: int) -> int:
    """Return the number of rows fabricated for `dimension_total` dimension columns."""

    return min(MAX_ROWS, max(MIN_ROWS, dimension_total * 3))


def generate_rows(request: FetchRequest, *, rng: random.Random | None = None) -> list[Row]:
    """Fabricate aggregated rows for a request.

    Args:
        request: Gateway request carrying the four catalog ids.
        rng: Optional random source; a fresh unseeded one is used when omitted.

    Returns:
        A single overall row when no dimension is grouped, otherwise 5 to 20
        rows sharing the same columns.
    """

    rng = rng or random.Random()
    value_field = request.dataset_type.value_field
    columns = dimension_columns(request)

    if not columns:
        return [{"chart_label": OVERALL_LABEL, value_field: rng.randint(0, 100_000)}]

    rows: list[Row] = []
    for i in range(row_count(len(columns))):
        row: Row = {column: COLUMN_VALUES[column](i) for column in columns}
        row[value_field] = rng.randint(0, 10_000) * (1 + i % 10)
        rows.append(row)
    return rows
