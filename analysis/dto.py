"""DTOs exchanged with the data gateway.

The gateway accepts exactly one request shape (FetchRequest) and answers with
a FetchResponse. `as_json()` on either returns the JSON keys used by the
browser-facing API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .dimensions import DatasetType

Row = dict[str, Any]


@dataclass(frozen=True, slots=True)
class FetchRequest:
    """Numeric-id request for aggregated rows.

    Args:
        dataset_type: Sales or inventory.
        time_id: Time catalog id.
        customer_id: Customer/store catalog id for `dataset_type`.
        item_id: Item catalog id.
        geo_id: Geography catalog id.
    """

    dataset_type: DatasetType
    time_id: int
    customer_id: int
    item_id: int
    geo_id: int

    def as_json(self) -> dict[str, object]:
        """Return the wire representation."""

        return {
            "dataType": self.dataset_type.value,
            "time": self.time_id,
            "customer": self.customer_id,
            "item": self.item_id,
            "geo": self.geo_id,
        }

    def is_overview(self) -> bool:
        """Return True when no axis is grouped."""

        return not any((self.time_id, self.customer_id, self.item_id, self.geo_id))


@dataclass(frozen=True, slots=True)
class FetchResponse:
    """Gateway answer: a row-set on success, or a failure message.

    Args:
        rows: Ordered records sharing the same column set.
        columns: Column names of the first record (empty when there are no rows).
        success: Whether the fetch succeeded.
        message: Failure description when `success` is False.
    """

    rows: tuple[Row, ...] = ()
    columns: tuple[str, ...] = ()
    success: bool = True
    message: str | None = None

    @classmethod
    def ok(cls, rows: list[Row] | tuple[Row, ...]) -> FetchResponse:
        """Build a successful response, deriving columns from the first row."""

        rows = tuple(rows)
        columns = tuple(rows[0].keys()) if rows else ()
        return cls(rows=rows, columns=columns, success=True)

    @classmethod
    def failure(cls, message: str) -> FetchResponse:
        """Build a failed response with no rows."""

        return cls(rows=(), columns=(), success=False, message=message)

    def as_json(self) -> dict[str, object]:
        """Return the wire representation (`data`, `columns`, `success`, `message?`)."""

        payload: dict[str, object] = {
            "data": [dict(row) for row in self.rows],
            "columns": list(self.columns),
            "success": self.success,
        }
        if self.message is not None:
            payload["message"] = self.message
        return payload
