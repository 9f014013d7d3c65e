"""One-shot, session-backed inboxes for passing payloads between screens.

Each inbox is a single named slot in the Django session. `put` overwrites the
slot; `take_if_present` reads and clears it in one step, so a payload is
consumed at most once. A payload that cannot be decoded is dropped and
reported as absent.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass
from typing import Any, Final, Generic, TypeVar

from analysis.dimensions import DatasetType, parse_dataset_type
from analysis.selection import FilterState

logger = logging.getLogger(__name__)

T = TypeVar("T")

ADVANCED_FILTERS_SEED_KEY: Final[str] = "advanced_filters_seed"
ADVANCED_FILTERS_KEY: Final[str] = "advanced_filters"


class SessionInbox(Generic[T]):
    """A typed single-slot inbox stored as a JSON string in the session."""

    def __init__(
        self,
        session: MutableMapping[str, Any],
        *,
        key: str,
        encode: Callable[[T], object],
        decode: Callable[[object], T],
    ) -> None:
        """Bind the inbox to a session slot.

        Args:
            session: Request session (any mutable mapping works in tests).
            key: Session key holding the serialized payload.
            encode: Converts a payload into a JSON-serializable value.
            decode: Converts parsed JSON back into a payload; raises ValueError
                (or TypeError/KeyError) when the shape is wrong.
        """

        self._session = session
        self._key = key
        self._encode = encode
        self._decode = decode

    def put(self, payload: T) -> None:
        """Store a payload, replacing any unread one."""

        self._session[self._key] = json.dumps(self._encode(payload))
        _mark_modified(self._session)

    def take_if_present(self) -> T | None:
        """Read and clear the slot.

        Returns:
            The decoded payload, or None when the slot is empty or malformed.
        """

        raw = self._session.pop(self._key, None)
        if raw is None:
            return None
        _mark_modified(self._session)
        try:
            return self._decode(json.loads(raw))
        except (TypeError, ValueError, KeyError) as exc:
            logger.warning("Dropping malformed %s handoff payload: %s", self._key, exc)
            return None


def _mark_modified(session: MutableMapping[str, Any]) -> None:
    if hasattr(session, "modified"):
        session.modified = True


@dataclass(frozen=True, slots=True)
class AdvancedFiltersSeed:
    """Dashboard → advanced filters payload: dataset type and observed columns."""

    dataset_type: DatasetType
    columns: tuple[str, ...]

    def to_payload(self) -> dict[str, object]:
        return {"dataType": self.dataset_type.value, "columns": list(self.columns)}

    @classmethod
    def from_payload(cls, payload: object) -> AdvancedFiltersSeed:
        """Decode a stored seed.

        Raises:
            ValueError: When the payload shape or dataset type is invalid.
        """

        if not isinstance(payload, dict):
            raise ValueError("Seed payload must be a JSON object.")
        columns = payload.get("columns")
        if not isinstance(columns, list) or not all(isinstance(col, str) for col in columns):
            raise ValueError("Seed columns must be a list of strings.")
        return cls(dataset_type=parse_dataset_type(payload.get("dataType")), columns=tuple(columns))


def advanced_filters_seed_inbox(session: MutableMapping[str, Any]) -> SessionInbox[AdvancedFiltersSeed]:
    """Return the dashboard → advanced filters inbox for a session."""

    return SessionInbox(
        session,
        key=ADVANCED_FILTERS_SEED_KEY,
        encode=AdvancedFiltersSeed.to_payload,
        decode=AdvancedFiltersSeed.from_payload,
    )


def advanced_filters_inbox(session: MutableMapping[str, Any]) -> SessionInbox[FilterState]:
    """Return the advanced filters → dashboard inbox for a session."""

    return SessionInbox(
        session,
        key=ADVANCED_FILTERS_KEY,
        encode=FilterState.to_payload,
        decode=FilterState.from_payload,
    )
