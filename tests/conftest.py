"""Pytest fixtures shared across the dashboard test suite."""

from __future__ import annotations

import random
from collections.abc import Sequence

import pytest

MOCK_SEED = 1234


@pytest.fixture(autouse=True)
def _no_fetch_delay(settings) -> None:
    """Disable the simulated gateway latency for every test."""

    settings.DASHBOARD_FETCH_DELAY_SECONDS = 0
    settings.DASHBOARD_MOCK_SEED = None


@pytest.fixture
def rng() -> random.Random:
    """Return a seeded random source for reproducible fixture rows."""

    return random.Random(MOCK_SEED)


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite is runnable by intent:
    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django sessions, views, or the test client.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
