"""Data gateway: turns a FetchRequest into a FetchResponse.

The backing store is the fixture generator in `analysis.mock_data`. The
gateway adds the simulated latency and converts any generator error into a
failed response, so callers only ever have to branch on `success`.
"""

from __future__ import annotations

import logging
import random
import time

from django.conf import settings

from analysis.dto import FetchRequest, FetchResponse
from analysis.mock_data import generate_rows

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error occurred"


def fetch_data(request: FetchRequest, *, rng: random.Random | None = None) -> FetchResponse:
    """Fetch aggregated rows for a request.

    Args:
        request: Gateway request built from the current filter state.
        rng: Optional random source; defaults to one seeded from
            `DASHBOARD_MOCK_SEED` when that setting is set.

    Returns:
        A successful FetchResponse with rows and columns, or a failed one with
        a message. Exceptions from the generator never propagate.
    """

    delay = float(getattr(settings, "DASHBOARD_FETCH_DELAY_SECONDS", 0.0) or 0.0)
    if delay > 0:
        time.sleep(delay)

    if rng is None:
        seed = getattr(settings, "DASHBOARD_MOCK_SEED", None)
        rng = random.Random(seed) if seed is not None else random.Random()

    try:
        rows = generate_rows(request, rng=rng)
    except Exception as exc:
        logger.exception("Data fetch failed for %s", request.as_json())
        return FetchResponse.failure(str(exc) or UNKNOWN_ERROR)

    response = FetchResponse.ok(rows)
    logger.info("Fetched %d row(s) for %s", len(response.rows), request.as_json())
    return response
