"""Template context processors for olapDashboard."""

from __future__ import annotations

from django.http import HttpRequest

from core.dashboard_state import load_filter_state

APP_TITLE = "OLAP Analytics Dashboard"


def dashboard_meta(request: HttpRequest) -> dict[str, str]:
    """Expose the app title and the session's dataset type to all templates.

    Args:
        request: Current request object.

    Returns:
        Context dict with `app_title` and `current_dataset_type`.
    """

    state = load_filter_state(request)
    return {"app_title": APP_TITLE, "current_dataset_type": state.dataset_type.value}
