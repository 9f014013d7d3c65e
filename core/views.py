"""Views for the dashboard, the advanced filters screen, and the data API."""

from __future__ import annotations

import json
import logging
from typing import Any

from django.contrib import messages
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_http_methods

from analysis.advanced import AVAILABLE_CITIES, refinement_to_state
from analysis.columns import available_sections
from analysis.dimensions import AXIS_ORDER, AxisKind, DatasetType, catalog_for, parse_dataset_type
from analysis.dto import FetchRequest
from analysis.selection import FilterState
from core.charting.render import EMPTY_STATE_TITLE, render_visualization
from core.dashboard_state import (
    clear_rowset,
    load_chart_type,
    load_filter_state,
    load_rowset,
    save_chart_type,
    save_filter_state,
    save_rowset,
)
from core.forms import AdvancedFilterForm, DashboardFilterForm
from core.gateway import fetch_data
from core.handoff import AdvancedFiltersSeed, advanced_filters_inbox, advanced_filters_seed_inbox
from core.styles import axis_style

logger = logging.getLogger(__name__)

FETCH_SUCCESS_MESSAGE = "Data loaded successfully"
FETCH_FAILURE_MESSAGE = "Failed to load data"
NEED_DATA_MESSAGE = "Please apply filters first to see available columns"
ADVANCED_APPLIED_MESSAGE = "Advanced filters applied"


@require_http_methods(["GET", "POST"])
def dashboard(request: HttpRequest) -> HttpResponse:
    """Render the dashboard and handle its filter actions.

    POST actions:
        switch_dataset: change the dataset type (resets the customer/store axis).
        update: store edited selections without fetching.
        apply: store edited selections and fetch rows.
        advanced: hand the observed columns to the advanced filters screen.
    """

    state = load_filter_state(request)

    if request.method == "POST":
        action = (request.POST.get("action") or "apply").strip()
        form = DashboardFilterForm(request.POST, dataset_type=state.dataset_type)
        if not form.is_valid():
            messages.error(request, "Could not update filters: invalid selection.")
            return redirect("core:dashboard")

        if form.cleaned_data.get("chart_type"):
            save_chart_type(request, form.selected_chart_type())

        if action == "switch_dataset":
            dataset_type = form.dataset()
            if dataset_type is not state.dataset_type:
                logger.info("Switching dataset type from %s to %s", state.dataset_type, dataset_type)
                save_filter_state(request, state.with_dataset_type(dataset_type))
                clear_rowset(request)
            return redirect("core:dashboard")

        if action == "advanced":
            return _open_advanced_filters(request, state)

        state = form.to_state(state.dataset_type)
        save_filter_state(request, state)
        if action == "apply":
            _fetch_into_session(request, state)
        elif action != "update":
            messages.error(request, "Unknown action.")
        return redirect("core:dashboard")

    handed_off = advanced_filters_inbox(request.session).take_if_present()
    if handed_off is not None:
        logger.info("Applying advanced filters for %s: %s", handed_off.dataset_type, handed_off.active_selections())
        if handed_off.dataset_type is not state.dataset_type:
            clear_rowset(request)
        state = handed_off
        save_filter_state(request, state)
        _fetch_into_session(request, state)

    chart_type = load_chart_type(request)
    stored = load_rowset(request)
    rows = stored.rows if stored is not None and stored.dataset_type is state.dataset_type else None
    visualization = render_visualization(
        rows=rows,
        dataset_type=state.dataset_type,
        chart_type=chart_type,
        title=state.title(),
    )

    filter_form = DashboardFilterForm.for_state(state, chart_type=chart_type)
    context: dict[str, Any] = {
        "filter_form": filter_form,
        "state": state,
        "dataset_types": tuple(DatasetType),
        "breadcrumb": state.breadcrumb(),
        "has_active_axis": state.has_active_axis(),
        "axis_cards": _axis_cards(state, filter_form),
        "visualization": visualization,
        "chart_payload": visualization.chart,
        "has_rows": rows is not None,
        "empty_state_title": EMPTY_STATE_TITLE,
        "fetch_request": state.fetch_request(),
    }
    return render(request, "core/dashboard.html", context)


@require_http_methods(["GET", "POST"])
def advanced_filters(request: HttpRequest) -> HttpResponse:
    """Render and apply the advanced filters screen.

    The screen only opens with a seed handed over by the dashboard, and only
    accepts submissions once a row-set has been fetched. The seed is consumed
    on read; its columns then travel in a hidden form field.
    """

    if request.method == "POST":
        if load_rowset(request) is None:
            messages.warning(request, NEED_DATA_MESSAGE)
            return redirect("core:dashboard")
        form = AdvancedFilterForm(request.POST)
        action = (request.POST.get("action") or "apply").strip()
        columns = form.observed_columns()
        if action == "switch_dataset":
            return _render_advanced(request, _switched_form(form), columns=columns)

        if form.is_valid():
            dataset_type = form.dataset()
            sections = available_sections(columns, dataset_type)
            state = refinement_to_state(dataset_type, form.refinement(sections))
            advanced_filters_inbox(request.session).put(state)
            messages.success(request, ADVANCED_APPLIED_MESSAGE)
            return redirect("core:dashboard")
        return _render_advanced(request, form, columns=columns)

    seed = advanced_filters_seed_inbox(request.session).take_if_present()
    if seed is None:
        messages.warning(request, NEED_DATA_MESSAGE)
        return redirect("core:dashboard")

    form = AdvancedFilterForm(
        initial={"dataset_type": seed.dataset_type.value, "columns": json.dumps(list(seed.columns))}
    )
    return _render_advanced(request, form, columns=seed.columns)


@require_GET
def data_api(request: HttpRequest) -> JsonResponse:
    """Return aggregated rows for numeric ids (`dataType`, `time`, `customer`, `item`, `geo`).

    Ids that are not declared for their axis resolve to 0.
    """

    try:
        dataset_type = parse_dataset_type(request.GET.get("dataType", DatasetType.sales.value))
    except ValueError as exc:
        return JsonResponse({"data": [], "columns": [], "success": False, "message": str(exc)}, status=400)

    ids = {axis: _declared_id(axis, dataset_type, request.GET.get(axis.value)) for axis in AXIS_ORDER}
    fetch_request = FetchRequest(
        dataset_type=dataset_type,
        time_id=ids[AxisKind.time],
        customer_id=ids[AxisKind.customer],
        item_id=ids[AxisKind.item],
        geo_id=ids[AxisKind.geo],
    )
    response = fetch_data(fetch_request)
    return JsonResponse(response.as_json(), status=200 if response.success else 502)


def _fetch_into_session(request: HttpRequest, state: FilterState) -> bool:
    """Fetch rows for a state; keep the previous row-set when the fetch fails."""

    response = fetch_data(state.fetch_request())
    if not response.success:
        messages.error(request, response.message or FETCH_FAILURE_MESSAGE)
        return False

    save_rowset(request, state.dataset_type, response)
    messages.success(request, FETCH_SUCCESS_MESSAGE)
    return True


def _open_advanced_filters(request: HttpRequest, state: FilterState) -> HttpResponse:
    stored = load_rowset(request)
    if stored is None or stored.dataset_type is not state.dataset_type:
        messages.warning(request, NEED_DATA_MESSAGE)
        return redirect("core:dashboard")
    advanced_filters_seed_inbox(request.session).put(
        AdvancedFiltersSeed(dataset_type=stored.dataset_type, columns=stored.columns)
    )
    return redirect("core:advanced_filters")


def _switched_form(form: AdvancedFilterForm) -> AdvancedFilterForm:
    """Return a bound form for the newly selected dataset with customer/store fields cleared."""

    data = form.data.copy()
    data["customer_type"] = ""
    data["store_code"] = ""
    return AdvancedFilterForm(data)


def _render_advanced(
    request: HttpRequest,
    form: AdvancedFilterForm,
    *,
    columns: tuple[str, ...],
) -> HttpResponse:
    source = form.data if form.is_bound else form.initial
    dataset_type = parse_dataset_type(source.get("dataset_type"), default=DatasetType.sales)
    sections = available_sections(columns, dataset_type)
    context: dict[str, Any] = {
        "form": form,
        "dataset_type": dataset_type,
        "dataset_types": tuple(DatasetType),
        "columns": columns,
        "styles": {axis.value: axis_style(axis, dataset_type) for axis in AXIS_ORDER},
        "visible_axes": frozenset(section.axis.value for section in sections),
        "visible_controls": frozenset(control.value for section in sections for control in section.controls),
        "cities": {state: list(cities) for state, cities in AVAILABLE_CITIES.items()},
    }
    return render(request, "core/advanced_filters.html", context)


def _axis_cards(state: FilterState, form: DashboardFilterForm) -> tuple[dict[str, object], ...]:
    """Return per-axis card data (style, bound field, current selection) in axis order."""

    return tuple(
        {
            "axis": axis.value,
            "style": axis_style(axis, state.dataset_type),
            "selection": selection,
            "field": form[axis.value],
        }
        for axis, selection in state.selections.items()
    )


def _declared_id(axis: AxisKind, dataset_type: DatasetType, raw: str | None) -> int:
    """Parse an id query parameter; undeclared or malformed ids become 0."""

    try:
        value = int(str(raw).strip())
    except ValueError:
        return 0
    catalog = catalog_for(axis, dataset_type)
    return value if value in catalog.ids() else catalog.default.id
