"""Forms for the dashboard and advanced filters screens."""

from __future__ import annotations

import json

from django import forms

from analysis.advanced import (
    AVAILABLE_SIZES,
    AVAILABLE_STATES,
    AVAILABLE_WEIGHT_RANGES,
    YEAR_MAX,
    YEAR_MIN,
    Refinement,
    cities_for_state,
)
from analysis.columns import FilterControl, FilterSection
from analysis.dimensions import (
    AXIS_ORDER,
    GEO_DIMENSIONS,
    ITEM_DIMENSIONS,
    TIME_DIMENSIONS,
    AxisKind,
    DatasetType,
    catalog_for,
    parse_dataset_type,
)
from analysis.formatting import CHART_TYPES, chart_type_display, parse_chart_type
from analysis.selection import FilterState

DATASET_CHOICES = (
    (DatasetType.sales.value, "📈 Sales Data"),
    (DatasetType.inventory.value, "📦 Inventory Data"),
)


class DashboardFilterForm(forms.Form):
    """Validate dimension selections on the dashboard.

    Axis fields accept any string: unknown level keys are resolved to the
    catalog default by `FilterState`, which is what happens to a stale
    customer/store key after the dataset type changes.
    """

    dataset_type = forms.ChoiceField(choices=DATASET_CHOICES, label="Dataset")
    time = forms.CharField(required=False, label="Time Dimension", widget=forms.Select(choices=TIME_DIMENSIONS.choices()))
    customer = forms.CharField(required=False, label="Customer Dimension", widget=forms.Select())
    item = forms.CharField(required=False, label="Item Dimension", widget=forms.Select(choices=ITEM_DIMENSIONS.choices()))
    geo = forms.CharField(required=False, label="Geography Dimension", widget=forms.Select(choices=GEO_DIMENSIONS.choices()))
    chart_type = forms.ChoiceField(
        required=False,
        choices=tuple((chart_type, chart_type_display(chart_type)) for chart_type in CHART_TYPES),
        label="Chart type",
    )

    def __init__(self, *args, **kwargs) -> None:
        """Initialize the form with the customer/store choices for a dataset type."""

        dataset_type: DatasetType = kwargs.pop("dataset_type", DatasetType.sales)
        super().__init__(*args, **kwargs)
        self.fields["customer"].widget.choices = catalog_for(AxisKind.customer, dataset_type).choices()
        self.fields["customer"].label = (
            "Customer Dimension" if dataset_type is DatasetType.sales else "Store Dimension"
        )

    @classmethod
    def for_state(cls, state: FilterState, *, chart_type: str) -> DashboardFilterForm:
        """Return an unbound form whose initial values mirror a FilterState."""

        initial: dict[str, str] = {"dataset_type": state.dataset_type.value, "chart_type": chart_type}
        for axis, selection in state.selections.items():
            initial[axis.value] = selection.level_key
        return cls(initial=initial, dataset_type=state.dataset_type)

    def dataset(self) -> DatasetType:
        return parse_dataset_type(self.cleaned_data.get("dataset_type"), default=DatasetType.sales)

    def selected_chart_type(self) -> str:
        return parse_chart_type(self.cleaned_data.get("chart_type"))

    def to_state(self, dataset_type: DatasetType) -> FilterState:
        """Build a FilterState from the submitted level keys."""

        level_keys = {axis: str(self.cleaned_data.get(axis.value) or "[]") for axis in AXIS_ORDER}
        return FilterState.from_level_keys(dataset_type, level_keys)


class AdvancedFilterForm(forms.Form):
    """Validate concrete refinements on the advanced filters screen."""

    dataset_type = forms.ChoiceField(choices=DATASET_CHOICES, label="Dataset")
    columns = forms.CharField(required=False, widget=forms.HiddenInput())
    year = forms.IntegerField(
        required=False,
        min_value=YEAR_MIN,
        max_value=YEAR_MAX,
        label="Year",
        widget=forms.NumberInput(attrs={"placeholder": "e.g. 2025"}),
    )
    quarter = forms.IntegerField(
        required=False,
        min_value=1,
        max_value=4,
        label="Quarter",
        widget=forms.NumberInput(attrs={"placeholder": "1-4"}),
    )
    month = forms.IntegerField(
        required=False,
        min_value=1,
        max_value=12,
        label="Month",
        widget=forms.NumberInput(attrs={"placeholder": "1-12"}),
    )
    customer_type = forms.CharField(
        required=False,
        max_length=64,
        label="Customer Type",
        widget=forms.TextInput(attrs={"placeholder": "Enter customer type"}),
    )
    store_code = forms.CharField(
        required=False,
        max_length=64,
        label="Store Code",
        widget=forms.TextInput(attrs={"placeholder": "Enter store code"}),
    )
    item_code = forms.CharField(
        required=False,
        max_length=64,
        label="Item Code",
        widget=forms.TextInput(attrs={"placeholder": "Enter item code"}),
    )
    sizes = forms.MultipleChoiceField(
        required=False,
        choices=tuple((size, size) for size in AVAILABLE_SIZES),
        label="Size",
        widget=forms.CheckboxSelectMultiple(),
    )
    weight_ranges = forms.MultipleChoiceField(
        required=False,
        choices=tuple((weight, weight) for weight in AVAILABLE_WEIGHT_RANGES),
        label="Weight Range",
        widget=forms.CheckboxSelectMultiple(),
    )
    state = forms.ChoiceField(
        required=False,
        choices=(("", "Select a state"), *((state, state) for state in AVAILABLE_STATES)),
        label="State",
    )
    city = forms.CharField(required=False, label="City", widget=forms.Select())

    def __init__(self, *args, **kwargs) -> None:
        """Initialize the form; city choices follow the selected state."""

        super().__init__(*args, **kwargs)
        source = self.data if self.is_bound else self.initial
        state = str(source.get("state") or "")
        self.fields["city"].widget.choices = (
            ("", "Select a city"),
            *((city, city) for city in cities_for_state(state)),
        )

    def clean_city(self) -> str:
        """Drop a city that does not belong to the selected state."""

        city = (self.cleaned_data.get("city") or "").strip()
        state = str(self.data.get("state") or "")
        if city and city not in cities_for_state(state):
            return ""
        return city

    def dataset(self) -> DatasetType:
        return parse_dataset_type(self.cleaned_data.get("dataset_type"), default=DatasetType.sales)

    def observed_columns(self) -> tuple[str, ...]:
        """Return the column list carried in the hidden `columns` field."""

        source = self.data if self.is_bound else self.initial
        return parse_columns(source.get("columns"))

    def refinement(self, sections: tuple[FilterSection, ...]) -> Refinement:
        """Build a Refinement from the cleaned data, keeping visible controls only."""

        visible = {control for section in sections for control in section.controls}

        def value(control: FilterControl, default: object) -> object:
            if control not in visible:
                return default
            raw = self.cleaned_data.get(control.value)
            return default if raw in (None, "") else raw

        return Refinement(
            year=value(FilterControl.year, None),  # type: ignore[arg-type]
            quarter=value(FilterControl.quarter, None),  # type: ignore[arg-type]
            month=value(FilterControl.month, None),  # type: ignore[arg-type]
            customer_type=str(value(FilterControl.customer_type, "")).strip(),
            store_code=str(value(FilterControl.store_code, "")).strip(),
            item_code=str(value(FilterControl.item_code, "")).strip(),
            sizes=tuple(value(FilterControl.sizes, ()) or ()),  # type: ignore[arg-type]
            weight_ranges=tuple(value(FilterControl.weight_ranges, ()) or ()),  # type: ignore[arg-type]
            state=str(value(FilterControl.state, "")),
            city=str(value(FilterControl.city, "")),
        )


def parse_columns(raw: object) -> tuple[str, ...]:
    """Best-effort parse of a JSON column list (empty on malformed input)."""

    if not raw:
        return ()
    try:
        parsed = json.loads(str(raw))
    except ValueError:
        return ()
    if not isinstance(parsed, list):
        return ()
    return tuple(str(column) for column in parsed if isinstance(column, str))
