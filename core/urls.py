"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("advanced-filters/", views.advanced_filters, name="advanced_filters"),
    path("api/data/", views.data_api, name="data_api"),
]
