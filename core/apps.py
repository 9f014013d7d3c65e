"""App configuration for the dashboard app."""

from __future__ import annotations

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the `core` app (dashboard views, forms, templates)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "OLAP Dashboard"
