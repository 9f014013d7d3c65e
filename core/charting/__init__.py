"""Visualization rendering helpers.

The dashboard renders one visualization panel from the last fetched row-set.
This package contains the payload schema and the table/Chart.js renderer used
by the dashboard view.
"""
