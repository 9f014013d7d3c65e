"""Pure dashboard logic for olapDashboard.

This package holds the dimension catalogs, filter-state resolution, column
availability rules, and the fixture row generator. It must not import Django
or perform any I/O.
"""

from .dimensions import AxisKind, DatasetType
from .selection import FilterState

__all__ = ["AxisKind", "DatasetType", "FilterState"]
