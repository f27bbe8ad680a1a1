"""Pure analysis package for the chart dashboard.

This package contains deterministic, testable computations that operate on
in-memory spreadsheet data and return DTOs. It must not import Django.
"""

from .dashboard import DashboardConfig, DashboardOrchestrator, DashboardState

__all__ = ["DashboardConfig", "DashboardOrchestrator", "DashboardState"]
