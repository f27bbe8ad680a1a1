"""Service-layer functions for the core app.

Services in `core` translate Django settings and request payloads into the
inputs of the pure `analysis` modules.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from analysis.dashboard import DashboardConfig, DashboardOrchestrator, DashboardState
from analysis.dto import ChartType, Dataset
from analysis.inference import DEFAULT_NUMERIC_THRESHOLD, DEFAULT_SAMPLE_SIZE

logger = logging.getLogger(__name__)


def dashboard_config_from_settings(overrides: Mapping[str, object] | None = None) -> DashboardConfig:
    """Build a DashboardConfig from `settings.DASHBOARD`.

    Args:
        overrides: Optional keys that take precedence over the settings dict.

    Returns:
        DashboardConfig with defaults for any missing key.

    Raises:
        ImproperlyConfigured: If the sample size or numeric threshold is out of range.
    """

    raw: dict[str, object] = dict(getattr(settings, "DASHBOARD", {}) or {})
    if overrides:
        raw.update(overrides)

    default_chart_type = ChartType.parse(str(raw.get("DEFAULT_CHART_TYPE") or ChartType.bar.value))
    if default_chart_type is None:
        logger.warning("Unknown DASHBOARD DEFAULT_CHART_TYPE %r; using bar", raw.get("DEFAULT_CHART_TYPE"))
        default_chart_type = ChartType.bar

    try:
        return DashboardConfig(
            sample_size=int(raw.get("SAMPLE_SIZE", DEFAULT_SAMPLE_SIZE)),
            numeric_threshold=float(raw.get("NUMERIC_THRESHOLD", DEFAULT_NUMERIC_THRESHOLD)),
            default_chart_type=default_chart_type,
            auto_select_axes=bool(raw.get("AUTO_SELECT_AXES", False)),
        )
    except ValueError as exc:
        raise ImproperlyConfigured(f"Invalid DASHBOARD setting: {exc}") from exc


def compute_dashboard_state(
    dataset: Dataset,
    *,
    x_axis: str = "",
    y_axis: str = "",
    z_axis: str = "",
    chart_type: ChartType | None = None,
    config: DashboardConfig | None = None,
) -> DashboardState:
    """Run one full dashboard recomputation for a request.

    Args:
        dataset: Already-parsed dataset.
        x_axis: Selected X header, or empty.
        y_axis: Selected Y header, or empty.
        z_axis: Selected Z header, or empty.
        chart_type: Active chart type; the configured default when None.
        config: Orchestrator configuration; read from settings when None.

    Returns:
        The DashboardState after applying the selection.
    """

    orchestrator = DashboardOrchestrator(config or dashboard_config_from_settings(), dataset=dataset)
    if chart_type is not None:
        orchestrator.select_chart_type(chart_type)
    if x_axis or y_axis or z_axis:
        orchestrator.select_axes(x=x_axis or None, y=y_axis or None, z=z_axis or None)
    return orchestrator.state
