"""Tests for dashboard selection state and derived chart state."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from analysis.dashboard import DashboardConfig, DashboardOrchestrator, download_filename
from analysis.dto import AxisSelection, ChartType, Dataset, SemanticType
from analysis.scene import SceneGeometry

pytestmark = pytest.mark.unit


def test_loading_a_dataset_resets_the_selection(sales_dataset: Dataset) -> None:
    """Start with no axes selected and no geometry after a load."""

    orchestrator = DashboardOrchestrator()
    orchestrator.load_dataset(sales_dataset)
    orchestrator.select_axes(x="Region", y="Revenue")

    state = orchestrator.load_dataset(sales_dataset)
    assert state.spec.axes == AxisSelection()
    assert state.geometry is None
    assert state.x_type is None
    assert state.allowed_x_axes == ("Region",)
    assert state.allowed_y_axes == ("Revenue", "Units")


def test_auto_select_axes_picks_leading_headers(sales_dataset: Dataset) -> None:
    """Pre-select the first headers when configured to do so."""

    orchestrator = DashboardOrchestrator(DashboardConfig(auto_select_axes=True), dataset=sales_dataset)
    assert orchestrator.state.spec.axes == AxisSelection(x="Region", y="Revenue", z="Units")
    assert orchestrator.state.geometry is not None


def test_selecting_axes_builds_2d_series(sales_dataset: Dataset) -> None:
    """Build the bar series once both axes are selected."""

    orchestrator = DashboardOrchestrator(dataset=sales_dataset)
    state = orchestrator.select_axes(x="Region", y="Revenue")
    assert state.x_type is SemanticType.categorical
    assert state.y_type is SemanticType.numerical
    assert state.availability[ChartType.pie] is True
    assert state.availability[ChartType.scatter] is False
    assert state.geometry == {
        "labels": ["North", "South", "East", "West"],
        "datasets": [
            {
                "label": "Revenue",
                "data": [1200.0, 800.0, 2000.0, 0.0],
                "backgroundColor": "rgba(167, 139, 250, 0.8)",
                "borderColor": "rgba(167, 139, 250, 0.8)",
                "borderWidth": 1,
                "tension": 0,
            }
        ],
    }


def test_switching_to_3d_builds_a_scene(sales_dataset: Dataset) -> None:
    """Route 3D chart types to the scene builder."""

    orchestrator = DashboardOrchestrator(dataset=sales_dataset)
    orchestrator.select_axes(x="Region", y="Units")
    state = orchestrator.select_chart_type("bar3d")
    assert isinstance(state.geometry, SceneGeometry)
    assert len(state.geometry.bars) == 4
    assert state.as_json()["is3d"] is True


def test_unavailable_chart_type_is_not_built(sales_dataset: Dataset) -> None:
    """Skip the builder and warn when the chart type is unavailable."""

    orchestrator = DashboardOrchestrator(dataset=sales_dataset)
    orchestrator.select_axes(x="Region", y="Revenue")
    state = orchestrator.select_chart_type(ChartType.scatter)
    assert state.geometry is None
    assert state.warnings == (
        "Chart type 'scatter' is unavailable for the selected axes (X: categorical, Y: numerical).",
    )


def test_zero_total_pie_is_suppressed() -> None:
    """Suppress pie rendering when the value column sums to zero."""

    dataset = Dataset.from_records(["Label", "Value"], [{"Label": "a", "Value": 0}, {"Label": "b", "Value": "0"}])
    orchestrator = DashboardOrchestrator(dataset=dataset)
    orchestrator.select_axes(x="Label", y="Value")
    for chart_type in (ChartType.pie, ChartType.pie3d):
        state = orchestrator.select_chart_type(chart_type)
        assert state.geometry is None
        assert "sums to zero" in state.warnings[0]


def test_unknown_headers_and_chart_types_are_ignored(sales_dataset: Dataset) -> None:
    """Clear axes naming unknown headers and keep the chart type on unknown tags."""

    orchestrator = DashboardOrchestrator(dataset=sales_dataset)
    state = orchestrator.select_axes(x="Nope", y="Revenue")
    assert state.spec.axes == AxisSelection(y="Revenue")
    assert state.geometry is None

    state = orchestrator.select_chart_type("heatmap")
    assert state.spec.chart_type is ChartType.bar


def test_recomputation_is_repeatable(sales_dataset: Dataset) -> None:
    """Produce equal states for repeated identical selections."""

    orchestrator = DashboardOrchestrator(dataset=sales_dataset)
    first = orchestrator.select_axes(x="Region", y="Units")
    second = orchestrator.select_axes(x="Region", y="Units")
    assert first == second
    assert first is not second


def test_config_threshold_changes_inference() -> None:
    """Honour the configured numeric threshold."""

    dataset = Dataset.from_records(["A", "B"], [{"A": "x", "B": 1}, {"A": "y", "B": "n/a"}])
    strict = DashboardOrchestrator(dataset=dataset)
    lenient = DashboardOrchestrator(DashboardConfig(numeric_threshold=0.5), dataset=dataset)
    assert strict.state.header_types["B"] is SemanticType.mixed
    assert lenient.state.header_types["B"] is SemanticType.numerical


def test_download_filename_includes_chart_type_and_timestamp() -> None:
    """Name exported images after the chart type and export time."""

    at = datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)
    assert download_filename(ChartType.pie3d, at=at) == "analytics-pie3d-2025-01-02T03:04:05+00:00.png"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"sample_size": 0},
        {"sample_size": -5},
        {"numeric_threshold": 0},
        {"numeric_threshold": 1.5},
    ],
)
def test_config_rejects_out_of_range_sampling(kwargs: dict[str, float]) -> None:
    """Refuse sampling settings that cannot classify a column."""

    with pytest.raises(ValueError):
        DashboardConfig(**kwargs)
