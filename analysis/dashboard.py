"""Dashboard selection state and derived chart state.

`DashboardOrchestrator` owns the active dataset, axis selection, and chart type.
Every mutation recomputes the full derived state (column types, axis menus,
chart availability, render geometry) from scratch and replaces the previous
`DashboardState`; nothing is updated in place.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime

from analysis.chart_data import PIE_PALETTE, SeriesStructure, build_chart_data
from analysis.compatibility import chart_type_availability, unavailable_reason
from analysis.dto import AxisSelection, ChartSpec, ChartType, Dataset, SemanticType
from analysis.inference import (
    DEFAULT_NUMERIC_THRESHOLD,
    DEFAULT_SAMPLE_SIZE,
    allowed_x_axes,
    allowed_y_axes,
    infer_header_types,
    infer_semantic_type,
)
from analysis.numeric import coerce_numeric
from analysis.scene import DEFAULT_LAYOUT, SCENE_PALETTE, SceneGeometry, SceneLayout, build_scene

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DashboardConfig:
    """Explicit configuration for a dashboard orchestrator.

    Args:
        sample_size: Leading values sampled per column during type inference.
        numeric_threshold: Numeric ratio at or above which a column is numerical.
        default_chart_type: Chart type active before the user picks one.
        auto_select_axes: When True, loading a dataset pre-selects the first
            headers as X/Y/Z instead of leaving the selection empty.
        pie_palette: Colors cycled across 2D pie slices.
        scene_palette: Colors cycled across 3D primitives.
        scene_layout: Layout constants for 3D scenes.
    """

    sample_size: int = DEFAULT_SAMPLE_SIZE
    numeric_threshold: float = DEFAULT_NUMERIC_THRESHOLD
    default_chart_type: ChartType = ChartType.bar
    auto_select_axes: bool = False
    pie_palette: tuple[str, ...] = PIE_PALETTE
    scene_palette: tuple[str, ...] = SCENE_PALETTE
    scene_layout: SceneLayout = DEFAULT_LAYOUT

    def __post_init__(self) -> None:
        """Reject sampling settings that cannot classify a column."""

        if self.sample_size < 1:
            raise ValueError(f"sample_size must be at least 1, got {self.sample_size}.")
        if not 0 < self.numeric_threshold <= 1:
            raise ValueError(f"numeric_threshold must be in (0, 1], got {self.numeric_threshold}.")


RenderGeometry = SeriesStructure | SceneGeometry


@dataclass(frozen=True, slots=True)
class DashboardState:
    """Derived state exposed to the rendering layer.

    Args:
        spec: Active chart type and axis selection.
        header_types: SemanticType per header, in header order.
        allowed_x_axes: Headers offered for the X axis.
        allowed_y_axes: Headers offered for the Y axis.
        x_type: Inferred type of the selected X column, if any.
        y_type: Inferred type of the selected Y column, if any.
        availability: Whether each chart type can currently be rendered.
        geometry: Series (2D) or scene (3D) for the active chart, or None.
        warnings: Non-fatal messages explaining why nothing is rendered.
    """

    spec: ChartSpec
    header_types: Mapping[str, SemanticType] = field(default_factory=dict)
    allowed_x_axes: tuple[str, ...] = ()
    allowed_y_axes: tuple[str, ...] = ()
    x_type: SemanticType | None = None
    y_type: SemanticType | None = None
    availability: Mapping[ChartType, bool] = field(default_factory=dict)
    geometry: RenderGeometry | None = None
    warnings: tuple[str, ...] = ()

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation for the dashboard client."""

        geometry: object = None
        if isinstance(self.geometry, SceneGeometry):
            geometry = self.geometry.as_json()
        elif self.geometry is not None:
            geometry = self.geometry
        return {
            "chartType": self.spec.chart_type.value,
            "axes": {"x": self.spec.axes.x, "y": self.spec.axes.y, "z": self.spec.axes.z},
            "headerTypes": {header: semantic_type.value for header, semantic_type in self.header_types.items()},
            "allowedXAxes": list(self.allowed_x_axes),
            "allowedYAxes": list(self.allowed_y_axes),
            "xType": self.x_type.value if self.x_type is not None else None,
            "yType": self.y_type.value if self.y_type is not None else None,
            "chartTypes": [
                {
                    "value": chart_type.value,
                    "available": available,
                    "reason": "" if available else unavailable_reason(self.x_type, self.y_type),
                }
                for chart_type, available in self.availability.items()
            ],
            "is3d": self.spec.chart_type.is_3d,
            "geometry": geometry,
            "warnings": list(self.warnings),
        }


class DashboardOrchestrator:
    """Hold dashboard selections and recompute derived chart state on change."""

    def __init__(self, config: DashboardConfig | None = None, *, dataset: Dataset | None = None) -> None:
        self.config = config or DashboardConfig()
        self._dataset = Dataset.empty()
        self._axes = AxisSelection()
        self._chart_type = self.config.default_chart_type
        self._state = DashboardState(spec=ChartSpec(chart_type=self._chart_type))
        if dataset is not None:
            self.load_dataset(dataset)

    @property
    def dataset(self) -> Dataset:
        """The active dataset."""

        return self._dataset

    @property
    def state(self) -> DashboardState:
        """The most recently computed derived state."""

        return self._state

    def load_dataset(self, dataset: Dataset) -> DashboardState:
        """Replace the dataset and reset the axis selection.

        Args:
            dataset: Already-parsed dataset.

        Returns:
            The recomputed DashboardState.
        """

        self._dataset = dataset
        headers = dataset.headers
        if self.config.auto_select_axes and len(headers) >= 2:
            self._axes = AxisSelection(x=headers[0], y=headers[1], z=headers[2] if len(headers) >= 3 else "")
        else:
            self._axes = AxisSelection()
        logger.info("Loaded dataset with %d headers and %d rows", len(headers), len(dataset.rows))
        return self._recompute()

    def select_axes(self, *, x: str | None = None, y: str | None = None, z: str | None = None) -> DashboardState:
        """Update any of the X/Y/Z selections; None leaves an axis unchanged.

        Headers that are not part of the active dataset clear the axis.
        """

        self._axes = AxisSelection(
            x=self._known_header(self._axes.x if x is None else x),
            y=self._known_header(self._axes.y if y is None else y),
            z=self._known_header(self._axes.z if z is None else z),
        )
        return self._recompute()

    def select_chart_type(self, chart_type: ChartType | str) -> DashboardState:
        """Switch the active chart type; unknown tags keep the current type."""

        parsed = ChartType.parse(chart_type)
        if parsed is None:
            logger.warning("Ignoring unknown chart type %r", chart_type)
        else:
            self._chart_type = parsed
        return self._recompute()

    def _known_header(self, header: str) -> str:
        if not header:
            return ""
        if not self._dataset.has_header(header):
            logger.warning("Ignoring axis selection %r: not a dataset header", header)
            return ""
        return header

    def _recompute(self) -> DashboardState:
        spec = ChartSpec(chart_type=self._chart_type, axes=self._axes)
        dataset = self._dataset
        header_types = infer_header_types(
            dataset,
            sample_size=self.config.sample_size,
            threshold=self.config.numeric_threshold,
        )

        x_type: SemanticType | None = None
        y_type: SemanticType | None = None
        if spec.axes.is_complete and dataset.rows:
            x_type = self._column_type(spec.axes.x)
            y_type = self._column_type(spec.axes.y)

        availability = chart_type_availability(x_type, y_type)
        geometry, warnings = self._build_geometry(spec, x_type=x_type, y_type=y_type, availability=availability)

        self._state = DashboardState(
            spec=spec,
            header_types=header_types,
            allowed_x_axes=allowed_x_axes(header_types),
            allowed_y_axes=allowed_y_axes(header_types),
            x_type=x_type,
            y_type=y_type,
            availability=availability,
            geometry=geometry,
            warnings=warnings,
        )
        logger.debug(
            "Recomputed dashboard state: chart=%s axes=%s geometry=%s",
            spec.chart_type.value,
            spec.axes,
            "yes" if geometry is not None else "no",
        )
        return self._state

    def _column_type(self, header: str) -> SemanticType:
        return infer_semantic_type(
            self._dataset.column(header),
            sample_size=self.config.sample_size,
            threshold=self.config.numeric_threshold,
        )

    def _build_geometry(
        self,
        spec: ChartSpec,
        *,
        x_type: SemanticType | None,
        y_type: SemanticType | None,
        availability: Mapping[ChartType, bool],
    ) -> tuple[RenderGeometry | None, tuple[str, ...]]:
        if not spec.axes.is_complete or not self._dataset.rows:
            return None, ()

        chart_type = spec.chart_type
        if not availability.get(chart_type, False):
            reason = unavailable_reason(x_type, y_type)
            return None, (f"Chart type {chart_type.value!r} is unavailable for the selected axes {reason}.",)

        rows = self._dataset.rows
        axes = spec.axes
        if chart_type.is_pie and sum(coerce_numeric(row.get(axes.y)) for row in rows) == 0:
            return None, (f"Cannot draw a {chart_type.value} chart: {axes.y!r} sums to zero.",)

        if chart_type.is_3d:
            geometry = build_scene(
                rows,
                axes.x,
                axes.y,
                axes.z,
                chart_type,
                layout=self.config.scene_layout,
                palette=self.config.scene_palette,
            )
        else:
            geometry = build_chart_data(rows, axes.x, axes.y, chart_type, palette=self.config.pie_palette)
        return geometry, ()


def download_filename(chart_type: ChartType, *, at: datetime) -> str:
    """Return the file name used when exporting a chart image.

    Args:
        chart_type: Chart being exported.
        at: Export timestamp.

    Returns:
        A name like `analytics-bar-2025-01-02T03:04:05+00:00.png`.
    """

    return f"analytics-{chart_type.value}-{at.isoformat()}.png"
