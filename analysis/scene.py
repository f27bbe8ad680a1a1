"""Renderer-agnostic 3D scene geometry for the 3D chart variants.

The builder converts rows plus an X/Y/(Z) selection into positioned primitives
(bars, points, wedges, text) and the camera framing a 3D scene engine needs.
Layout math is expressed as pure functions of row count, values, and the
constants on `SceneLayout`, so framing can be tested without a renderer.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from analysis.dto import ChartType, Row
from analysis.numeric import coerce_numeric, format_label

Vector3 = tuple[float, float, float]

SCENE_PALETTE: Final[tuple[str, ...]] = (
    "#a78bfa",
    "#f05a82",
    "#64c8ff",
    "#ffc85a",
    "#96faff",
    "#ff6384",
    "#36a2eb",
)

CARTESIAN_CHART_TYPES: Final[tuple[ChartType, ...]] = (ChartType.bar3d, ChartType.scatter3d, ChartType.line3d)
THREE_D_CHART_TYPES: Final[tuple[ChartType, ...]] = (*CARTESIAN_CHART_TYPES, ChartType.pie3d)


@dataclass(frozen=True, slots=True)
class SceneLayout:
    """Named layout constants for 3D scenes.

    Args:
        spacing: Distance between consecutive rows along the X axis.
        max_height: Scene height the largest value is scaled to.
        depth: Bar depth and pie extrusion depth.
        base_radius: Pie radius.
        bar_width: Bar width along the X axis.
        point_radius: Sphere radius for scatter/line points.
        label_offset: Radial distance between the pie rim and wedge labels.
    """

    spacing: float = 2.0
    max_height: float = 5.0
    depth: float = 0.5
    base_radius: float = 2.5
    bar_width: float = 0.8
    point_radius: float = 0.1
    label_offset: float = 1.2


DEFAULT_LAYOUT: Final[SceneLayout] = SceneLayout()


@dataclass(frozen=True, slots=True)
class SceneRow:
    """One preprocessed row: display label plus coerced Y and Z values."""

    label: str
    y: float
    z: float


@dataclass(frozen=True, slots=True)
class SceneData:
    """Preprocessed rows with the aggregates the layouts scale against.

    Args:
        rows: Preprocessed rows in input order.
        max_value: Largest Y or Z value, floored at 1.
        total_y: Sum of Y values (pie proportions).
    """

    rows: tuple[SceneRow, ...]
    max_value: float
    total_y: float


@dataclass(frozen=True, slots=True)
class SceneText:
    """A text primitive placed in the scene."""

    text: str
    position: Vector3
    size: float
    color: str
    rotation: Vector3 = (0.0, 0.0, 0.0)
    anchor_x: str = "center"


@dataclass(frozen=True, slots=True)
class SceneBar:
    """A column for bar3d: `position` is the box centre, `height` its scaled size."""

    position: Vector3
    size: Vector3
    height: float
    value: float
    color_index: int
    color: str
    label: SceneText


@dataclass(frozen=True, slots=True)
class ScenePoint:
    """A sphere for scatter3d/line3d with its value and category labels."""

    position: Vector3
    radius: float
    value: float
    color_index: int
    color: str
    value_label: SceneText
    label: SceneText


@dataclass(frozen=True, slots=True)
class SceneWedge:
    """A pie3d wedge spanning `start_angle`..`end_angle` radians."""

    start_angle: float
    end_angle: float
    radius: float
    depth: float
    value: float
    percentage: float
    color_index: int
    color: str
    label: SceneText

    @property
    def span(self) -> float:
        """Angular span of the wedge in radians."""

        return self.end_angle - self.start_angle


@dataclass(frozen=True, slots=True)
class ScenePolyline:
    """An ordered polyline connecting line3d points."""

    points: tuple[Vector3, ...]
    color: str = "#f05a82"
    width: float = 5.0


@dataclass(frozen=True, slots=True)
class SceneGrid:
    """Ground grid for Cartesian scenes."""

    size: float
    divisions: int
    position: Vector3


@dataclass(frozen=True, slots=True)
class SceneFraming:
    """Camera and extent derived from the layout's bounding box.

    Args:
        scene_width: Bounding extent along X (or 3x radius for pie).
        center_offset: X coordinate the camera centres on.
        camera_position: Camera location.
        target: Orbit/look-at target.
        light_position: Directional light location.
        max_distance: Orbit zoom limit.
    """

    scene_width: float
    center_offset: float
    camera_position: Vector3
    target: Vector3
    light_position: Vector3
    max_distance: float


@dataclass(frozen=True, slots=True)
class SceneGeometry:
    """A full 3D scene description for one chart."""

    chart_type: ChartType
    framing: SceneFraming
    bars: tuple[SceneBar, ...] = ()
    points: tuple[ScenePoint, ...] = ()
    wedges: tuple[SceneWedge, ...] = ()
    polyline: ScenePolyline | None = None
    grid: SceneGrid | None = None
    texts: tuple[SceneText, ...] = ()
    table: tuple[SceneText, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Return True when the scene holds no data primitives."""

        return not (self.bars or self.points or self.wedges)

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation of the scene."""

        return {
            "chartType": self.chart_type.value,
            "framing": {
                "sceneWidth": self.framing.scene_width,
                "centerOffset": self.framing.center_offset,
                "cameraPosition": list(self.framing.camera_position),
                "target": list(self.framing.target),
                "lightPosition": list(self.framing.light_position),
                "maxDistance": self.framing.max_distance,
            },
            "bars": [
                {
                    "position": list(bar.position),
                    "size": list(bar.size),
                    "height": bar.height,
                    "value": bar.value,
                    "colorIndex": bar.color_index,
                    "color": bar.color,
                    "label": _text_json(bar.label),
                }
                for bar in self.bars
            ],
            "points": [
                {
                    "position": list(point.position),
                    "radius": point.radius,
                    "value": point.value,
                    "colorIndex": point.color_index,
                    "color": point.color,
                    "valueLabel": _text_json(point.value_label),
                    "label": _text_json(point.label),
                }
                for point in self.points
            ],
            "wedges": [
                {
                    "startAngle": wedge.start_angle,
                    "endAngle": wedge.end_angle,
                    "radius": wedge.radius,
                    "depth": wedge.depth,
                    "value": wedge.value,
                    "percentage": wedge.percentage,
                    "colorIndex": wedge.color_index,
                    "color": wedge.color,
                    "label": _text_json(wedge.label),
                }
                for wedge in self.wedges
            ],
            "polyline": (
                None
                if self.polyline is None
                else {
                    "points": [list(p) for p in self.polyline.points],
                    "color": self.polyline.color,
                    "width": self.polyline.width,
                }
            ),
            "grid": (
                None
                if self.grid is None
                else {"size": self.grid.size, "divisions": self.grid.divisions, "position": list(self.grid.position)}
            ),
            "texts": [_text_json(text) for text in self.texts],
            "table": [_text_json(text) for text in self.table],
        }


def _text_json(text: SceneText) -> dict[str, object]:
    return {
        "text": text.text,
        "position": list(text.position),
        "size": text.size,
        "color": text.color,
        "rotation": list(text.rotation),
        "anchorX": text.anchor_x,
    }


def prepare_scene_data(rows: Sequence[Row], x_header: str, y_header: str, z_header: str = "") -> SceneData:
    """Extract labels and coerced values, plus the scaling aggregates.

    Args:
        rows: Dataset rows keyed by header.
        x_header: Header providing row labels.
        y_header: Header providing the primary value.
        z_header: Optional header providing depth values; empty for none.

    Returns:
        SceneData with `max_value >= 1`.
    """

    prepared: list[SceneRow] = []
    max_value = 1.0
    for row in rows:
        y = coerce_numeric(row.get(y_header))
        z = coerce_numeric(row.get(z_header)) if z_header else 0.0
        max_value = max(max_value, y, z)
        prepared.append(SceneRow(label=format_label(row.get(x_header)), y=y, z=z))
    total_y = sum(item.y for item in prepared)
    return SceneData(rows=tuple(prepared), max_value=max_value, total_y=total_y)


def frame_scene(chart_type: ChartType, point_count: int, layout: SceneLayout = DEFAULT_LAYOUT) -> SceneFraming:
    """Compute camera, target, and extent so every element stays in view.

    Args:
        chart_type: Active 3D chart type.
        point_count: Number of rows laid out.
        layout: Layout constants.

    Returns:
        SceneFraming for the chart.

    Raises:
        ValueError: If `chart_type` is not a 3D chart type.
    """

    if chart_type in CARTESIAN_CHART_TYPES:
        scene_width = point_count * layout.spacing
        center_offset = scene_width / 2 - layout.spacing / 2
        camera = (center_offset, layout.max_height * 1.5, scene_width + 5)
        target = (center_offset, layout.max_height / 2, 0.0)
    elif chart_type is ChartType.pie3d:
        scene_width = layout.base_radius * 3
        center_offset = layout.base_radius
        camera = (0.0, layout.max_height * 2, layout.base_radius * 2)
        target = (layout.base_radius, 0.0, 0.0)
    else:
        raise ValueError(f"{chart_type.value!r} is not a 3D chart type.")

    return SceneFraming(
        scene_width=scene_width,
        center_offset=center_offset,
        camera_position=camera,
        target=target,
        light_position=(scene_width, layout.max_height * 3, scene_width),
        max_distance=scene_width * 2.5 or 25.0,
    )


def build_scene(
    rows: Sequence[Row],
    x_header: str,
    y_header: str,
    z_header: str,
    chart_type: ChartType,
    *,
    layout: SceneLayout = DEFAULT_LAYOUT,
    palette: Sequence[str] = SCENE_PALETTE,
) -> SceneGeometry | None:
    """Build the 3D scene for a chart.

    Args:
        rows: Dataset rows keyed by header.
        x_header: Selected X (label) header.
        y_header: Selected Y (value) header.
        z_header: Optional Z header; empty string for none.
        chart_type: One of the 3D chart types.
        layout: Layout constants.
        palette: Colors cycled by row index.

    Returns:
        SceneGeometry, or None when X/Y is not selected or `chart_type` is not
        a 3D variant. Zero rows produce a framed scene with no primitives.
    """

    if not x_header or not y_header or chart_type not in THREE_D_CHART_TYPES:
        return None

    data = prepare_scene_data(rows, x_header, y_header, z_header)
    framing = frame_scene(chart_type, len(data.rows), layout)
    colors = tuple(palette) or SCENE_PALETTE

    if chart_type is ChartType.pie3d:
        return _pie_scene(data, x_header, y_header, framing=framing, layout=layout, palette=colors)

    grid = SceneGrid(
        size=framing.scene_width + 2,
        divisions=len(data.rows) + 1,
        position=(framing.center_offset, 0.0, 0.0),
    )
    texts = _cartesian_texts(chart_type, x_header, y_header, z_header, framing=framing, layout=layout)

    if chart_type is ChartType.bar3d:
        return SceneGeometry(
            chart_type=chart_type,
            framing=framing,
            bars=_bars(data, layout=layout, palette=colors),
            grid=grid,
            texts=texts,
        )

    points = _points(data, has_z=bool(z_header), layout=layout, palette=colors)
    polyline = None
    if chart_type is ChartType.line3d and len(points) > 1:
        polyline = ScenePolyline(points=tuple(point.position for point in points))
    return SceneGeometry(
        chart_type=chart_type,
        framing=framing,
        points=points,
        polyline=polyline,
        grid=grid,
        texts=texts,
    )


def _bars(data: SceneData, *, layout: SceneLayout, palette: Sequence[str]) -> tuple[SceneBar, ...]:
    bars: list[SceneBar] = []
    for index, row in enumerate(data.rows):
        height = (row.y / data.max_value) * layout.max_height
        x = index * layout.spacing
        color_index = index % len(palette)
        bars.append(
            SceneBar(
                position=(x, height / 2, 0.0),
                size=(layout.bar_width, height, layout.depth),
                height=height,
                value=row.y,
                color_index=color_index,
                color=palette[color_index],
                label=SceneText(
                    text=row.label,
                    position=(x, -0.2, layout.depth + 0.5),
                    size=0.25,
                    color="#ccc",
                    rotation=(-math.pi / 2, 0.0, 0.0),
                ),
            )
        )
    return tuple(bars)


def _points(data: SceneData, *, has_z: bool, layout: SceneLayout, palette: Sequence[str]) -> tuple[ScenePoint, ...]:
    max_z = max((row.z for row in data.rows), default=0.0) or 1.0
    points: list[ScenePoint] = []
    for index, row in enumerate(data.rows):
        x = index * layout.spacing
        y = (row.y / data.max_value) * layout.max_height
        z = (row.z / max_z) * layout.max_height if has_z else 0.0
        color_index = index % len(palette)
        points.append(
            ScenePoint(
                position=(x, y, z),
                radius=layout.point_radius,
                value=row.y,
                color_index=color_index,
                color=palette[color_index],
                value_label=SceneText(
                    text=f"{row.y:.2f}",
                    position=(x + 0.3, y, z),
                    size=0.15,
                    color="#fff",
                    anchor_x="left",
                ),
                label=SceneText(
                    text=row.label,
                    position=(x, -0.2, z),
                    size=0.25,
                    color="#ccc",
                    rotation=(-math.pi / 2, 0.0, 0.0),
                ),
            )
        )
    return tuple(points)


def _cartesian_texts(
    chart_type: ChartType,
    x_header: str,
    y_header: str,
    z_header: str,
    *,
    framing: SceneFraming,
    layout: SceneLayout,
) -> tuple[SceneText, ...]:
    texts = [
        SceneText(
            text=f"{chart_type.value.upper()} Visualization",
            position=(framing.center_offset, layout.max_height + 1, 0.0),
            size=0.6,
            color="#a78bfa",
        ),
        SceneText(
            text=x_header,
            position=(framing.center_offset, 0.1, -1.0),
            size=0.3,
            color="#a78bfa",
            rotation=(-math.pi / 2, 0.0, 0.0),
        ),
        SceneText(
            text=y_header,
            position=(-1.0, layout.max_height / 2, 0.0),
            size=0.3,
            color="#a78bfa",
            rotation=(0.0, math.pi / 2, 0.0),
        ),
    ]
    if z_header and chart_type in (ChartType.scatter3d, ChartType.line3d):
        texts.append(
            SceneText(
                text=z_header,
                position=(framing.center_offset, layout.max_height / 2, framing.scene_width),
                size=0.3,
                color="#a78bfa",
            )
        )
    return tuple(texts)


def _pie_scene(
    data: SceneData,
    x_header: str,
    y_header: str,
    *,
    framing: SceneFraming,
    layout: SceneLayout,
    palette: Sequence[str],
) -> SceneGeometry:
    wedges: list[SceneWedge] = []
    table: list[SceneText] = []
    table_x = layout.base_radius + 3 + 1.5
    table_y = layout.max_height
    table_z = 2.0
    label_radius = layout.base_radius + layout.label_offset

    if data.rows:
        table.append(
            SceneText(
                text="Distribution Table:",
                position=(table_x, table_y + 0.5, table_z),
                size=0.3,
                color="#fff",
                anchor_x="left",
            )
        )

    current_angle = 0.0
    for index, row in enumerate(data.rows):
        share = row.y / data.total_y if data.total_y else 0.0
        span = share * 2 * math.pi
        percentage = share * 100
        mid_angle = current_angle + span / 2
        color_index = index % len(palette)
        color = palette[color_index]
        wedges.append(
            SceneWedge(
                start_angle=current_angle,
                end_angle=current_angle + span,
                radius=layout.base_radius,
                depth=layout.depth,
                value=row.y,
                percentage=percentage,
                color_index=color_index,
                color=color,
                label=SceneText(
                    text=f"{row.label} ({percentage:.1f}%)",
                    position=(
                        math.cos(mid_angle) * label_radius,
                        math.sin(mid_angle) * label_radius,
                        layout.depth + 0.05,
                    ),
                    size=0.25,
                    color=color,
                    rotation=(0.0, 0.0, mid_angle),
                ),
            )
        )
        table.append(
            SceneText(
                text=f"{row.label}: {row.y:.2f} ({percentage:.1f}%)",
                position=(table_x, table_y - index * 0.5, table_z),
                size=0.25,
                color=color,
                anchor_x="left",
            )
        )
        current_angle += span

    title = SceneText(
        text=f"{y_header} Distribution ({x_header} Categories)",
        position=(0.0, layout.max_height + 1, 0.0),
        size=0.4,
        color="#a78bfa",
    )
    return SceneGeometry(
        chart_type=ChartType.pie3d,
        framing=framing,
        wedges=tuple(wedges),
        texts=(title,),
        table=tuple(table),
    )
