"""Chart.js series structures for the 2D chart variants.

The builder turns raw rows plus an X/Y selection into the `{labels, datasets}`
payload the 2D charting engine consumes. Output is a deterministic function of
its inputs.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final, TypedDict

from analysis.dto import ChartType, Row
from analysis.numeric import coerce_numeric

BASE_COLOR: Final[str] = "rgba(167, 139, 250, 0.8)"

PIE_PALETTE: Final[tuple[str, ...]] = (
    "rgba(167, 139, 250, 0.8)",
    "rgba(240, 90, 130, 0.8)",
    "rgba(100, 200, 255, 0.8)",
    "rgba(255, 200, 90, 0.8)",
    "rgba(150, 250, 150, 0.8)",
)

LINE_TENSION: Final[float] = 0.4


class ScatterPoint(TypedDict):
    """A single (x, y) pair for scatter datasets."""

    x: float
    y: float


class SeriesDataset(TypedDict, total=False):
    """A Chart.js dataset payload."""

    label: str
    data: list[float] | list[ScatterPoint]
    backgroundColor: str | list[str]
    borderColor: str
    borderWidth: int
    tension: float
    pointRadius: int
    hoverOffset: int


class SeriesStructure(TypedDict, total=False):
    """The full Chart.js payload (optional labels + datasets)."""

    labels: list[object]
    datasets: list[SeriesDataset]


TWO_D_CHART_TYPES: Final[tuple[ChartType, ...]] = (
    ChartType.bar,
    ChartType.line,
    ChartType.pie,
    ChartType.scatter,
)


def build_chart_data(
    rows: Sequence[Row],
    x_header: str,
    y_header: str,
    chart_type: ChartType,
    *,
    palette: Sequence[str] = PIE_PALETTE,
) -> SeriesStructure | None:
    """Build the 2D series payload for a chart.

    Args:
        rows: Dataset rows keyed by header.
        x_header: Selected X (label) header.
        y_header: Selected Y (value) header.
        chart_type: One of the 2D chart types.
        palette: Colors cycled across pie slices by row index.

    Returns:
        SeriesStructure, or None when a header is missing from the row schema
        or `chart_type` is not a 2D variant.
    """

    if not x_header or not y_header or chart_type not in TWO_D_CHART_TYPES:
        return None
    if rows and (x_header not in rows[0] or y_header not in rows[0]):
        return None

    if chart_type is ChartType.scatter:
        return _scatter(rows, x_header, y_header)
    if chart_type is ChartType.pie:
        return _pie(rows, x_header, y_header, palette=palette)
    return _bar_or_line(rows, x_header, y_header, chart_type=chart_type)


def _scatter(rows: Sequence[Row], x_header: str, y_header: str) -> SeriesStructure:
    points: list[ScatterPoint] = [
        {"x": coerce_numeric(row.get(x_header)), "y": coerce_numeric(row.get(y_header))} for row in rows
    ]
    return {
        "datasets": [
            {
                "label": f"{y_header} vs {x_header}",
                "data": points,
                "backgroundColor": BASE_COLOR,
                "pointRadius": 5,
            }
        ]
    }


def _pie(rows: Sequence[Row], x_header: str, y_header: str, *, palette: Sequence[str]) -> SeriesStructure:
    colors = [palette[index % len(palette)] for index in range(len(rows))] if palette else []
    return {
        "labels": [row.get(x_header) for row in rows],
        "datasets": [
            {
                "label": f"{y_header} Distribution",
                "data": [coerce_numeric(row.get(y_header)) for row in rows],
                "backgroundColor": colors,
                "hoverOffset": 4,
            }
        ],
    }


def _bar_or_line(rows: Sequence[Row], x_header: str, y_header: str, *, chart_type: ChartType) -> SeriesStructure:
    is_line = chart_type is ChartType.line
    return {
        "labels": [row.get(x_header) for row in rows],
        "datasets": [
            {
                "label": y_header,
                "data": [coerce_numeric(row.get(y_header)) for row in rows],
                "backgroundColor": "transparent" if is_line else BASE_COLOR,
                "borderColor": BASE_COLOR,
                "borderWidth": 1,
                "tension": LINE_TENSION if is_line else 0,
            }
        ],
    }
