"""Chart type availability rules driven by inferred axis types.

The rules are advisory: they gate which chart types the dashboard offers, but
the builders themselves do not consult them.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final

from analysis.dto import ChartType, SemanticType

AxisRule = Callable[[SemanticType, SemanticType], bool]


def _value_axis_numerical(x_type: SemanticType, y_type: SemanticType) -> bool:
    return y_type is SemanticType.numerical


def _categories_with_values(x_type: SemanticType, y_type: SemanticType) -> bool:
    return x_type is SemanticType.categorical and y_type is SemanticType.numerical


def _both_numerical(x_type: SemanticType, y_type: SemanticType) -> bool:
    return x_type is SemanticType.numerical and y_type is SemanticType.numerical


RULES: Final[dict[ChartType, AxisRule]] = {
    ChartType.bar: _value_axis_numerical,
    ChartType.line: _value_axis_numerical,
    ChartType.pie: _categories_with_values,
    ChartType.scatter: _both_numerical,
    ChartType.bar3d: _value_axis_numerical,
    ChartType.pie3d: _value_axis_numerical,
    ChartType.scatter3d: _value_axis_numerical,
    ChartType.line3d: _value_axis_numerical,
}


def is_chart_type_available(
    chart_type: ChartType | str,
    x_type: SemanticType | None,
    y_type: SemanticType | None,
) -> bool:
    """Return whether `chart_type` can be rendered for the given axis types.

    Args:
        chart_type: ChartType member or raw chart tag.
        x_type: Inferred type of the X column, or None when nothing is selected.
        y_type: Inferred type of the Y column, or None when nothing is selected.

    Returns:
        False until both axis types are known; True for unrecognized tags;
        otherwise the result of the rule registered for the chart type.
    """

    if x_type is None or y_type is None:
        return False

    parsed = ChartType.parse(chart_type)
    if parsed is None:
        return True
    return RULES[parsed](x_type, y_type)


def chart_type_availability(
    x_type: SemanticType | None,
    y_type: SemanticType | None,
) -> dict[ChartType, bool]:
    """Return the availability of every chart type, in menu order."""

    return {chart_type: is_chart_type_available(chart_type, x_type, y_type) for chart_type in ChartType}


def unavailable_reason(x_type: SemanticType | None, y_type: SemanticType | None) -> str:
    """Return the menu hint shown next to a disabled chart type."""

    x_text = x_type.value if x_type is not None else "none"
    y_text = y_type.value if y_type is not None else "none"
    return f"(X: {x_text}, Y: {y_text})"
