"""Tests for chart type availability rules."""

from __future__ import annotations

import pytest

from analysis.compatibility import RULES, chart_type_availability, is_chart_type_available, unavailable_reason
from analysis.dto import ChartType, SemanticType

pytestmark = pytest.mark.unit

NUM = SemanticType.numerical
CAT = SemanticType.categorical
MIX = SemanticType.mixed


def test_every_chart_type_has_a_rule() -> None:
    """Register a rule for every ChartType member."""

    assert set(RULES) == set(ChartType)


def test_unknown_axis_types_disable_everything() -> None:
    """Report nothing available until both axis types are known."""

    assert is_chart_type_available(ChartType.bar, None, NUM) is False
    assert is_chart_type_available("unknown", CAT, None) is False
    assert not any(chart_type_availability(None, None).values())


def test_pie_requires_categorical_labels_and_numerical_values() -> None:
    """Allow 2D pie only for categorical X with numerical Y."""

    assert is_chart_type_available("pie", CAT, NUM) is True
    assert is_chart_type_available("pie", NUM, NUM) is False
    assert is_chart_type_available("pie", MIX, NUM) is False


def test_scatter_requires_both_axes_numerical() -> None:
    """Allow 2D scatter only when both axes are numerical."""

    assert is_chart_type_available("scatter", CAT, NUM) is False
    assert is_chart_type_available("scatter", NUM, NUM) is True


@pytest.mark.parametrize(
    "chart_type",
    [ChartType.bar, ChartType.line, ChartType.bar3d, ChartType.pie3d, ChartType.scatter3d, ChartType.line3d],
)
def test_value_axis_charts_only_constrain_y(chart_type: ChartType) -> None:
    """Constrain bar/line and all 3D variants on the Y axis only."""

    for x_type in SemanticType:
        assert is_chart_type_available(chart_type, x_type, NUM) is True
        assert is_chart_type_available(chart_type, x_type, CAT) is False
        assert is_chart_type_available(chart_type, x_type, MIX) is False


def test_unrecognized_chart_type_defaults_to_available() -> None:
    """Treat unknown chart tags as available once types are known."""

    assert is_chart_type_available("heatmap", CAT, CAT) is True


def test_availability_menu_and_reason() -> None:
    """Return the full menu in ChartType order with the disabled-option hint."""

    menu = chart_type_availability(CAT, NUM)
    assert list(menu) == list(ChartType)
    assert menu[ChartType.pie] is True
    assert menu[ChartType.scatter] is False
    assert unavailable_reason(CAT, NUM) == "(X: categorical, Y: numerical)"
    assert unavailable_reason(None, None) == "(X: none, Y: none)"
