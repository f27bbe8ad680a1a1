"""Django integration tests for the dashboard JSON API."""

from __future__ import annotations

import json
import math

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.test import Client, override_settings

from analysis.dto import ChartType
from core.services import dashboard_config_from_settings

pytestmark = pytest.mark.integration

PAYLOAD = {
    "headers": ["Month", "Sales", "Returns"],
    "rows": [
        {"Month": "Jan", "Sales": "1,000", "Returns": 5},
        {"Month": "Feb", "Sales": 3000, "Returns": 15},
    ],
}


def test_column_types_api_reports_types_and_menus(post_json) -> None:
    """Return inferred header types with the allowed axis menus."""

    response = post_json("/api/column-types/", PAYLOAD)
    assert response.status_code == 200
    assert response.json() == {
        "headerTypes": {"Month": "categorical", "Sales": "numerical", "Returns": "numerical"},
        "allowedXAxes": ["Month"],
        "allowedYAxes": ["Sales", "Returns"],
    }


def test_dashboard_api_returns_2d_series(post_json) -> None:
    """Return the bar series and chart menu for a complete selection."""

    response = post_json("/api/dashboard/", {**PAYLOAD, "x_axis": "Month", "y_axis": "Sales", "chart_type": "bar"})
    assert response.status_code == 200
    body = response.json()
    assert body["chartType"] == "bar"
    assert body["xType"] == "categorical"
    assert body["geometry"]["labels"] == ["Jan", "Feb"]
    assert body["geometry"]["datasets"][0]["data"] == [1000.0, 3000.0]
    menu = {item["value"]: item for item in body["chartTypes"]}
    assert menu["pie"]["available"] is True
    assert menu["scatter"]["available"] is False
    assert menu["scatter"]["reason"] == "(X: categorical, Y: numerical)"


def test_dashboard_api_returns_pie_scene(post_json) -> None:
    """Serialize 3D pie wedges for the scene renderer."""

    response = post_json("/api/dashboard/", {**PAYLOAD, "x_axis": "Month", "y_axis": "Returns", "chart_type": "pie3d"})
    assert response.status_code == 200
    geometry = response.json()["geometry"]
    assert geometry["chartType"] == "pie3d"
    spans = [wedge["endAngle"] - wedge["startAngle"] for wedge in geometry["wedges"]]
    assert spans == pytest.approx([math.pi / 2, 3 * math.pi / 2])
    assert geometry["grid"] is None


def test_dashboard_api_without_selection_renders_nothing(post_json) -> None:
    """Treat a missing axis selection as nothing to render."""

    response = post_json("/api/dashboard/", PAYLOAD)
    assert response.status_code == 200
    body = response.json()
    assert body["geometry"] is None
    assert body["warnings"] == []
    assert all(item["available"] is False for item in body["chartTypes"])


def test_dashboard_api_rejects_unknown_columns(post_json) -> None:
    """Reject selections naming columns outside the dataset."""

    response = post_json("/api/dashboard/", {**PAYLOAD, "x_axis": "Quarter", "y_axis": "Sales"})
    assert response.status_code == 400
    assert response.json()["errors"]["x_axis"] == ["Unknown column: 'Quarter'."]


def test_dashboard_api_rejects_bad_payloads(client, post_json) -> None:
    """Reject malformed JSON, invalid rows, unknown chart types, and GET."""

    response = client.post("/api/dashboard/", data="{not json", content_type="application/json")
    assert response.status_code == 400

    response = post_json("/api/dashboard/", {"headers": ["A"], "rows": ["not a row"]})
    assert response.status_code == 400
    assert "rows" in response.json()["errors"]

    response = post_json("/api/dashboard/", {**PAYLOAD, "chart_type": "heatmap"})
    assert response.status_code == 400
    assert "chart_type" in response.json()["errors"]

    response = post_json("/api/column-types/", {"headers": ["A", "A"]})
    assert response.status_code == 400

    assert client.get("/api/dashboard/").status_code == 405


@override_settings(
    DASHBOARD={"SAMPLE_SIZE": 10, "NUMERIC_THRESHOLD": 0.5, "DEFAULT_CHART_TYPE": "line", "AUTO_SELECT_AXES": True}
)
def test_dashboard_config_reads_settings(post_json) -> None:
    """Build the orchestrator config from the DASHBOARD settings dict."""

    config = dashboard_config_from_settings()
    assert config.sample_size == 10
    assert config.numeric_threshold == 0.5
    assert config.default_chart_type is ChartType.line
    assert config.auto_select_axes is True

    response = post_json("/api/dashboard/", PAYLOAD)
    body = response.json()
    assert body["chartType"] == "line"
    assert body["axes"] == {"x": "Month", "y": "Sales", "z": "Returns"}
    assert body["geometry"]["datasets"][0]["tension"] == 0.4


@override_settings(DASHBOARD={"DEFAULT_CHART_TYPE": "heatmap"})
def test_dashboard_config_falls_back_on_unknown_default() -> None:
    """Fall back to bar charts for an unknown configured default."""

    assert dashboard_config_from_settings().default_chart_type is ChartType.bar


@override_settings(DASHBOARD={"SAMPLE_SIZE": 0})
def test_dashboard_config_rejects_invalid_sample_size() -> None:
    """Report an unusable sample size as a configuration error."""

    with pytest.raises(ImproperlyConfigured, match="sample_size"):
        dashboard_config_from_settings()


def test_dashboard_api_tolerates_oversized_integers(post_json) -> None:
    """Coerce integers beyond the float range to zero instead of failing."""

    huge = 10**400
    rows = [{"Month": month, "Sales": 100} for month in ("Jan", "Feb", "Mar", "Apr")]
    rows.append({"Month": "May", "Sales": huge})
    payload = {"headers": ["Month", "Sales"], "rows": rows}

    response = post_json("/api/column-types/", {"headers": ["Month", "Sales"], "rows": rows[-2:]})
    assert response.status_code == 200
    assert response.json()["headerTypes"]["Sales"] == "mixed"

    response = post_json("/api/dashboard/", {**payload, "x_axis": "Month", "y_axis": "Sales", "chart_type": "bar"})
    assert response.status_code == 200
    assert response.json()["geometry"]["datasets"][0]["data"] == [100.0, 100.0, 100.0, 100.0, 0.0]


def test_api_accepts_posts_without_csrf_token() -> None:
    """Serve JSON clients that carry no CSRF cookie or token."""

    client = Client(enforce_csrf_checks=True)
    body = json.dumps({**PAYLOAD, "x_axis": "Month", "y_axis": "Sales"})

    response = client.post("/api/column-types/", data=body, content_type="application/json")
    assert response.status_code == 200

    response = client.post("/api/dashboard/", data=body, content_type="application/json")
    assert response.status_code == 200
    assert response.json()["geometry"] is not None
