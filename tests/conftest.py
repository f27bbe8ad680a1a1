"""Pytest fixtures shared across the dashboard test suite."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence

import pytest

from analysis.dto import Dataset


@pytest.fixture
def sales_dataset() -> Dataset:
    """Return a small dataset with one categorical and two numerical columns."""

    return Dataset.from_records(
        ["Region", "Revenue", "Units"],
        [
            {"Region": "North", "Revenue": "1,200", "Units": 10},
            {"Region": "South", "Revenue": "800", "Units": 4},
            {"Region": "East", "Revenue": 2000, "Units": 16},
            {"Region": "West", "Revenue": "0", "Units": 2},
        ],
    )


@pytest.fixture
def post_json(client) -> Callable[..., object]:
    """Return a helper that POSTs a JSON body with the Django test client."""

    def _post(url: str, payload: object):
        return client.post(url, data=json.dumps(payload), content_type="application/json")

    return _post


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no Django request cycle.
    - `integration`: tests touching Django views, forms, or settings.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
