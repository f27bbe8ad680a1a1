"""DTO types shared by the chart analysis pipeline.

DTOs are plain data containers passed between inference, the compatibility
rules, and the chart builders. They intentionally avoid any Django dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

Row = Mapping[str, object]


class SemanticType(Enum):
    """Inferred classification of a column's values."""

    numerical = "numerical"
    categorical = "categorical"
    mixed = "mixed"


class ChartType(Enum):
    """Chart variants the dashboard can render."""

    bar = "bar"
    line = "line"
    pie = "pie"
    scatter = "scatter"
    bar3d = "bar3d"
    line3d = "line3d"
    scatter3d = "scatter3d"
    pie3d = "pie3d"

    @property
    def is_3d(self) -> bool:
        """Return True for variants rendered by the 3D scene engine."""

        return self.value.endswith("3d")

    @property
    def is_pie(self) -> bool:
        """Return True for proportional (pie) variants."""

        return self in (ChartType.pie, ChartType.pie3d)

    @classmethod
    def parse(cls, value: ChartType | str | None) -> ChartType | None:
        """Return the matching ChartType, or None for unknown tags."""

        if isinstance(value, ChartType):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class Dataset:
    """An already-parsed spreadsheet: ordered headers plus rows.

    Attributes:
        headers: Column names in display order (unique).
        rows: Row mappings; every row has a value (possibly None) for every header.
    """

    headers: tuple[str, ...]
    rows: tuple[dict[str, object], ...]

    @classmethod
    def from_records(cls, headers: Iterable[object], rows: Iterable[Mapping[str, object]]) -> Dataset:
        """Build a Dataset, filling missing cells with None.

        Args:
            headers: Header names as produced by the spreadsheet parser.
            rows: Row mappings keyed by header name.

        Returns:
            Dataset whose rows contain exactly the header keys.
        """

        ordered: list[str] = []
        for header in headers:
            name = str(header)
            if name not in ordered:
                ordered.append(name)
        normalized = tuple({name: row.get(name) for name in ordered} for row in rows)
        return cls(headers=tuple(ordered), rows=normalized)

    @classmethod
    def empty(cls) -> Dataset:
        """Return a dataset with no headers and no rows."""

        return cls(headers=(), rows=())

    def column(self, header: str) -> list[object]:
        """Return the raw values of one column in row order."""

        return [row.get(header) for row in self.rows]

    def has_header(self, header: str | None) -> bool:
        """Return True when `header` is a non-empty header of this dataset."""

        return bool(header) and header in self.headers


@dataclass(frozen=True, slots=True)
class AxisSelection:
    """The chosen X, Y, and optional Z headers. Empty strings mean "no selection"."""

    x: str = ""
    y: str = ""
    z: str = ""

    @property
    def is_complete(self) -> bool:
        """Return True when both X and Y are selected."""

        return bool(self.x) and bool(self.y)


@dataclass(frozen=True, slots=True)
class ChartSpec:
    """Chart type plus axis selection; the sole input to the builders."""

    chart_type: ChartType
    axes: AxisSelection = AxisSelection()
