"""Best-effort numeric parsing for raw spreadsheet cells.

Cells arrive from the spreadsheet parser as ints, floats, strings, or `None`.
Both column type inference and the chart builders need the same reading of
those values, so the rules live here.

This module is:
- pure (no Django imports),
- defensive (never raises on unknown formats),
- lenient in the way a browser `parseFloat` is (leading number wins, trailing
  text is ignored).
"""

from __future__ import annotations

import math
import re
from typing import Final

_NUMBER_PREFIX: Final[re.Pattern[str]] = re.compile(
    r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
)


def parse_number(value: object) -> float | None:
    """Parse a raw cell value into a finite float.

    Args:
        value: Raw cell value (number, string, or None).

    Returns:
        The parsed float, or None when the value is missing, unparseable, or
        not finite.

    Notes:
        - Thousands-separator commas are stripped before parsing
          (`"20,000"` -> `20000.0`).
        - Only the leading numeric literal is read (`"12kg"` -> `12.0`).
        - Booleans are treated as text, so they never parse.
    """

    if value is None:
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None

    match = _NUMBER_PREFIX.match(str(value).replace(",", ""))
    if match is None:
        return None
    try:
        number = float(match.group(0))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def coerce_numeric(value: object) -> float:
    """Coerce a raw cell value to a float, falling back to `0.0`."""

    number = parse_number(value)
    return 0.0 if number is None else number


def format_label(value: object) -> str:
    """Render a raw cell value as display text for 3D labels.

    Integral floats drop their trailing `.0` so `3.0` reads as `3`, and
    missing cells render as an empty string.
    """

    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
