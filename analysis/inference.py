"""Column semantic type inference.

Classifies a column as numerical, categorical, or mixed by sampling its raw
values. Classification is probabilistic: only the head of the column is read.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final

from analysis.dto import Dataset, SemanticType
from analysis.numeric import parse_number

DEFAULT_SAMPLE_SIZE: Final[int] = 100
DEFAULT_NUMERIC_THRESHOLD: Final[float] = 0.8


def infer_semantic_type(
    values: Sequence[object],
    *,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    threshold: float = DEFAULT_NUMERIC_THRESHOLD,
) -> SemanticType:
    """Infer the semantic type of a column from its raw values.

    Args:
        values: Raw cell values in row order.
        sample_size: Maximum number of leading values to inspect.
        threshold: Minimum numeric ratio for a numerical classification.

    Returns:
        SemanticType for the column. Empty columns are categorical.

    Raises:
        ValueError: If `sample_size` is less than 1.

    Notes:
        Missing cells (None or "") never count as numeric but still count
        toward the sample size, so sparse columns lean toward `mixed`.
    """

    if sample_size < 1:
        raise ValueError(f"sample_size must be at least 1, got {sample_size}.")
    if not values:
        return SemanticType.categorical

    sample = list(values[:sample_size])
    numeric_count = 0
    for value in sample:
        if value is None or value == "":
            continue
        if parse_number(value) is not None:
            numeric_count += 1

    if numeric_count / len(sample) >= threshold:
        return SemanticType.numerical
    if numeric_count > 0:
        return SemanticType.mixed
    return SemanticType.categorical


def infer_header_types(
    dataset: Dataset,
    *,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    threshold: float = DEFAULT_NUMERIC_THRESHOLD,
) -> dict[str, SemanticType]:
    """Infer a SemanticType for every header, preserving header order."""

    return {
        header: infer_semantic_type(dataset.column(header), sample_size=sample_size, threshold=threshold)
        for header in dataset.headers
    }


def allowed_x_axes(header_types: Mapping[str, SemanticType]) -> tuple[str, ...]:
    """Return headers usable as category (X) axes: categorical or mixed columns."""

    return tuple(
        header
        for header, semantic_type in header_types.items()
        if semantic_type in (SemanticType.categorical, SemanticType.mixed)
    )


def allowed_y_axes(header_types: Mapping[str, SemanticType]) -> tuple[str, ...]:
    """Return headers usable as value (Y) axes: numerical columns only."""

    return tuple(header for header, semantic_type in header_types.items() if semantic_type is SemanticType.numerical)
