"""
Descriptive statistics and trend classification shared by every analytics
component.
"""
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from ..models.analytics import TrendDirection
from ..utils.constants import TREND_DEADBAND_PERCENT
from ..utils.exceptions import EmptyInputError


def _as_array(values: Iterable[float]) -> np.ndarray:
    array = np.asarray([float(value) for value in values], dtype=float)
    if array.size == 0:
        raise EmptyInputError()
    return array


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean. Raises EmptyInputError on an empty sequence."""
    return float(np.mean(_as_array(values)))


def stddev(values: Iterable[float]) -> float:
    """
    Population standard deviation (divides by N).

    A single value has no spread, so ``stddev([x]) == 0``.
    """
    array = _as_array(values)
    if array.size == 1:
        return 0.0
    return float(np.std(array, ddof=0))


def coefficient_of_variation(values: Iterable[float]) -> float:
    """Standard deviation as a percentage of the mean; 0 when the mean is 0."""
    array = _as_array(values)
    average = float(np.mean(array))
    if average == 0:
        return 0.0
    return stddev(array) / average * 100


def lower_median(values: Iterable[float]) -> float:
    """Middle element of the sorted values; the lower-middle one on even counts."""
    ordered = np.sort(_as_array(values))
    return float(ordered[(ordered.size - 1) // 2])


def trend_percentage(first: float, second: float) -> float:
    """Percentage change from ``first`` to ``second``; 0 when ``first`` is 0."""
    if first == 0:
        return 0.0
    return (second - first) * 100.0 / first


def classify_delta(delta_percent: float) -> TrendDirection:
    """Map a percentage change onto a direction; the deadband is exclusive."""
    if delta_percent > TREND_DEADBAND_PERCENT:
        return TrendDirection.INCREASING
    if delta_percent < -TREND_DEADBAND_PERCENT:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def classify_trend(first: float, second: float) -> Tuple[TrendDirection, float]:
    """Classify the change between two halves; returns the direction and delta."""
    delta = trend_percentage(first, second)
    return classify_delta(delta), delta


def half_split_totals(points: Sequence[Tuple[object, float]], split_at) -> Tuple[float, float]:
    """
    Sum values before and at-or-after a split key.

    Args:
        points: ``(key, value)`` pairs; keys must be comparable with ``split_at``
        split_at: first key belonging to the second half

    Returns:
        (first_half_total, second_half_total)
    """
    first: List[float] = []
    second: List[float] = []
    for key, value in points:
        (first if key < split_at else second).append(float(value))
    return float(np.sum(first)) if first else 0.0, float(np.sum(second)) if second else 0.0
