"""Small numeric helpers over float sequences."""

from __future__ import annotations

import math
from typing import Sequence


def mean(xx: Sequence[float]) -> float:
    if not xx:
        raise ValueError("mean of an empty sequence")
    return sum(xx) / len(xx)


def variance(xx: Sequence[float]) -> float:
    """Sample variance; a single value has variance 0."""
    if len(xx) == 1:
        return 0.0
    m = mean(xx)
    return sum((x - m) ** 2 for x in xx) / (len(xx) - 1)


def standard_deviation(xx: Sequence[float]) -> float:
    return math.sqrt(variance(xx))


def standardize(xx: Sequence[float]) -> list[float]:
    """Z-scores of the values; a zero deviation is treated as 1."""
    m = mean(xx)
    s = standard_deviation(xx) or 1.0
    return [(x - m) / s for x in xx]


def sgn(x: float) -> float:
    if x < 0:
        return -1.0
    if x > 0:
        return 1.0
    return 0.0


def total(xx: Sequence[float]) -> float:
    return float(sum(xx))


def round_half_up(x: float) -> float:
    """Round to the nearest integer, halves toward positive infinity."""
    return float(math.floor(x + 0.5))


def dot(xx: Sequence[float], yy: Sequence[float]) -> float:
    """Dot product over the length of `xx`."""
    if len(yy) < len(xx):
        raise ValueError("second vector is shorter than the first")
    return float(sum(x * y for x, y in zip(xx, yy)))


def iparam(val: int, fallback: int) -> int:
    """`val`, or `fallback` when `val` is zero."""
    return fallback if val == 0 else val


def check_string_if_contains(input_text: str, search_text: str) -> bool:
    return search_text in input_text


def sma(period: int, values: Sequence[float]) -> list[float]:
    """Simple moving average; early entries average everything seen so far."""
    if period < 1:
        raise ValueError(f"period must be positive, got {period}")
    result = []
    running = 0.0
    for i, value in enumerate(values):
        running += value
        if i >= period:
            running -= values[i - period]
        result.append(running / min(i + 1, period))
    return result


def max_value(values: Sequence[float]) -> tuple[float, int]:
    """The largest value and the index of its first occurrence."""
    result, index = float(-(2**63)), 0
    for i, value in enumerate(values):
        if value > result:
            result, index = value, i
    return result, index


def min_value(values: Sequence[float]) -> tuple[float, int]:
    """The smallest value and the index of its first occurrence."""
    result, index = float(2**63 - 1), 0
    for i, value in enumerate(values):
        if value < result:
            result, index = value, i
    return result, index