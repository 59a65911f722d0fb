"""Price indicators computed over candle series."""

from __future__ import annotations

from typing import Sequence

from bullean.entities import Candle


def ema(candles: Sequence[Candle], period: int) -> list[float]:
    """Two-point exponential smoothing of consecutive closes."""
    k = 2.0 / float(1 + period)
    return [cur.close * k + prev.close * (1 - k) for prev, cur in zip(candles, candles[1:])]


def ma(candles: Sequence[Candle], period: int) -> list[float]:
    """Moving average of the `period` closes preceding each candle."""
    if period < 1:
        raise ValueError(f"period must be positive, got {period}")
    closes = [c.close for c in candles]
    return [sum(closes[i - period : i]) / period for i in range(period, len(closes))]