"""Labelled feature data sets built from candle series, and label policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from bullean.entities import Candle, Data, FeatureType, PolicyConfig
from bullean.indicators import ma
from bullean.strategy import percentage_change

_POLICY_LOOKBACK = 10

_ATTRIBUTES = {
    FeatureType.OPEN: "open",
    FeatureType.HIGH: "high",
    FeatureType.LOW: "low",
    FeatureType.CLOSE: "close",
}


@dataclass
class DataSet:
    """Candles turned into labelled feature windows."""

    candles: list[Candle]
    input_len: int = 0
    features: list[Data] = field(default_factory=list)

    def create_policy(self, config: PolicyConfig, policy: Callable[[list[Candle]], int]) -> None:
        """Label each input window with the policy (0 hold, 1 buy, 2 sell)."""
        start = len(self.candles) - config.policy_range
        stop = self.input_len + 1
        built = []
        for i in range(start, stop - 1, -1):
            if i < _POLICY_LOOKBACK:
                raise ValueError(
                    f"window at {i} needs {_POLICY_LOOKBACK} earlier candles for the policy"
                )
            signal = policy(self.candles[i - _POLICY_LOOKBACK : i + config.policy_range])
            window = self.candles[i - 1 - self.input_len : i]
            built.append(
                Data(
                    name=config.feat_name,
                    features=self.get_feature_values(window, config.feat_type),
                    label=signal,
                )
            )
        self.features = built[::-1] + self.features

    def serialize_labels(self) -> None:
        """Smooth labels so a change sticks only when it persists ahead."""
        last_signal = -1
        rows = self.features
        for cur, nxt, third, fourth in zip(rows, rows[1:], rows[3:], rows[4:]):
            if (
                last_signal != cur.label
                and nxt.label != last_signal
                and third.label != last_signal
                and fourth.label != last_signal
            ):
                last_signal = cur.label
            cur.label = last_signal

    def get_data_set(self) -> list[Data]:
        return self.features

    def get_feature_values(self, candles: Sequence[Candle], feat_type: FeatureType) -> list[float]:
        """Extract one value per candle according to `feat_type`."""
        if feat_type == FeatureType.CLOSE_PERCENTAGE:
            if not candles:
                return []
            return [0.0] + [
                ((cur.close - prev.close) / prev.close) * 100
                for prev, cur in zip(candles, candles[1:])
            ]
        attribute = _ATTRIBUTES.get(feat_type)
        if attribute is None:
            return []
        return [getattr(candle, attribute) for candle in candles]


def close_percentage_policy(candles: Sequence[Candle]) -> int:
    """Label by the summed close-to-close percentage change."""
    per_change = sum(
        ((cur.close - prev.close) / prev.close) * 100 for prev, cur in zip(candles, candles[1:])
    )
    if per_change > 0.3:
        return 1
    if 0 <= per_change < 0.3:
        return 0
    return 2


def ma_percentage_policy(candles: Sequence[Candle]) -> int:
    """Label by the change of the 10-period moving average across the window."""
    averages = ma(candles, 10)
    change = percentage_change(averages[0], averages[-1])
    if change >= 0.3:
        return 1
    if 0 <= change < 0.3:
        return 0
    return 2