"""Loss functions and their output-layer derivatives."""

from __future__ import annotations

import math
from typing import Sequence

from bullean.neural.core import LossType

Matrix = Sequence[Sequence[float]]


def _log(x: float) -> float:
    if x > 0:
        return math.log(x)
    if x == 0:
        return -math.inf
    return math.nan


def _require_rows(estimate: Matrix) -> None:
    if not estimate:
        raise ValueError("no estimates to score")


class CrossEntropy:
    """Cross-entropy loss."""

    def f(self, estimate: Matrix, ideal: Matrix) -> float:
        _require_rows(estimate)
        total = 0.0
        for est_row, ideal_row in zip(estimate, ideal):
            total -= sum(i * _log(e) for e, i in zip(est_row, ideal_row))
        return total / len(estimate)

    def df(self, estimate: float, ideal: float, activation: float) -> float:
        return estimate - ideal


class BinaryCrossEntropy:
    """Binary cross-entropy loss."""

    _EPSILON = 1e-16

    def f(self, estimate: Matrix, ideal: Matrix) -> float:
        _require_rows(estimate)
        eps = self._EPSILON
        total = 0.0
        for est_row, ideal_row in zip(estimate, ideal):
            total -= sum(
                i * _log(e + eps) + (1.0 - i) * _log(1.0 - e + eps)
                for e, i in zip(est_row, ideal_row)
            )
        return total / len(estimate)

    def df(self, estimate: float, ideal: float, activation: float) -> float:
        return estimate - ideal


class MeanSquared:
    """Mean squared error."""

    def f(self, estimate: Matrix, ideal: Matrix) -> float:
        _require_rows(estimate)
        total = sum(
            (e - i) ** 2
            for est_row, ideal_row in zip(estimate, ideal)
            for e, i in zip(est_row, ideal_row)
        )
        count = len(estimate) * len(estimate[0])
        if count == 0:
            raise ValueError("no estimates to score")
        return total / count

    def df(self, estimate: float, ideal: float, activation: float) -> float:
        return activation * (estimate - ideal)


_LOSSES = {
    LossType.CROSS_ENTROPY: CrossEntropy,
    LossType.MEAN_SQUARED: MeanSquared,
    LossType.BINARY_CROSS_ENTROPY: BinaryCrossEntropy,
}


def get_loss(loss: LossType) -> CrossEntropy | BinaryCrossEntropy | MeanSquared:
    """The loss object for a type; unknown types use cross-entropy."""
    return _LOSSES.get(loss, CrossEntropy)()