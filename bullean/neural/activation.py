"""Activation functions and small vector helpers."""

from __future__ import annotations

import math
from typing import Sequence

from bullean.neural.core import ActivationType, Mode


class Linear:
    """Identity activation."""

    def f(self, x: float) -> float:
        return x

    def df(self, x: float) -> float:
        return 1.0


class ReLU:
    """Rectified linear unit."""

    def f(self, x: float) -> float:
        return max(x, 0.0)

    def df(self, y: float) -> float:
        """Derivative expressed through the activated value y."""
        return 1.0 if y > 0 else 0.0


def logistic(x: float, a: float) -> float:
    """The logistic function 1 / (1 + e^(-a x))."""
    try:
        return 1.0 / (1.0 + math.exp(-a * x))
    except OverflowError:
        return 0.0


class Sigmoid:
    """Logistic activation with slope 1."""

    def f(self, x: float) -> float:
        return logistic(x, 1.0)

    def df(self, y: float) -> float:
        """Derivative expressed through the activated value y."""
        return y * (1.0 - y)


class Tanh:
    """Hyperbolic tangent activation."""

    def f(self, x: float) -> float:
        return math.tanh(x)

    def df(self, y: float) -> float:
        """Derivative expressed through the activated value y."""
        return 1.0 - y**2


_OUTPUT_ACTIVATIONS = {
    Mode.MULTI_CLASS: ActivationType.SOFTMAX,
    Mode.REGRESSION: ActivationType.LINEAR,
    Mode.BINARY: ActivationType.SIGMOID,
    Mode.MULTI_LABEL: ActivationType.SIGMOID,
}

_ACTIVATIONS = {
    ActivationType.SIGMOID: Sigmoid,
    ActivationType.TANH: Tanh,
    ActivationType.RELU: ReLU,
    ActivationType.LINEAR: Linear,
    ActivationType.SOFTMAX: Linear,
}


def output_activation(mode: Mode) -> ActivationType:
    """The output-layer activation for an inference mode."""
    return _OUTPUT_ACTIVATIONS.get(mode, ActivationType.NONE)


def get_activation(act: ActivationType) -> Linear | ReLU | Sigmoid | Tanh:
    """The activation object for a type; softmax and unknown types act linearly per neuron."""
    return _ACTIVATIONS.get(act, Linear)()


def _require(xx: Sequence[float]) -> None:
    if not xx:
        raise ValueError("empty sequence")


def maximum(xx: Sequence[float]) -> float:
    _require(xx)
    return max(xx)


def minimum(xx: Sequence[float]) -> float:
    _require(xx)
    return min(xx)


def arg_max(xx: Sequence[float]) -> int:
    """Index of the first largest element."""
    _require(xx)
    return max(range(len(xx)), key=xx.__getitem__)


def softmax(xx: Sequence[float]) -> list[float]:
    """Numerically stable softmax."""
    top = maximum(xx)
    exps = [math.exp(x - top) for x in xx]
    total = sum(exps)
    return [e / total for e in exps]


def normalize(xx: Sequence[float]) -> list[float]:
    """Scale values linearly onto [0, 1]."""
    low, high = minimum(xx), maximum(xx)
    if high == low:
        raise ValueError("cannot normalize values that are all equal")
    span = high - low
    return [(x - low) / span for x in xx]