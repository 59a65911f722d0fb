"""Weight update rules used during training."""

from __future__ import annotations

import math
from typing import Protocol, runtime_checkable


def fparam(val: float, fallback: float) -> float:
    """`val`, or `fallback` when `val` is zero."""
    return fallback if val == 0.0 else val


@runtime_checkable
class Solver(Protocol):
    """An update rule producing a weight delta from a gradient."""

    def init(self, size: int) -> None:
        ...

    def update(self, value: float, gradient: float, iteration: int, idx: int) -> float:
        ...


class Adam:
    """The Adam optimiser."""

    def __init__(
        self, lr: float = 0.0, beta: float = 0.0, beta2: float = 0.0, epsilon: float = 0.0
    ) -> None:
        self.lr = fparam(lr, 0.001)
        self.beta = fparam(beta, 0.9)
        self.beta2 = fparam(beta2, 0.999)
        self.epsilon = fparam(epsilon, 1e-8)
        self.v: list[float] = []
        self.m: list[float] = []

    def init(self, size: int) -> None:
        """Reset the moment vectors for `size` weights."""
        self.v = [0.0] * size
        self.m = [0.0] * size

    def update(self, value: float, gradient: float, t: int, idx: int) -> float:
        lrt = self.lr * math.sqrt(1.0 - self.beta2**t) / (1.0 - self.beta**t)
        self.m[idx] = self.beta * self.m[idx] + (1.0 - self.beta) * gradient
        self.v[idx] = self.beta2 * self.v[idx] + (1.0 - self.beta2) * gradient**2
        return -lrt * (self.m[idx] / (math.sqrt(self.v[idx]) + self.epsilon))


class SGD:
    """Stochastic gradient descent with momentum, decay and optional Nesterov step."""

    def __init__(
        self, lr: float = 0.0, momentum: float = 0.0, decay: float = 0.0, nesterov: bool = False
    ) -> None:
        self.lr = fparam(lr, 0.01)
        self.momentum = momentum
        self.decay = decay
        self.nesterov = nesterov
        self.moments: list[float] = []

    def init(self, size: int) -> None:
        """Reset the momentum vector for `size` weights."""
        self.moments = [0.0] * size

    def update(self, value: float, gradient: float, iteration: int, idx: int) -> float:
        lr = self.lr / (1 + self.decay * iteration)
        self.moments[idx] = self.momentum * self.moments[idx] - lr * gradient
        if self.nesterov:
            self.moments[idx] = self.momentum * self.moments[idx] - lr * gradient
        return self.moments[idx]