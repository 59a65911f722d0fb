"""Weighted edges between neurons and weight initialisers."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable

WeightInitializer = Callable[[], float]


@dataclass
class Synapse:
    """An edge carrying a weighted signal between neurons."""

    weight: float = 0.0
    id: int = 0
    input: float = 0.0
    output: float = 0.0
    is_bias: bool = False

    def fire(self, value: float) -> None:
        """Receive `value` and compute the weighted output."""
        self.input = value
        self.output = self.input * self.weight


def uniform(std_dev: float, mean: float) -> float:
    """Sample from U(mean - std_dev/2, mean + std_dev/2)."""
    return (random.random() - 0.5) * std_dev + mean


def new_uniform(std_dev: float, mean: float) -> WeightInitializer:
    """A weight initialiser drawing uniform samples."""
    return lambda: uniform(std_dev, mean)


def normal(std_dev: float, mean: float) -> float:
    """Sample from N(mean, std_dev)."""
    return random.gauss(0.0, 1.0) * std_dev + mean


def new_normal(std_dev: float, mean: float) -> WeightInitializer:
    """A weight initialiser drawing normal samples."""
    return lambda: normal(std_dev, mean)