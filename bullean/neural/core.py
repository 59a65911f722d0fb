"""Network configuration, training examples and model protocols."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Protocol, SupportsIndex, overload, runtime_checkable

from bullean.neural.synapse import WeightInitializer, new_normal


class Mode(IntEnum):
    """Inference mode, which decides the output activation."""

    DEFAULT = 0
    MULTI_CLASS = 1
    REGRESSION = 2
    BINARY = 3
    MULTI_LABEL = 4


class ActivationType(IntEnum):
    """Neuron activation function."""

    NONE = 0
    SIGMOID = 1
    TANH = 2
    RELU = 3
    LINEAR = 4
    SOFTMAX = 5


class LossType(IntEnum):
    """Loss function."""

    NONE = 0
    CROSS_ENTROPY = 1
    BINARY_CROSS_ENTROPY = 2
    MEAN_SQUARED = 3

    def __str__(self) -> str:
        return _LOSS_NAMES.get(self, "N/A")


_LOSS_NAMES = {
    LossType.CROSS_ENTROPY: "CE",
    LossType.BINARY_CROSS_ENTROPY: "BinCE",
    LossType.MEAN_SQUARED: "MSE",
}


@dataclass
class Config:
    """Network topology, activations and loss.

    `layout` lists the node count of each layer; the last entry is the output layer.
    """

    inputs: int = 0
    layout: list[int] = field(default_factory=list)
    activation: ActivationType = ActivationType.NONE
    mode: Mode = Mode.DEFAULT
    weight: WeightInitializer | None = None
    loss: LossType = LossType.NONE
    bias: bool = False


def default_ffnn_config(input_len: int) -> Config:
    """The standard deep multi-class configuration for `input_len` features."""
    return Config(
        inputs=input_len + 1,
        layout=[100] * 12 + [3],
        activation=ActivationType.SOFTMAX,
        mode=Mode.MULTI_CLASS,
        weight=new_normal(1e-20, 1e-20),
        bias=True,
    )


@dataclass
class Example:
    """An input paired with its target response."""

    input: list[float]
    response: list[float]


class Examples(list):
    """A list of examples with shuffling and splitting helpers."""

    @overload
    def __getitem__(self, index: SupportsIndex) -> Example: ...

    @overload
    def __getitem__(self, index: slice) -> "Examples": ...

    def __getitem__(self, index):
        result = super().__getitem__(index)
        if isinstance(index, slice):
            return Examples(result)
        return result

    def shuffle(self) -> None:
        """Shuffle in place."""
        random.shuffle(self)

    def split(self, p: float) -> tuple["Examples", "Examples"]:
        """Send each example to the first part with probability `p`."""
        first, second = Examples(), Examples()
        for example in self:
            (first if p > random.random() else second).append(example)
        return first, second

    def split_size(self, size: int) -> list["Examples"]:
        """Consecutive chunks of at most `size` examples."""
        if size <= 0:
            raise ValueError(f"chunk size must be positive, got {size}")
        return [Examples(list.__getitem__(self, slice(i, i + size))) for i in range(0, len(self), size)]

    def split_n(self, n: int) -> list["Examples"]:
        """Deal the examples round-robin into `n` parts."""
        if n <= 0:
            raise ValueError(f"number of parts must be positive, got {n}")
        parts = [Examples() for _ in range(n)]
        for i, example in enumerate(self):
            parts[i % n].append(example)
        return parts


@runtime_checkable
class Model(Protocol):
    """Anything that maps an input vector to a prediction."""

    def predict(self, input_values: list[float]) -> list[float]:
        ...


@runtime_checkable
class Trainer(Protocol):
    """Trains a model and returns its score with the trained model."""

    def train(
        self,
        model: object,
        examples: Iterable[Example],
        validation: Iterable[Example],
        iterations: int,
    ) -> tuple[float, Model | None]:
        ...


@dataclass
class Neural:
    """A model with the trainer and iteration count used to fit it."""

    model: Model
    trainer: Trainer
    iterations: int = 0