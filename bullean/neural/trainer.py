"""Online (per-example) backpropagation trainer for feed-forward networks."""

from __future__ import annotations

import itertools
import time
from typing import Iterable, Sequence

from bullean.neural.core import Example, Examples
from bullean.neural.loss import get_loss
from bullean.neural.network import FFNN
from bullean.neural.printer import StatsPrinter
from bullean.neural.solver import Solver


class OnlineTrainer:
    """Updates the weights after every example."""

    def __init__(self, solver: Solver, verbosity: int = 0, printer: StatsPrinter | None = None) -> None:
        self.solver = solver
        self.verbosity = verbosity
        self.printer = printer if printer is not None else StatsPrinter()
        self._deltas: list[list[float]] = []

    def _prepare(self, network: FFNN) -> None:
        self._deltas = [[0.0] * len(layer.neurons) for layer in network.layers]
        self.solver.init(network.num_weights())

    def _ensure_prepared(self, network: FFNN) -> None:
        shape = [len(layer.neurons) for layer in network.layers]
        if [len(deltas) for deltas in self._deltas] != shape:
            self._prepare(network)

    def train(
        self,
        network: FFNN,
        examples: Iterable[Example],
        validation: Iterable[Example],
        iterations: int,
    ) -> tuple[float, FFNN]:
        """Train for `iterations` epochs; return the last reported accuracy and the network."""
        if not isinstance(network, FFNN):
            raise TypeError("OnlineTrainer can only train an FFNN")
        validation = list(validation)
        self._prepare(network)
        train_set = Examples(examples)
        self.printer.init(network)

        score = 0.0
        started = time.monotonic()
        for iteration in range(1, iterations + 1):
            train_set.shuffle()
            for example in train_set:
                self.feed_forward(network, example)
                self.back_propagate(network, example, iteration)
            if self.verbosity > 0 and iteration % self.verbosity == 0 and validation:
                score = self.printer.print_progress(
                    network, validation, time.monotonic() - started, iteration
                )
        return score, network

    def feed_forward(self, network: FFNN, example: Example) -> None:
        network.forward(example.input)

    def back_propagate(self, network: FFNN, example: Example, iteration: int) -> None:
        """Apply one gradient step for `example` after a forward pass."""
        self._ensure_prepared(network)
        self._calculate_deltas(network, example.response)
        self._update(network, iteration)

    def _calculate_deltas(self, network: FFNN, ideal: Sequence[float]) -> None:
        loss = get_loss(network.config.loss)
        outputs = network.layers[-1].neurons
        if len(ideal) < len(outputs):
            raise ValueError(
                f"response has {len(ideal)} values, the network has {len(outputs)} outputs"
            )
        self._deltas[-1] = [
            loss.df(neuron.value, target, neuron.dactivate(neuron.value))
            for neuron, target in zip(outputs, ideal)
        ]
        for i in reversed(range(len(network.layers) - 1)):
            following = self._deltas[i + 1]
            self._deltas[i] = [
                neuron.dactivate(neuron.value)
                * sum(syn.weight * delta for syn, delta in zip(neuron.outputs, following))
                for neuron in network.layers[i].neurons
            ]

    def _update(self, network: FFNN, iteration: int) -> None:
        index = itertools.count()
        for layer, deltas in zip(network.layers, self._deltas):
            for neuron, delta in zip(layer.neurons, deltas):
                for syn in neuron.inputs:
                    syn.weight += self.solver.update(
                        syn.weight, delta * syn.input, iteration, next(index)
                    )