"""Mini-batch backpropagation trainer that spreads each batch over worker networks."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Sequence

from bullean.neural.core import Example, Examples
from bullean.neural.loss import get_loss
from bullean.neural.network import FFNN
from bullean.neural.printer import StatsPrinter
from bullean.neural.solver import Solver
from bullean.neural.stats import iparam

Gradients = list[list[list[float]]]


def _zero_gradients(network: FFNN) -> Gradients:
    return [[[0.0] * len(neuron.inputs) for neuron in layer.neurons] for layer in network.layers]


def _deltas(network: FFNN, ideal: Sequence[float]) -> list[list[float]]:
    """Error terms of every neuron after a forward pass."""
    loss = get_loss(network.config.loss)
    outputs = network.layers[-1].neurons
    if len(ideal) < len(outputs):
        raise ValueError(
            f"response has {len(ideal)} values, the network has {len(outputs)} outputs"
        )
    deltas: list[list[float]] = [[] for _ in network.layers]
    deltas[-1] = [
        loss.df(neuron.value, target, neuron.dactivate(neuron.value))
        for neuron, target in zip(outputs, ideal)
    ]
    for i in reversed(range(len(network.layers) - 1)):
        following = deltas[i + 1]
        deltas[i] = [
            neuron.dactivate(neuron.value)
            * sum(syn.weight * delta for syn, delta in zip(neuron.outputs, following))
            for neuron in network.layers[i].neurons
        ]
    return deltas


def _batch_gradients(network: FFNN, batch: Iterable[Example]) -> Gradients:
    """Summed weight gradients of `network` over the examples in `batch`."""
    gradients = _zero_gradients(network)
    for example in batch:
        network.forward(example.input)
        deltas = _deltas(network, example.response)
        for layer_grads, layer, layer_deltas in zip(gradients, network.layers, deltas):
            for neuron_grads, neuron, delta in zip(layer_grads, layer.neurons, layer_deltas):
                neuron_grads[:] = [
                    grad + delta * syn.input for grad, syn in zip(neuron_grads, neuron.inputs)
                ]
    return gradients


def _accumulate(into: Gradients, other: Gradients) -> None:
    for layer_into, layer_other in zip(into, other):
        for neuron_into, neuron_other in zip(layer_into, layer_other):
            neuron_into[:] = [a + b for a, b in zip(neuron_into, neuron_other)]


class BatchTrainer:
    """Accumulates gradients over each batch, computed by parallel workers, then updates once."""

    def __init__(
        self,
        solver: Solver,
        verbosity: int = 0,
        batch_size: int = 0,
        parallelism: int = 0,
        printer: StatsPrinter | None = None,
    ) -> None:
        self.solver = solver
        self.verbosity = verbosity
        self.batch_size = iparam(batch_size, 1)
        self.parallelism = iparam(parallelism, 1)
        self.printer = printer if printer is not None else StatsPrinter()

    def train(
        self,
        network: FFNN,
        examples: Iterable[Example],
        validation: Iterable[Example],
        iterations: int,
    ) -> tuple[float, FFNN]:
        """Train for `iterations` epochs; return 0.0 and the trained network."""
        if not isinstance(network, FFNN):
            raise TypeError("BatchTrainer can only train an FFNN")
        if self.batch_size < 1 or self.parallelism < 1:
            raise ValueError("batch size and parallelism must be positive")
        validation = list(validation)
        train_set = Examples(examples)
        workers = [FFNN(network.config) for _ in range(self.parallelism)]

        self.printer.init(network)
        self.solver.init(network.num_weights())

        started = time.monotonic()
        with ThreadPoolExecutor(max_workers=self.parallelism) as pool:
            for iteration in range(1, iterations + 1):
                train_set.shuffle()
                for batch in train_set.split_size(self.batch_size):
                    current = network.weights()
                    for worker in workers:
                        worker.apply_weights(current)
                    parts = batch.split_n(self.parallelism)
                    futures = [
                        pool.submit(_batch_gradients, worker, part)
                        for worker, part in zip(workers, parts)
                        if part
                    ]
                    accumulated = _zero_gradients(network)
                    for future in futures:
                        _accumulate(accumulated, future.result())
                    self._update(network, accumulated, iteration)

                if self.verbosity > 0 and iteration % self.verbosity == 0 and validation:
                    self.printer.print_progress(
                        network, validation, time.monotonic() - started, iteration
                    )
        return 0.0, network

    def _update(self, network: FFNN, gradients: Gradients, iteration: int) -> None:
        index = 0
        for layer, layer_grads in zip(network.layers, gradients):
            for neuron, neuron_grads in zip(layer.neurons, layer_grads):
                for syn, grad in zip(neuron.inputs, neuron_grads):
                    syn.weight += self.solver.update(syn.weight, grad, iteration, index)
                    index += 1