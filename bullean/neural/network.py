"""Feed-forward neural network with JSON persistence."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence, Sized, TypeVar

from bullean.neural.activation import output_activation
from bullean.neural.core import ActivationType, Config, LossType, Mode
from bullean.neural.layer import Layer
from bullean.neural.synapse import Synapse, new_uniform

_T = TypeVar("_T")

Weights = list[list[list[float]]]


def _apply_defaults(config: Config) -> None:
    if config.weight is None:
        config.weight = new_uniform(0.5, 0.0)
    if config.activation == ActivationType.NONE:
        config.activation = ActivationType.SIGMOID
    if config.loss == LossType.NONE:
        if config.mode in (Mode.MULTI_CLASS, Mode.MULTI_LABEL):
            config.loss = LossType.CROSS_ENTROPY
        elif config.mode == Mode.BINARY:
            config.loss = LossType.BINARY_CROSS_ENTROPY
        else:
            config.loss = LossType.MEAN_SQUARED


def _initialize_layers(config: Config) -> list[Layer]:
    if not config.layout:
        raise ValueError("network layout must have at least one layer")
    last = len(config.layout) - 1
    layers = []
    for i, size in enumerate(config.layout):
        act = config.activation
        if i == last and config.mode != Mode.DEFAULT:
            act = output_activation(config.mode)
        layers.append(Layer(size, act))

    for current, following in zip(layers, layers[1:]):
        current.connect(following, config.weight)

    for neuron in layers[0].neurons:
        neuron.inputs = [Synapse(weight=config.weight()) for _ in range(config.inputs)]
    return layers


def _checked_zip(items: Sequence[_T], values: Sequence[Any] | None, what: str):
    values = [] if values is None else values
    if not isinstance(values, Sized) or len(values) < len(items):
        got = len(values) if isinstance(values, Sized) else 0
        raise ValueError(f"too few {what}: expected {len(items)}, got {got}")
    return zip(items, values)


class FFNN:
    """A fully connected feed-forward network.

    Missing settings in `config` are filled in place: a uniform weight
    initialiser, sigmoid activation and a loss matching the mode.
    """

    def __init__(self, config: Config) -> None:
        _apply_defaults(config)
        self.config = config
        self.layers = _initialize_layers(config)
        self.biases: list[list[Synapse]] = []
        if config.bias:
            last = len(self.layers) - 1
            for i, layer in enumerate(self.layers):
                if config.mode == Mode.REGRESSION and i == last:
                    self.biases.append([])
                else:
                    self.biases.append(layer.apply_bias(config.weight))

    def fire(self) -> None:
        """Propagate the current inputs through every layer."""
        for biases in self.biases:
            for bias in biases:
                bias.fire(1.0)
        for layer in self.layers:
            layer.fire()

    def forward(self, input_values: Sequence[float]) -> None:
        """Compute a forward pass; the input length must match the configuration."""
        if len(input_values) != self.config.inputs:
            raise ValueError(
                f"Invalid input dimension - expected: {self.config.inputs} got: {len(input_values)}"
            )
        for neuron in self.layers[0].neurons:
            for syn, value in zip(neuron.inputs, input_values):
                syn.fire(value)
        self.fire()

    def predict(self, input_values: Sequence[float]) -> list[float]:
        """Run a forward pass and return the output layer's values."""
        self.forward(input_values)
        return [neuron.value for neuron in self.layers[-1].neurons]

    def num_weights(self) -> int:
        return sum(len(neuron.inputs) for layer in self.layers for neuron in layer.neurons)

    def weights(self) -> Weights:
        """All incoming weights, indexed by layer, neuron and synapse."""
        return [
            [[syn.weight for syn in neuron.inputs] for neuron in layer.neurons]
            for layer in self.layers
        ]

    def apply_weights(self, weights: Weights) -> None:
        """Set every incoming weight from a layer/neuron/synapse nested list."""
        for layer, layer_weights in _checked_zip(self.layers, weights, "layers"):
            for neuron, neuron_weights in _checked_zip(layer.neurons, layer_weights, "neurons"):
                for syn, value in _checked_zip(neuron.inputs, neuron_weights, "weights"):
                    syn.weight = float(value)

    def dump(self) -> "Dump":
        return Dump(config=self.config, weights=self.weights())

    def marshal(self) -> bytes:
        """The network as a JSON document."""
        return self.dump().to_json()

    def save_model(self, path: str | Path) -> None:
        Path(path).write_bytes(self.marshal())

    def __str__(self) -> str:
        return "".join(f"\n{layer}" for layer in self.layers)


def _config_to_dict(config: Config) -> dict[str, Any]:
    return {
        "Inputs": config.inputs,
        "Layout": list(config.layout),
        "Activation": int(config.activation),
        "Mode": int(config.mode),
        "Loss": int(config.loss),
        "Bias": config.bias,
    }


def _config_from_dict(raw: Any) -> Config:
    if not isinstance(raw, dict):
        raise ValueError("network dump has no configuration")
    return Config(
        inputs=int(raw.get("Inputs") or 0),
        layout=[int(size) for size in raw.get("Layout") or []],
        activation=ActivationType(raw.get("Activation") or 0),
        mode=Mode(raw.get("Mode") or 0),
        loss=LossType(raw.get("Loss") or 0),
        bias=bool(raw.get("Bias", False)),
    )


@dataclass
class Dump:
    """A network's configuration and weights."""

    config: Config
    weights: Weights

    def to_json(self) -> bytes:
        document = {"Config": _config_to_dict(self.config), "Weights": self.weights}
        return json.dumps(document, separators=(",", ":"), allow_nan=False).encode("utf-8")


def connect_prepared_ffnn(network: FFNN) -> None:
    """Relink each layer's inputs to the preceding layer's outputs by synapse id."""
    for current, following in zip(network.layers, network.layers[1:]):
        current.connect_prepared(following)


def from_dump(dump: Dump) -> FFNN:
    network = FFNN(dump.config)
    network.apply_weights(dump.weights)
    return network


def unmarshal(data: bytes | str) -> FFNN:
    """Restore a network from its JSON document."""
    document = json.loads(data)
    if not isinstance(document, dict):
        raise ValueError("network dump must be a JSON object")
    config = _config_from_dict(document.get("Config"))
    return from_dump(Dump(config=config, weights=document.get("Weights") or []))


def load_model(path: str | Path) -> FFNN:
    return unmarshal(Path(path).read_bytes())