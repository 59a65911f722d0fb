"""Neurons and fully connected layers of a feed-forward network."""

from __future__ import annotations

from dataclasses import dataclass, field

from bullean.neural.activation import get_activation, softmax
from bullean.neural.core import ActivationType
from bullean.neural.synapse import Synapse, WeightInitializer

_FUNCTIONS = {act: get_activation(act) for act in ActivationType}


def _function(act: ActivationType):
    found = _FUNCTIONS.get(act)
    return found if found is not None else get_activation(act)


def _format_float(x: float) -> str:
    text = repr(float(x))
    return text[:-2] if text.endswith(".0") else text


@dataclass(eq=False)
class Neuron:
    """A network node summing its incoming synapses."""

    activation: ActivationType = ActivationType.NONE
    inputs: list[Synapse] = field(default_factory=list)
    outputs: list[Synapse] = field(default_factory=list)
    value: float = 0.0
    index: int = 0

    def fire(self) -> None:
        """Activate the summed input and pass the value downstream."""
        self.value = self.activate(sum(s.output for s in self.inputs))
        for s in self.outputs:
            s.fire(self.value)

    def activate(self, x: float) -> float:
        return _function(self.activation).f(x)

    def dactivate(self, x: float) -> float:
        """Derivative of the activation, expressed through the activated value."""
        return _function(self.activation).df(x)


class Layer:
    """A set of neurons sharing one activation."""

    def __init__(self, size: int, activation: ActivationType) -> None:
        self.neurons = [Neuron(activation) for _ in range(size)]
        self.activation = activation

    def fire(self) -> None:
        """Fire every neuron, then normalise with softmax if the layer uses it."""
        for neuron in self.neurons:
            neuron.fire()
        if self.activation == ActivationType.SOFTMAX and self.neurons:
            for neuron, value in zip(self.neurons, softmax([n.value for n in self.neurons])):
                neuron.value = value

    def connect(self, next_layer: "Layer", weight: WeightInitializer) -> None:
        """Fully connect this layer to `next_layer` with freshly weighted synapses."""
        synapse_id = 0
        for neuron in self.neurons:
            for target in next_layer.neurons:
                syn = Synapse(weight=weight(), id=synapse_id)
                neuron.outputs.append(syn)
                target.inputs.append(syn)
                synapse_id += 1

    def connect_prepared(self, next_layer: "Layer") -> None:
        """Relink `next_layer`'s inputs to this layer's outputs that share their ids."""
        by_id: dict[int, Synapse] = {}
        for neuron in self.neurons:
            for syn in neuron.outputs:
                by_id[syn.id] = syn
        for target in next_layer.neurons:
            target.inputs = [by_id.get(s.id, s) for s in target.inputs]

    def apply_bias(self, weight: WeightInitializer) -> list[Synapse]:
        """Add a bias synapse to each neuron and return them."""
        biases = []
        for neuron in self.neurons:
            bias = Synapse(weight=weight(), is_bias=True)
            neuron.inputs.append(bias)
            biases.append(bias)
        return biases

    def __str__(self) -> str:
        rows = (
            "[" + " ".join(_format_float(s.weight) for s in neuron.inputs) + "]"
            for neuron in self.neurons
        )
        return "[" + " ".join(rows) + "]"