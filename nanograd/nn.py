"""
Neural network building blocks on top of the autograd engine:
Neuron, Layer and MLP (multi-layer perceptron).
"""

from typing import List, Optional, Sequence, Union

import numpy as np

from nanograd import config
from nanograd.engine import Value

Input = Union[Value, float]


class Module:
    """Base class: parameter collection, gradient reset, call-as-forward."""

    def zero_grad(self) -> None:
        for p in self.parameters():
            p.zero_grad()

    def parameters(self) -> List[Value]:
        return []

    def forward(self, x):
        raise NotImplementedError

    def __call__(self, x):
        return self.forward(x)


class Neuron(Module):
    """A single neuron with weighted inputs, bias and optional ReLU."""

    def __init__(self, nin: int, nonlin: bool = True, rng: Optional[np.random.Generator] = None):
        rng = rng if rng is not None else config.make_rng()
        self.w = [Value(rng.uniform(-1, 1)) for _ in range(nin)]
        self.b = Value(0.0)
        self.nonlin = nonlin

    def forward(self, x: Sequence[Input]) -> Value:
        if len(x) != len(self.w):
            raise ValueError(f"Input size mismatch: neuron expects {len(self.w)} inputs, got {len(x)}")
        # w · x + b
        act = sum((wi * xi for wi, xi in zip(self.w, x)), self.b)
        return act.relu() if self.nonlin else act

    def parameters(self) -> List[Value]:
        return self.w + [self.b]

    def __repr__(self) -> str:
        return f"{'ReLU' if self.nonlin else 'Linear'}Neuron({len(self.w)})"


class Layer(Module):
    def __init__(self, nin: int, nout: int, nonlin: bool = True, rng: Optional[np.random.Generator] = None):
        rng = rng if rng is not None else config.make_rng()
        self.nin = nin
        self.neurons = [Neuron(nin, nonlin=nonlin, rng=rng) for _ in range(nout)]

    def forward(self, x: Sequence[Input]) -> List[Value]:
        if len(x) != self.nin:
            raise ValueError(f"Input size mismatch: layer expects {self.nin} inputs, got {len(x)}")
        return [n(x) for n in self.neurons]

    def parameters(self) -> List[Value]:
        return [p for neuron in self.neurons for p in neuron.parameters()]

    def __repr__(self) -> str:
        return f"Layer of [{', '.join(str(n) for n in self.neurons)}]"


class MLP(Module):
    """
    Stack of fully connected layers. Every layer but the last applies ReLU;
    the last one is linear.

    MLP(2, [16, 16, 1]) maps 2 inputs through two hidden layers of 16 to a
    single output.
    """

    def __init__(self, nin: int, nouts: Sequence[int], rng: Optional[np.random.Generator] = None):
        # shared by every layer
        rng = rng if rng is not None else config.make_rng()
        sz = [nin] + list(nouts)
        self.layers = [
            Layer(sz[i], sz[i + 1], nonlin=i != len(nouts) - 1, rng=rng)
            for i in range(len(nouts))
        ]

    def forward(self, x: Sequence[Input]) -> List[Value]:
        for layer in self.layers:
            x = layer(x)
        return x

    def parameters(self) -> List[Value]:
        return [p for layer in self.layers for p in layer.parameters()]

    def __repr__(self) -> str:
        return f"MLP of [{', '.join(str(layer) for layer in self.layers)}]"
