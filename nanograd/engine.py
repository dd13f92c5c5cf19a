"""
NanoGrad - Autograd Engine

A minimal reverse-mode automatic differentiation engine over scalar values.
Every operation returns a new Value that remembers its inputs and how to push
its gradient back onto them.
"""

import logging
import numbers
from typing import Callable, List, Set, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

Scalar = Union[int, float]


def _lift(x: Union['Value', Scalar]) -> 'Value':
    """Wrap a bare number as a leaf so every operand goes through the same graph path."""
    return x if isinstance(x, Value) else Value(x)


class Value:
    """
    Stores a single scalar value and its gradient.
    """

    def __init__(self, data: Scalar, _children: Tuple['Value', ...] = (), _op: str = ''):
        self.data = float(data)
        self.grad = 0.0
        # Ordered: the backward rule of a node addresses its children by position
        self._prev: Tuple['Value', ...] = tuple(_children)
        self._op = _op
        self._backward: Callable[[], None] = lambda: None

    def __repr__(self) -> str:
        if not self._op:
            return f"Value(data={self.data}, grad={self.grad})"
        return f"Value(data={self.data}, grad={self.grad}, op={self._op!r})"

    @property
    def children(self) -> Tuple['Value', ...]:
        return self._prev

    # -----------------------------------------------------------
    # OPERATIONS
    # -----------------------------------------------------------

    def __add__(self, other: Union['Value', Scalar]) -> 'Value':
        rhs = _lift(other)
        out = Value(self.data + rhs.data, (self, rhs), '+')

        def _backward():
            self.grad += out.grad
            rhs.grad += out.grad

        out._backward = _backward
        return out

    def __mul__(self, other: Union['Value', Scalar]) -> 'Value':
        rhs = _lift(other)
        out = Value(self.data * rhs.data, (self, rhs), '*')

        def _backward():
            # product rule
            self.grad += out.grad * rhs.data
            rhs.grad += out.grad * self.data

        out._backward = _backward
        return out

    def __pow__(self, exponent: Scalar) -> 'Value':
        assert isinstance(exponent, numbers.Real), "exponent must be a real constant, not a graph node"
        # float64 semantics: a bad domain yields nan/inf instead of complex or an exception
        with np.errstate(all='ignore'):
            out = Value(np.power(self.data, exponent, dtype=np.float64), (self,), f'**{exponent}')

        def _backward():
            with np.errstate(all='ignore'):
                local = exponent * np.power(self.data, exponent - 1, dtype=np.float64)
                self.grad += float(out.grad * local)

        out._backward = _backward
        return out

    def relu(self) -> 'Value':
        out = Value(self.data if self.data > 0 else 0.0, (self,), 'ReLU')

        def _backward():
            # zero input counts as inactive
            self.grad += out.grad if self.data > 0 else 0.0

        out._backward = _backward
        return out

    # Derived and reflected forms. The literal side is lifted first so the
    # children keep the order in which the expression was written.

    def __neg__(self) -> 'Value':
        return self * -1.0

    def __sub__(self, other: Union['Value', Scalar]) -> 'Value':
        return self + -_lift(other)

    def __truediv__(self, other: Union['Value', Scalar]) -> 'Value':
        return self * _lift(other) ** -1

    def __radd__(self, other: Scalar) -> 'Value':
        return _lift(other) + self

    def __rmul__(self, other: Scalar) -> 'Value':
        return _lift(other) * self

    def __rsub__(self, other: Scalar) -> 'Value':
        return _lift(other) + -self

    def __rtruediv__(self, other: Scalar) -> 'Value':
        return _lift(other) * self ** -1

    # -----------------------------------------------------------
    # BACKWARD PASS
    # -----------------------------------------------------------

    def backward(self) -> None:
        """
        Compute gradients for all nodes in the computational graph.

        Gradients accumulate: calling this twice without zero_grad() in
        between adds the second pass on top of the first.
        """
        topo = topological_sort(self)
        logger.debug("backward pass over %d nodes", len(topo))

        self.grad = 1.0
        for node in topo:
            node._backward()

    def zero_grad(self) -> None:
        """Reset the gradient of this node and of everything it was built from."""
        for node in topological_sort(self):
            node.grad = 0.0

    def update(self, learning_rate: float) -> None:
        # Only meaningful on leaves; an interior node would drift from its expression
        self.data -= learning_rate * self.grad


def topological_sort(root: Value) -> List[Value]:
    """
    Return the nodes reachable from root, root first, each node ahead of all
    of the nodes it was computed from.

    Uses an explicit stack so graph depth is not bounded by the recursion limit.
    """
    topo: List[Value] = []
    visited: Set[Value] = set()
    stack: List[Tuple[Value, bool]] = [(root, False)]

    while stack:
        v, expanded = stack.pop()
        if expanded:
            topo.append(v)
            continue
        if v in visited:
            continue
        visited.add(v)
        stack.append((v, True))
        for child in reversed(v._prev):
            if child not in visited:
                stack.append((child, False))

    topo.reverse()
    return topo


def validate_graph(root: Value) -> bool:
    """Return True if no cycle is reachable from root."""
    done: Set[Value] = set()
    on_path: Set[Value] = {root}
    stack = [(root, iter(root._prev))]

    while stack:
        node, children = stack[-1]
        for child in children:
            if child in on_path:
                return False
            if child not in done:
                on_path.add(child)
                stack.append((child, iter(child._prev)))
                break
        else:
            stack.pop()
            on_path.discard(node)
            done.add(node)
    return True
