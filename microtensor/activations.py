"""Element-wise and axis-wise activation layers."""

from __future__ import annotations

import functools
from abc import abstractmethod
from typing import Callable, Sequence

import numpy as np

from .layer import Layer
from .value import Value


def _map(fn: Callable[[Value], Value], inputs) -> np.ndarray:
    values = np.asarray(inputs, dtype=object)
    out = np.empty(values.shape, dtype=object)
    for index, value in np.ndenumerate(values):
        out[index] = fn(value)
    return out


class Activation(Layer):
    """A parameterless layer whose output has the shape of its input."""

    @abstractmethod
    def activate(self, inputs) -> np.ndarray:
        """Apply the activation."""

    def forward(self, input) -> np.ndarray:
        return self.activate(input)


class ReLU(Activation):
    name = "ReLU"

    def activate(self, inputs) -> np.ndarray:
        return _map(Value.relu, inputs)


class Sigmoid(Activation):
    name = "Sigmoid"

    def activate(self, inputs) -> np.ndarray:
        return _map(lambda v: 1.0 / (1.0 + (-v).exp()), inputs)


class Tanh(Activation):
    name = "Tanh"

    def activate(self, inputs) -> np.ndarray:
        def tanh(v: Value) -> Value:
            return ((v * 2.0).exp() - 1.0) / ((v * 2.0).exp() + 1.0)

        return _map(tanh, inputs)


class Softmax(Activation):
    """Softmax taken along axis ``dim``."""

    name = "Softmax"

    def __init__(self, dim: int) -> None:
        self.dim = dim

    @staticmethod
    def _softmax(logits: Sequence[Value]) -> list[Value]:
        max_logit = functools.reduce(Value.max, logits)
        exps = [(logit - max_logit).exp() for logit in logits]
        total = sum(exps, Value(0.0))
        return [e / total for e in exps]

    def activate(self, inputs) -> np.ndarray:
        values = np.asarray(inputs, dtype=object)
        if not 0 <= self.dim < values.ndim:
            raise ValueError(
                f"softmax axis {self.dim} is out of range for a {values.ndim}-d tensor"
            )
        out = np.empty(values.shape, dtype=object)
        source = np.moveaxis(values, self.dim, -1)
        target = np.moveaxis(out, self.dim, -1)
        for index in np.ndindex(source.shape[:-1]):
            for j, soft in enumerate(self._softmax(list(source[index]))):
                target[index + (j,)] = soft
        return out