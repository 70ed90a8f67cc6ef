"""Fully connected layer."""

from __future__ import annotations

import numpy as np

from .layer import Layer
from .tensor import dot, zeros
from .weights_init import GlorotUniform


class Linear(Layer):
    """Computes ``input · weightsᵀ + biases``; weights have shape (nout, nin)."""

    trainable = True

    def __init__(self, name: str, nin: int, nout: int) -> None:
        self.name = str(name)
        init = GlorotUniform()
        self.weights = np.empty((nout, nin), dtype=object)
        for index in np.ndindex(self.weights.shape):
            self.weights[index] = init.sample(nin, nout)
        self.biases = zeros(nout)

    def forward(self, input) -> np.ndarray:
        return dot(input, self.weights.T) + self.biases

    def weights_flat(self) -> np.ndarray:
        return self.weights.reshape(-1)

    def biases_flat(self) -> np.ndarray:
        return self.biases.reshape(-1)