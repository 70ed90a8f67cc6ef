"""The interface shared by every layer of a network."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Iterable

import numpy as np


def _empty() -> np.ndarray:
    return np.empty(0, dtype=object)


class Layer(ABC):
    """A step of a network that maps an array of Values to another.

    Layers with trainable parameters expose them through ``weights_flat`` and
    ``biases_flat`` as flat arrays holding the very Values the layer computes with.
    """

    name: str
    trainable: ClassVar[bool] = False

    @abstractmethod
    def forward(self, input) -> np.ndarray:
        """Compute the layer's output for ``input``."""

    def __call__(self, input) -> np.ndarray:
        return self.forward(input)

    def parameters(self) -> np.ndarray:
        """All parameters, weights first and biases after."""
        return np.concatenate([self.weights_flat(), self.biases_flat()])

    def weights_flat(self) -> np.ndarray:
        return _empty()

    def biases_flat(self) -> np.ndarray:
        return _empty()

    def set_weights(self, new_weights: Iterable[float]) -> None:
        """Overwrite weight values in order; extra entries on either side are ignored."""
        for value, weight in zip(self.weights_flat(), new_weights):
            value.value = weight

    def set_biases(self, new_biases: Iterable[float]) -> None:
        """Overwrite bias values in order; extra entries on either side are ignored."""
        for value, bias in zip(self.biases_flat(), new_biases):
            value.value = bias