"""A stack of layers applied one after another, with saving and loading of parameters."""

from __future__ import annotations

import os
import pickle
from typing import Iterable, Union

import numpy as np

from .layer import Layer

PathLike = Union[str, "os.PathLike[str]"]


class Sequential:
    """Feeds its input through each layer in turn."""

    def __init__(self, layers: Iterable[Layer]) -> None:
        self.layers = list(layers)

    def parameters(self) -> np.ndarray:
        """Every layer's parameters, in layer order."""
        parts = [layer.parameters() for layer in self.layers]
        if not parts:
            return np.empty(0, dtype=object)
        return np.concatenate(parts)

    def forward(self, inputs) -> np.ndarray:
        output = inputs
        for layer in self.layers:
            output = layer.forward(output)
        return output

    def __call__(self, inputs) -> np.ndarray:
        return self.forward(inputs)

    def forward_batch(self, batches) -> np.ndarray:
        """Run each entry along the first axis through the model and stack the results."""
        values = np.asarray(batches, dtype=object)
        if values.ndim == 0 or values.shape[0] == 0:
            raise ValueError("forward_batch needs at least one batch")
        outputs = [np.asarray(self.forward(batch), dtype=object) for batch in values]
        out = np.empty((len(outputs),) + outputs[0].shape, dtype=object)
        for i, output in enumerate(outputs):
            out[i] = output
        return out

    def _trainable(self) -> Iterable[Layer]:
        return (layer for layer in self.layers if layer.trainable)

    def state_dict(self) -> dict[str, list[float]]:
        """Plain float weights and biases of every trainable layer, keyed by layer name."""
        state: dict[str, list[float]] = {}
        for layer in self._trainable():
            state[f"{layer.name}.weight"] = [v.value for v in layer.weights_flat()]
            state[f"{layer.name}.bias"] = [v.value for v in layer.biases_flat()]
        return state

    def save_state_dict(self, path: PathLike) -> None:
        with open(path, "wb") as file:
            pickle.dump(self.state_dict(), file)

    def load_state_dict(self, path: PathLike) -> None:
        """Load parameters saved by ``save_state_dict`` into the matching layers."""
        with open(path, "rb") as file:
            state = pickle.load(file)

        for layer in self._trainable():
            weight_key, bias_key = f"{layer.name}.weight", f"{layer.name}.bias"
            for key in (weight_key, bias_key):
                if key not in state:
                    raise KeyError(f"state dict has no entry {key!r}")
            weights, biases = state[weight_key], state[bias_key]
            if len(weights) != len(layer.weights_flat()):
                raise ValueError(f'Wrong loaded weight count for layer "{layer.name}".')
            if len(biases) != len(layer.biases_flat()):
                raise ValueError(f'Wrong loaded bias count for layer "{layer.name}".')
            layer.set_weights(weights)
            layer.set_biases(biases)