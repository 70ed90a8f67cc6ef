"""Batch normalisation over the channel axis of batched input."""

from __future__ import annotations

import numpy as np

from .layer import Layer
from .tensor import tensor, zeros
from .value import Value


class BatchNorm(Layer):
    """Normalises each channel over the batch and spatial axes.

    Input has shape (batch, features, *spatial). Each forward pass also folds
    the batch statistics into ``running_mean`` and ``running_var`` (the latter
    with the unbiased variance), weighted by ``momentum``.
    """

    trainable = True

    def __init__(
        self, name: str, features: int, eps: float = 1e-5, momentum: float = 0.1
    ) -> None:
        self.name = str(name)
        self.features = features
        self.eps = eps
        self.momentum = momentum
        self.weight = tensor(np.ones(features))
        self.bias = zeros(features)
        self.running_mean = np.zeros(features)
        self.running_var = np.ones(features)

    def forward(self, input) -> np.ndarray:
        values = np.asarray(input, dtype=object)
        if values.ndim < 2:
            raise ValueError("batch norm expects input of shape (batch, features, ...)")
        if values.shape[1] != self.features:
            raise ValueError(
                f"expected {self.features} features, got {values.shape[1]}"
            )

        out = np.empty(values.shape, dtype=object)
        target = np.moveaxis(out, 1, 0)
        batch_means = []
        batch_vars = []

        for c, (channel, weight, bias) in enumerate(
            zip(np.moveaxis(values, 1, 0), self.weight, self.bias)
        ):
            xs = list(channel.flat)
            count = len(xs)
            if count < 2:
                raise ValueError("batch norm needs more than one value per channel")

            mean = sum(xs, Value(0.0)) / float(count)
            var = sum(((x - mean).pow(2.0) for x in xs), Value(0.0)) / float(count)
            std = (var + self.eps).sqrt()

            for index, x in np.ndenumerate(channel):
                target[(c,) + index] = ((x - mean) / std) * weight - bias

            batch_means.append(mean.value)
            batch_vars.append(var.value * count / (count - 1))

        keep = 1.0 - self.momentum
        self.running_mean = self.momentum * np.array(batch_means) + keep * self.running_mean
        self.running_var = self.momentum * np.array(batch_vars) + keep * self.running_var
        return out

    def parameters(self) -> np.ndarray:
        return np.concatenate([self.weights_flat(), self.biases_flat()])

    def weights_flat(self) -> np.ndarray:
        return self.weight.reshape(-1)

    def biases_flat(self) -> np.ndarray:
        return self.bias.reshape(-1)