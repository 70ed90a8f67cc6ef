"""Convolution layers over batched, multi-channel arrays of Values."""

from __future__ import annotations

from typing import ClassVar, Optional, Sequence, Union

import numpy as np

from .layer import Layer
from .tensor import zeros
from .value import Value
from .weights_init import GlorotUniform

Dims = Union[int, Sequence[int]]


def _rank(*specs: Dims) -> int:
    for spec in specs:
        if not isinstance(spec, int):
            return len(tuple(spec))
    return 1


def _dims(spec: Dims, n: int, what: str) -> tuple[int, ...]:
    if isinstance(spec, int):
        return (spec,) * n
    dims = tuple(int(x) for x in spec)
    if len(dims) != n:
        raise ValueError(f"{what} must have {n} entries, got {len(dims)}")
    return dims


def _out_size(length: int, padding: int, kernel: int, stride: int, dilation: int) -> int:
    if kernel < 1 or dilation < 1:
        raise ValueError("kernel size and dilation must be at least 1")
    if stride < 1:
        raise ValueError("stride must be at least 1")
    span = length + 2 * padding - dilation * (kernel - 1) - 1
    if span < 0:
        raise ValueError("the kernel does not fit in the padded input")
    return span // stride + 1


class Convolution(Layer):
    """Cross-correlation of a kernel bank over the spatial axes of its input.

    A single example has shape (channels, *spatial); ``forward`` takes a batch
    of them, shape (batch, channels, *spatial). Weights have shape
    (out_channels, in_channels, *kernel_size).
    """

    trainable = True
    spatial_dims: ClassVar[Optional[int]] = None

    def __init__(
        self,
        name: str,
        in_channels: int,
        out_channels: int,
        kernel_size: Dims,
        padding: Dims = 0,
        stride: Dims = 1,
        dilation: Dims = 1,
    ) -> None:
        n = self.spatial_dims or _rank(kernel_size, padding, stride, dilation)
        self.name = str(name)
        self.in_channels = in_channels
        self.out_channels = out_channels
        self.kernel_size = _dims(kernel_size, n, "kernel_size")
        self.padding = _dims(padding, n, "padding")
        self.stride = _dims(stride, n, "stride")
        self.dilation = _dims(dilation, n, "dilation")

        init = GlorotUniform()
        self.weights = np.empty((out_channels, in_channels) + self.kernel_size, dtype=object)
        for index in np.ndindex(self.weights.shape):
            self.weights[index] = init.sample(in_channels, out_channels)
        self.biases = zeros(out_channels)

    @property
    def _n(self) -> int:
        return len(self.kernel_size)

    def pad_input(self, input) -> np.ndarray:
        """Surround every spatial axis of one example with zeros on both sides."""
        values = np.asarray(input, dtype=object)
        if values.ndim != self._n + 1:
            raise ValueError(
                f"expected a {self._n + 1}-d example, got {values.ndim} dimensions"
            )
        spatial = values.shape[1:]
        shape = (values.shape[0],) + tuple(
            length + 2 * pad for length, pad in zip(spatial, self.padding)
        )
        out = zeros(shape)
        inner = tuple(slice(pad, pad + length) for length, pad in zip(spatial, self.padding))
        out[(slice(None),) + inner] = values
        return out

    def output_shape(self, input_shape: Sequence[int]) -> tuple[int, ...]:
        """Shape of the convolution of one example of ``input_shape``."""
        shape = list(input_shape)
        offset = len(shape) - self._n
        if offset < 1:
            raise ValueError("the input shape needs a channel axis before the spatial axes")
        for ix in range(self._n):
            shape[offset + ix] = _out_size(
                shape[offset + ix],
                self.padding[ix],
                self.kernel_size[ix],
                self.stride[ix],
                self.dilation[ix],
            )
        shape[0] = self.out_channels
        return tuple(shape)

    def convolve(self, input) -> np.ndarray:
        """Convolve one example of shape (in_channels, *spatial)."""
        values = np.asarray(input, dtype=object)
        if values.ndim != self._n + 1:
            raise ValueError(
                f"expected a {self._n + 1}-d example, got {values.ndim} dimensions"
            )
        if values.shape[0] != self.in_channels:
            raise ValueError(
                f"expected {self.in_channels} input channels, got {values.shape[0]}"
            )
        weights = np.asarray(self.weights, dtype=object)
        biases = np.asarray(self.biases, dtype=object).reshape(-1)
        if len(weights) != self.out_channels or len(biases) != self.out_channels:
            raise ValueError("weights and biases must match the number of output channels")

        out_shape = self.output_shape(values.shape)
        padded = self.pad_input(values)
        out = np.empty(out_shape, dtype=object)

        for o, (weight, bias) in enumerate(zip(weights, biases)):
            for position in np.ndindex(out_shape[1:]):
                window = padded[
                    (slice(None),)
                    + tuple(
                        slice(p * s, p * s + d * (k - 1) + 1, d)
                        for p, s, k, d in zip(
                            position, self.stride, self.kernel_size, self.dilation
                        )
                    )
                ]
                if window.shape != weight.shape:
                    raise ValueError(
                        f"kernel of shape {weight.shape} does not match window {window.shape}"
                    )
                total = sum((x * w for x, w in zip(window.flat, weight.flat)), Value(0.0))
                out[(o,) + position] = total + bias
        return out

    def forward(self, input) -> np.ndarray:
        values = np.asarray(input, dtype=object)
        if values.ndim != self._n + 2:
            raise ValueError(
                f"expected a {self._n + 2}-d batch, got {values.ndim} dimensions"
            )
        if values.shape[0] == 0:
            raise ValueError("cannot convolve an empty batch")
        return np.stack([self.convolve(example) for example in values])

    def weights_flat(self) -> np.ndarray:
        return np.asarray(self.weights, dtype=object).reshape(-1)

    def biases_flat(self) -> np.ndarray:
        return np.asarray(self.biases, dtype=object).reshape(-1)


class Conv1D(Convolution):
    spatial_dims = 1


class Conv2D(Convolution):
    spatial_dims = 2


class Conv3D(Convolution):
    spatial_dims = 3