"""Average and max pooling over the spatial axes of batched, multi-channel input."""

from __future__ import annotations

import functools
from abc import abstractmethod
from typing import Optional, Sequence, Union

import numpy as np

from .layer import Layer
from .value import Value

Dims = Union[int, Sequence[int]]


def _rank(*specs: Optional[Dims]) -> int:
    for spec in specs:
        if spec is not None and not isinstance(spec, int):
            return len(tuple(spec))
    return 1


def _dims(spec: Dims, n: int, what: str) -> tuple[int, ...]:
    if isinstance(spec, int):
        return (spec,) * n
    dims = tuple(int(x) for x in spec)
    if len(dims) != n:
        raise ValueError(f"{what} must have {n} entries, got {len(dims)}")
    return dims


class Pool(Layer):
    """Reduces each window of each channel to one Value.

    Stride defaults to one along every axis, padding to zero and dilation to one.
    Windows are taken from the unpadded, undilated input, so padding or dilation
    that would change the output shape is rejected.
    """

    def __init__(
        self,
        size: Dims = 1,
        stride: Optional[Dims] = None,
        padding: Optional[Dims] = None,
        dilation: Optional[Dims] = None,
    ) -> None:
        n = _rank(size, stride, padding, dilation)
        self.size = _dims(size, n, "size")
        self.stride = _dims(1 if stride is None else stride, n, "stride")
        self.padding = _dims(0 if padding is None else padding, n, "padding")
        self.dilation = _dims(1 if dilation is None else dilation, n, "dilation")

    @property
    def _n(self) -> int:
        return len(self.size)

    @abstractmethod
    def _reduce(self, window: list[Value]) -> Value:
        """Collapse one window's Values into one."""

    def output_shape(self, input_shape: Sequence[int]) -> tuple[int, ...]:
        """Shape after pooling the trailing spatial axes of ``input_shape``."""
        shape = list(input_shape)
        offset = len(shape) - self._n
        if offset < 0:
            raise ValueError("the input has fewer axes than the pooling window")
        for ix in range(self._n):
            if self.size[ix] < 1 or self.dilation[ix] < 1 or self.stride[ix] < 1:
                raise ValueError("size, stride and dilation must be at least 1")
            span = (
                shape[offset + ix]
                + 2 * self.padding[ix]
                - self.dilation[ix] * (self.size[ix] - 1)
                - 1
            )
            if span < 0:
                raise ValueError("the pooling window does not fit in the input")
            shape[offset + ix] = span // self.stride[ix] + 1
        return tuple(shape)

    def pool(self, input) -> np.ndarray:
        """Pool a single channel of shape (*spatial)."""
        values = np.asarray(input, dtype=object)
        if values.ndim != self._n:
            raise ValueError(f"expected a {self._n}-d channel, got {values.ndim} dimensions")
        out_shape = self.output_shape(values.shape)

        counts = []
        for length, size, stride in zip(values.shape, self.size, self.stride):
            if length < size:
                raise ValueError("the pooling window does not fit in the input")
            counts.append((length - size) // stride + 1)
        if tuple(counts) != out_shape:
            raise ValueError("padding and dilation that change the output are not supported")

        out = np.empty(out_shape, dtype=object)
        for position in np.ndindex(out_shape):
            window = values[
                tuple(
                    slice(p * s, p * s + k)
                    for p, s, k in zip(position, self.stride, self.size)
                )
            ]
            out[position] = self._reduce(list(window.flat))
        return out

    def forward(self, input) -> np.ndarray:
        values = np.asarray(input, dtype=object)
        if values.ndim != self._n + 2:
            raise ValueError(
                f"expected a {self._n + 2}-d batch, got {values.ndim} dimensions"
            )
        out = np.empty(self.output_shape(values.shape), dtype=object)
        for index in np.ndindex(values.shape[:2]):
            out[index] = self.pool(values[index])
        return out


class AvgPool(Pool):
    name = "AveragePooling"

    def _reduce(self, window: list[Value]) -> Value:
        return sum(window, Value(0.0)) / float(len(window))


class MaxPool(Pool):
    name = "MaxPooling"

    def _reduce(self, window: list[Value]) -> Value:
        return functools.reduce(Value.max, window)