"""Arrays of Values and the products defined between them."""

from __future__ import annotations

from typing import Iterable, Sequence, Union

import numpy as np

from .value import Value

Shape = Union[int, Sequence[int]]


def _from_values(items: Sequence[Value], shape: Shape) -> np.ndarray:
    out = np.empty(len(items), dtype=object)
    out[:] = list(items)
    return out.reshape(shape)


def tensor(data, requires_grad: bool = True) -> np.ndarray:
    """Build an object array of Values from nested numbers."""
    numbers = np.asarray(data, dtype=float)
    out = np.empty(numbers.shape, dtype=object)
    for index, x in np.ndenumerate(numbers):
        out[index] = Value(float(x), requires_grad=requires_grad)
    return out


def scalar(x, requires_grad: bool = True) -> np.ndarray:
    """Build a zero-dimensional array holding one Value."""
    if np.ndim(x) != 0:
        raise ValueError("scalar expects a single number")
    return tensor(x, requires_grad=requires_grad)


def zeros(shape: Shape) -> np.ndarray:
    """An array of the given shape filled with fresh zero Values."""
    out = np.empty(shape, dtype=object)
    for index in np.ndindex(out.shape):
        out[index] = Value(0.0)
    return out


def to_floats(t) -> np.ndarray:
    """The plain float contents of an array of Values, with the same shape."""
    values = np.asarray(t, dtype=object)
    return np.fromiter(
        (v.value for v in values.flat), dtype=float, count=values.size
    ).reshape(values.shape)


def _sum(values: Iterable[Value]) -> Value:
    return sum(values, Value(0.0))


def dot(a, b):
    """Product of 1-d and 2-d Value arrays.

    Vector by vector gives a Value; vector by matrix and matrix by matrix follow
    matrix multiplication; a single-column matrix by a vector is their outer product.
    """
    a = np.asarray(a, dtype=object)
    b = np.asarray(b, dtype=object)

    if a.ndim == 1 and b.ndim == 1:
        if a.shape != b.shape:
            raise ValueError("Could not multiply")
        return _sum(x * y for x, y in zip(a, b))

    if a.ndim == 1 and b.ndim == 2:
        if a.shape[0] != b.shape[0]:
            raise ValueError("Could not multiply")
        return _from_values([dot(a, column) for column in b.T], (b.shape[1],))

    if a.ndim == 2 and b.ndim == 2:
        (m, k), (k2, n) = a.shape, b.shape
        if k != k2:
            raise ValueError("Could not multiply")
        return _from_values([dot(row, column) for row in a for column in b.T], (m, n))

    if a.ndim == 2 and b.ndim == 1:
        m, k = a.shape
        if k != 1:
            raise ValueError("Could not multiply")
        return _from_values([elem * row[0] for row in a for elem in b], (m, b.shape[0]))

    raise ValueError(f"dot is not defined for {a.ndim}-d and {b.ndim}-d tensors")