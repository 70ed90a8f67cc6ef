"""Loss functions over arrays of Values."""

from __future__ import annotations

import enum
from typing import Iterable

import numpy as np

from .activations import Softmax
from .value import Value


class Reduction(enum.Enum):
    MEAN = "mean"
    SUM = "sum"


def _total(values: Iterable[Value]) -> Value:
    return sum(values, Value(0.0))


def reduce(reduction: Reduction, loss) -> Value:
    """Collapse per-element losses to one Value by summing or averaging."""
    losses = np.asarray(loss, dtype=object)
    total = _total(losses.flat)
    if reduction is Reduction.MEAN:
        return total / float(losses.size)
    if reduction is Reduction.SUM:
        return total
    raise ValueError(f"unknown reduction {reduction!r}")


def mse_loss(reduction: Reduction, predicted, target) -> Value:
    """Squared error between two arrays of the same shape, then reduced."""
    predicted = np.asarray(predicted, dtype=object)
    target = np.asarray(target, dtype=object)
    if predicted.shape != target.shape:
        raise ValueError(
            f"predicted shape {predicted.shape} does not match target shape {target.shape}"
        )
    squared = np.empty(predicted.shape, dtype=object)
    for index, pred in np.ndenumerate(predicted):
        squared[index] = (pred - target[index]).pow(2.0)
    return reduce(reduction, squared)


def _with_class_probabilities(probabilities: np.ndarray, classes: np.ndarray) -> np.ndarray:
    batch_shape = classes.shape[:-1]
    out = np.empty(batch_shape + (1,), dtype=object)
    for index in np.ndindex(batch_shape):
        out[index + (0,)] = _total(
            -(p.log()) * c for p, c in zip(probabilities[index], classes[index])
        )
    return out


def _class_index(value: Value, classes: int) -> int:
    index = max(int(value.value), 0)
    if index >= classes:
        raise IndexError(f"class index {index} is out of range for {classes} classes")
    return index


def _with_class_indices(probabilities: np.ndarray, indices: np.ndarray) -> np.ndarray:
    classes = probabilities.shape[-1]
    out = np.empty(indices.shape, dtype=object)
    for index in np.ndindex(indices.shape):
        row = probabilities[index]
        out[index] = -(row[_class_index(indices[index], classes)].log())
    return out


def cross_entropy_loss(reduction: Reduction, predicted, target) -> Value:
    """Cross entropy of logits against class indices or class probabilities.

    Classes run along the last axis of ``predicted`` (1 to 3 dimensions). A target
    with one dimension fewer holds class indices; one of the same shape holds
    class probabilities.
    """
    predicted = np.asarray(predicted, dtype=object)
    target = np.asarray(target, dtype=object)
    n = predicted.ndim
    if not 1 <= n <= 3:
        raise ValueError(f"cross entropy expects 1 to 3 dimensions, got {n}")

    probabilities = Softmax(n - 1).forward(predicted)
    if target.ndim == n:
        if target.shape != predicted.shape:
            raise ValueError("class probabilities must have the shape of the prediction")
        losses = _with_class_probabilities(probabilities, target)
    elif target.ndim == n - 1:
        if target.shape != predicted.shape[:-1]:
            raise ValueError("class indices must match the prediction's batch shape")
        losses = _with_class_indices(probabilities, target)
    else:
        raise ValueError(
            f"target of {target.ndim} dimensions does not fit a {n}-d prediction"
        )
    return reduce(reduction, losses)