"""Train a small fully connected network on a four-sample toy problem."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from .activations import Tanh
from .criterions import Reduction, mse_loss
from .linear import Linear
from .optimizers import SGD
from .sequential import Sequential
from .tensor import tensor, to_floats, zeros

INPUTS = [
    [2.0, 3.0, -1.0],
    [3.0, -1.0, 0.5],
    [0.5, 1.0, 1.0],
    [1.0, 1.0, -1.0],
]
TARGETS = [[1.0], [-1.0], [-1.0], [1.0]]


@dataclass
class TrainingResult:
    """Loss of every epoch, the reported (epoch, loss) pairs and the last predictions."""

    losses: list[float] = field(default_factory=list)
    reports: list[tuple[int, float]] = field(default_factory=list)
    predictions: list[float] = field(default_factory=list)


def build_model() -> Sequential:
    """Three tanh-activated linear layers mapping 3 inputs to 1 output."""
    return Sequential(
        [
            Linear("fc1", 3, 4),
            Tanh(),
            Linear("fc2", 4, 4),
            Tanh(),
            Linear("fc3", 4, 1),
            Tanh(),
        ]
    )


def train(epochs: int = 20, report_every: int = 10) -> TrainingResult:
    """Fit a fresh model with SGD on summed squared error for ``epochs`` epochs."""
    if epochs < 0:
        raise ValueError("epochs cannot be negative")
    if report_every < 1:
        raise ValueError("report_every must be at least 1")

    model = build_model()
    xs = tensor(INPUTS)
    ys = tensor(TARGETS, requires_grad=False)
    ypred: np.ndarray = zeros((len(INPUTS), 1))
    optimizer = SGD(list(model.parameters()), lr=0.1, momentum=0.3)

    result = TrainingResult()
    for epoch in range(epochs):
        ypred = model.forward(xs)
        loss = mse_loss(Reduction.SUM, ypred, ys)

        optimizer.zero_grad()
        loss.backward()
        optimizer.step()

        result.losses.append(loss.value)
        if epoch % report_every == 0:
            result.reports.append((epoch, loss.value))

    result.predictions = [float(x) for x in to_floats(ypred).reshape(-1)]
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--epochs", type=int, default=20)
    parser.add_argument("--report-every", type=int, default=10)
    args = parser.parse_args(argv)

    try:
        result = train(args.epochs, args.report_every)
    except ValueError as error:
        parser.error(str(error))

    for epoch, loss in result.reports:
        print(f"[EPOCH-{epoch}] Loss: {loss!r}")
    for prediction in result.predictions:
        print(repr(prediction))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())