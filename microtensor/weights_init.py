"""Random initialisers for layer weights."""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from typing import Optional

from .value import Value


def _positive(denominator: float) -> float:
    if denominator <= 0:
        raise ValueError("fan sizes must be positive")
    return denominator


class WeightInit(ABC):
    """Draws single weights from a distribution scaled by a layer's fan-in and fan-out."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def sample(self, fan_in: int, fan_out: Optional[int] = None) -> Value:
        """Draw one weight; ``fan_out`` defaults to ``fan_in``."""
        if fan_out is None:
            fan_out = fan_in
        return Value(self._draw(fan_in, fan_out))

    @abstractmethod
    def _draw(self, fan_in: int, fan_out: int) -> float:
        """Draw a raw float for the given fans."""

    def _uniform(self, limit: float) -> float:
        return self._rng.uniform(-limit, limit)

    def _normal(self, stdev: float) -> float:
        return self._rng.gauss(0.0, stdev)


class GlorotNormal(WeightInit):
    def _draw(self, fan_in: int, fan_out: int) -> float:
        return self._normal(math.sqrt(2.0 / _positive(fan_in + fan_out)))


class GlorotUniform(WeightInit):
    def _draw(self, fan_in: int, fan_out: int) -> float:
        return self._uniform(math.sqrt(6.0 / _positive(fan_in + fan_out)))


class HeNormal(WeightInit):
    def _draw(self, fan_in: int, fan_out: int) -> float:
        return self._normal(math.sqrt(2.0 / _positive(fan_in)))


class HeUniform(WeightInit):
    def _draw(self, fan_in: int, fan_out: int) -> float:
        return self._uniform(math.sqrt(6.0 / _positive(fan_in)))


class LecunNormal(WeightInit):
    def _draw(self, fan_in: int, fan_out: int) -> float:
        return self._normal(math.sqrt(1.0 / _positive(fan_in)))


class LecunUniform(WeightInit):
    def _draw(self, fan_in: int, fan_out: int) -> float:
        return self._uniform(math.sqrt(3.0 / _positive(fan_in)))