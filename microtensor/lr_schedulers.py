"""Learning-rate schedules and the scheduler that applies them to an optimiser."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, ClassVar

from .optimizers import Optimizer


class Schedule(ABC):
    """Rule for changing a learning rate from one epoch to the next.

    Schedules with a closed form can also compute the rate for any epoch
    directly from the base rate.
    """

    has_closed_form: ClassVar[bool] = True

    @abstractmethod
    def get_lr(self, lr: float, last_epoch: int) -> float:
        """The rate for ``last_epoch`` given the rate of the epoch before."""

    def get_closed_form_lr(self, base_lr: float, last_epoch: int) -> float:
        """The rate for ``last_epoch`` computed from the base rate alone."""
        return 0.0


@dataclass
class ConstantLR(Schedule):
    """Scales the rate by ``factor`` until ``total_iters`` epochs have passed."""

    total_iters: int = 5
    factor: float = 1.0 / 3.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.factor <= 1.0:
            raise ValueError("Constant factor expected to be between 0.0 and 1.0")

    def get_lr(self, lr: float, last_epoch: int) -> float:
        if last_epoch == 0:
            return lr * self.factor
        if last_epoch == self.total_iters:
            return lr * (1.0 / self.factor if self.factor else math.inf)
        return lr

    def get_closed_form_lr(self, base_lr: float, last_epoch: int) -> float:
        one_or_zero = 1.0 if last_epoch >= self.total_iters else 0.0
        return base_lr * (self.factor + one_or_zero * (1.0 - self.factor))


@dataclass
class CosineAnnealingLR(Schedule):
    """Follows a cosine between ``base_lr`` and ``eta_min`` with half-period ``t_max``."""

    base_lr: float = 0.05
    t_max: int = 5
    eta_min: float = 0.0

    def get_lr(self, lr: float, last_epoch: int) -> float:
        if last_epoch == 0:
            return lr

        t_max = self.t_max
        lr_range = self.base_lr - self.eta_min
        wavelen_percent = math.pi * last_epoch / t_max

        if last_epoch == 1:
            return self.eta_min + lr_range * (1.0 + math.cos(wavelen_percent)) / 2.0
        if (last_epoch - 1 - t_max) % (2 * t_max) == 0:
            wavelen_step = math.pi / t_max
            return lr + lr_range * (1.0 - math.cos(wavelen_step)) / 2.0

        offset_wavelen_percent = math.pi * (last_epoch - 1) / t_max
        cos_annealing = (1.0 + math.cos(wavelen_percent)) / (
            1.0 + math.cos(offset_wavelen_percent)
        )
        return self.eta_min + cos_annealing * (lr - self.eta_min)

    def get_closed_form_lr(self, base_lr: float, last_epoch: int) -> float:
        lr_range = base_lr - self.eta_min
        wavelen_percent = math.pi * last_epoch / self.t_max
        return self.eta_min + lr_range * (1.0 + math.cos(wavelen_percent)) / 2.0


@dataclass
class ExponentialLR(Schedule):
    """Multiplies the rate by ``gamma`` every epoch."""

    gamma: float

    def get_lr(self, lr: float, last_epoch: int) -> float:
        return lr if last_epoch == 0 else lr * self.gamma

    def get_closed_form_lr(self, base_lr: float, last_epoch: int) -> float:
        return base_lr * self.gamma**last_epoch


@dataclass
class LambdaLR(Schedule):
    """Sets the rate to ``base_lr`` times ``lr_lambda(epoch)``."""

    has_closed_form: ClassVar[bool] = False

    base_lr: float
    lr_lambda: Callable[[int], float]

    def get_lr(self, lr: float, last_epoch: int) -> float:
        return self.base_lr * self.lr_lambda(last_epoch)


@dataclass
class LinearLR(Schedule):
    """Moves the rate factor linearly from ``start_factor`` to ``end_factor``."""

    total_iters: int = 5
    start_factor: float = 1.0 / 3.0
    end_factor: float = 1.0

    def __post_init__(self) -> None:
        if self.start_factor <= 0.0 or self.start_factor > 1.0:
            raise ValueError(
                "Starting factor expected to be greater than 0.0 and less or equal to 1.0"
            )
        if not 0.0 <= self.end_factor <= 1.0:
            raise ValueError("Ending factor expected to be between 0.0 and 1.0")

    def get_lr(self, lr: float, last_epoch: int) -> float:
        if last_epoch == 0:
            return lr * self.start_factor
        if last_epoch > self.total_iters:
            return lr
        factor_range = self.end_factor - self.start_factor
        denominator = self.start_factor * self.total_iters + factor_range * (last_epoch - 1)
        return lr * (1.0 + factor_range / denominator)

    def get_closed_form_lr(self, base_lr: float, last_epoch: int) -> float:
        factor_range = self.end_factor - self.start_factor
        percent_iters = min(last_epoch, self.total_iters) / self.total_iters
        return base_lr * (self.start_factor + factor_range * percent_iters)


@dataclass
class MultiplicativeLR(Schedule):
    """Multiplies the rate by ``lr_lambda(epoch)`` every epoch after the first."""

    has_closed_form: ClassVar[bool] = False

    lr_lambda: Callable[[int], float]

    def get_lr(self, lr: float, last_epoch: int) -> float:
        return lr * self.lr_lambda(last_epoch) if last_epoch > 0 else lr


@dataclass
class MultiStepLR(Schedule):
    """Multiplies the rate by ``gamma`` at each milestone epoch."""

    milestones: list[int] = field(default_factory=list)
    gamma: float = 0.1

    def get_lr(self, lr: float, last_epoch: int) -> float:
        occurrences = self.milestones.count(last_epoch)
        return lr * self.gamma**occurrences if occurrences else lr

    def get_closed_form_lr(self, base_lr: float, last_epoch: int) -> float:
        power = sum(1 for milestone in self.milestones if milestone <= last_epoch)
        return base_lr * self.gamma**power


@dataclass
class PolynomialLR(Schedule):
    """Decays the rate polynomially to zero over ``total_iters`` epochs."""

    total_iters: int = 5
    power: int = 1

    def get_lr(self, lr: float, last_epoch: int) -> float:
        if last_epoch == 0 or last_epoch > self.total_iters:
            return lr
        total = float(self.total_iters)
        base = (1.0 - last_epoch / total) / (1.0 - (last_epoch - 1.0) / total)
        return lr * base**self.power

    def get_closed_form_lr(self, base_lr: float, last_epoch: int) -> float:
        percent_iters = min(last_epoch, self.total_iters) / self.total_iters
        return base_lr * (1.0 - percent_iters) ** self.power


@dataclass
class StepLR(Schedule):
    """Multiplies the rate by ``gamma`` every ``step_size`` epochs."""

    step_size: int = 5
    gamma: float = 0.1

    def get_lr(self, lr: float, last_epoch: int) -> float:
        if last_epoch == 0 or last_epoch % self.step_size != 0:
            return lr
        return lr * self.gamma

    def get_closed_form_lr(self, base_lr: float, last_epoch: int) -> float:
        return base_lr * self.gamma ** (last_epoch // self.step_size)


class LRScheduler:
    """Drives an optimiser's learning rate according to a schedule.

    The rate is changed in place on the optimiser, and the first step is
    taken on construction.
    """

    def __init__(self, optimizer: Optimizer, schedule: Schedule) -> None:
        self._lr = optimizer.lr
        self.schedule = schedule
        self.base_lr = self._lr.value
        self.last_epoch = 0
        self.step()

    @property
    def lr(self) -> float:
        return self._lr.value

    def step(self) -> None:
        """Advance one epoch from the current rate."""
        self._lr.value = self.schedule.get_lr(self._lr.value, self.last_epoch)
        self.last_epoch += 1

    def step_with(self, epoch: int) -> None:
        """Jump to ``epoch``, using the closed form when the schedule has one."""
        if self.schedule.has_closed_form:
            new_lr = self.schedule.get_closed_form_lr(self.base_lr, epoch)
        else:
            new_lr = self.schedule.get_lr(self._lr.value, epoch)
        self._lr.value = new_lr
        self.last_epoch = epoch