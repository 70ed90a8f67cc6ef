"""Gradient-descent optimisers that update Values in place."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, Union

from .value import Value


class Optimizer(ABC):
    """Updates a list of parameter Values from their gradients.

    The learning rate is held as a Value so that a scheduler can change it.
    """

    def __init__(self, params: Iterable[Value], lr: Union[Value, float]) -> None:
        self.params = list(params)
        self.lr = lr if isinstance(lr, Value) else Value(lr, requires_grad=False)

    @abstractmethod
    def step(self) -> None:
        """Apply one update to every parameter."""

    def zero_grad(self) -> None:
        for param in self.params:
            param.zero_grad()

    def _grads(self) -> Iterator[tuple[int, Value, float]]:
        for i, param in enumerate(self.params):
            if param.grad is None:
                raise RuntimeError("Optimizer cannot step when gradient is None.")
            yield i, param, param.grad.value


class SGD(Optimizer):
    """Stochastic gradient descent with optional momentum, dampening and weight decay."""

    def __init__(
        self,
        params: Iterable[Value] = (),
        lr: Union[Value, float] = 0.01,
        momentum: float = 0.0,
        dampening: float = 0.0,
        weight_decay: float = 0.0,
        maximize: bool = False,
    ) -> None:
        super().__init__(params, lr)
        self.momentum = momentum
        self.dampening = dampening
        self.weight_decay = weight_decay
        self.maximize = maximize
        self.time_step = 0
        self.prev_gradients: list[float] = []

    def step(self) -> None:
        if not self.prev_gradients:
            self.prev_gradients = [0.0] * len(self.params)
        buffers = self.prev_gradients
        lr = self.lr.value

        for i, param, grad in self._grads():
            grad += param.value * self.weight_decay
            if self.time_step > 0:
                buffers[i] = self.momentum * buffers[i] + (1.0 - self.dampening) * grad
            else:
                buffers[i] = grad

            step = lr * buffers[i]
            param.value = param.value + step if self.maximize else param.value - step
        self.time_step += 1


class Adam(Optimizer):
    """Adam, optionally with the AMSGrad variant."""

    def __init__(
        self,
        params: Iterable[Value] = (),
        lr: Union[Value, float] = 0.001,
        betas: tuple[float, float] = (0.9, 0.999),
        eps: float = 1e-8,
        weight_decay: float = 0.0,
        amsgrad: bool = False,
        maximize: bool = False,
    ) -> None:
        super().__init__(params, lr)
        self.betas = betas
        self.eps = eps
        self.weight_decay = weight_decay
        self.amsgrad = amsgrad
        self.maximize = maximize
        self.time_step = 0
        self.exp_avgs: list[float] = []
        self.exp_avg_sqs: list[float] = []
        self.max_exp_avg_sqs: list[float] = []

    def step(self) -> None:
        n = len(self.params)
        if not self.exp_avgs:
            self.exp_avgs = [0.0] * n
            self.exp_avg_sqs = [0.0] * n
            self.max_exp_avg_sqs = [0.0] * n
        beta1, beta2 = self.betas
        t = self.time_step + 1
        bias_correction1 = 1.0 - beta1**t
        bias_correction2_sqrt = math.sqrt(1.0 - beta2**t)
        step_size = self.lr.value / bias_correction1

        for i, param, grad in self._grads():
            if self.maximize:
                grad = -grad
            grad += param.value * self.weight_decay

            self.exp_avgs[i] = beta1 * self.exp_avgs[i] + (1.0 - beta1) * grad
            self.exp_avg_sqs[i] = beta2 * self.exp_avg_sqs[i] + (1.0 - beta2) * grad**2

            if self.amsgrad:
                self.max_exp_avg_sqs[i] = max(self.max_exp_avg_sqs[i], self.exp_avg_sqs[i])
                second = self.max_exp_avg_sqs[i]
            else:
                second = self.exp_avg_sqs[i]
            denom = math.sqrt(second) / bias_correction2_sqrt + self.eps

            param.value = param.value - (self.exp_avgs[i] / denom) * step_size
        self.time_step += 1


class RMSProp(Optimizer):
    """RMSProp with optional momentum and centring."""

    def __init__(
        self,
        params: Iterable[Value] = (),
        lr: Union[Value, float] = 0.01,
        alpha: float = 0.99,
        eps: float = 1e-8,
        momentum: float = 0.0,
        weight_decay: float = 0.0,
        centered: bool = False,
        maximize: bool = False,
    ) -> None:
        super().__init__(params, lr)
        self.alpha = alpha
        self.eps = eps
        self.momentum = momentum
        self.weight_decay = weight_decay
        self.centered = centered
        self.maximize = maximize
        self.prev_gradients: list[float] = []
        self.moving_avg: list[float] = []
        self.avg_gradients: list[float] = []

    def step(self) -> None:
        n = len(self.params)
        if not self.moving_avg:
            self.prev_gradients = [0.0] * n
            self.moving_avg = [0.0] * n
            self.avg_gradients = [0.0] * n
        lr = self.lr.value

        for i, param, grad in self._grads():
            grad += param.value * self.weight_decay

            self.moving_avg[i] = self.alpha * self.moving_avg[i] + (1.0 - self.alpha) * grad**2
            current = self.moving_avg[i]
            if self.centered:
                self.avg_gradients[i] = (
                    self.alpha * self.avg_gradients[i] + (1.0 - self.alpha) * grad
                )
                current -= self.avg_gradients[i] ** 2

            self.prev_gradients[i] = self.momentum * self.prev_gradients[i] + grad / (
                math.sqrt(current) + self.eps
            )
            step = lr * self.prev_gradients[i]
            param.value = param.value + step if self.maximize else param.value - step