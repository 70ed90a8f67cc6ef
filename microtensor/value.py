"""Scalar values that record how they were computed and can differentiate through it."""

from __future__ import annotations

import enum
import math
import operator
from numbers import Real
from typing import Callable, Optional, Union

Number = Union[int, float]


class _Op(enum.Enum):
    NONE = enum.auto()
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    POW = enum.auto()
    EXP = enum.auto()
    LOG = enum.auto()
    RELU = enum.auto()


def _checked(x: Number) -> float:
    x = float(x)
    if math.isnan(x):
        raise ValueError("Value cannot be NaN")
    return x


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def _div(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _powf(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except ValueError:
        if base == 0:
            negative = math.copysign(1.0, base) < 0 and _is_odd_integer(exponent)
            return -math.inf if negative else math.inf
        return math.nan
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf


def _exp(x: float) -> float:
    return _powf(math.e, x)


def _log(x: float) -> float:
    if x == 0:
        return -math.inf
    if x < 0:
        return math.nan
    return math.log(x)


_BINARY: dict[_Op, Callable[[float, float], float]] = {
    _Op.ADD: operator.add,
    _Op.SUB: operator.sub,
    _Op.MUL: operator.mul,
    _Op.DIV: _div,
    _Op.POW: _powf,
}


def _as_operand(x: object) -> Optional["Value"]:
    """Return x as a Value; plain numbers become constants that take no gradient."""
    if isinstance(x, Value):
        return x
    if isinstance(x, Real):
        return Value(float(x), requires_grad=False)
    return None


class Value:
    """A float that remembers the operation producing it, for reverse-mode differentiation.

    Gradients are themselves Values, so derivatives of any order can be taken by
    calling ``backward`` on a gradient.
    """

    __slots__ = ("_data", "_grad", "_op", "_operands", "_back_pass", "requires_grad", "__weakref__")

    def __init__(self, value: Number, requires_grad: bool = True) -> None:
        self._data = _checked(value)
        self._grad: Optional[Value] = None
        self._op = _Op.NONE
        self._operands: tuple[Value, ...] = ()
        self._back_pass = False
        self.requires_grad = requires_grad

    @classmethod
    def _from_op(cls, value: float, op: _Op, *operands: "Value") -> "Value":
        result = cls(value)
        result._op = op
        result._operands = operands
        return result

    @classmethod
    def _binary(cls, op: _Op, lhs: "Value", rhs: "Value") -> "Value":
        return cls._from_op(_BINARY[op](lhs._data, rhs._data), op, lhs, rhs)

    @property
    def value(self) -> float:
        return self._data

    @value.setter
    def value(self, new_value: Number) -> None:
        self._data = _checked(new_value)

    @property
    def grad(self) -> Optional["Value"]:
        return self._grad

    @grad.setter
    def grad(self, new_grad: Union["Value", Number, None]) -> None:
        if new_grad is None or isinstance(new_grad, Value):
            self._grad = new_grad
        else:
            self._grad = Value(new_grad)

    def zero_grad(self) -> None:
        """Forget the gradient accumulated by earlier backward passes."""
        self._grad = None
        self._back_pass = False

    def pow(self, exponent: Union["Value", Number]) -> "Value":
        """Raise to a power; a plain-number exponent is a constant."""
        operand = _as_operand(exponent)
        if operand is None:
            raise TypeError(f"cannot raise a Value to {type(exponent).__name__}")
        return Value._binary(_Op.POW, self, operand)

    def sqrt(self) -> "Value":
        return self.pow(0.5)

    def exp(self) -> "Value":
        return Value._from_op(_exp(self._data), _Op.EXP, self)

    def log(self) -> "Value":
        return Value._from_op(_log(self._data), _Op.LOG, self)

    def relu(self) -> "Value":
        return Value._from_op(max(self._data, 0.0), _Op.RELU, self)

    def max(self, other: "Value") -> "Value":
        """Return whichever of the two Values is larger, itself and not a copy."""
        return self if self._data > other._data else other

    def backward(self) -> None:
        """Fill in the gradient of this Value for every Value it was computed from."""
        order = self._topo_sort()
        self._grad = Value(1.0)
        for node in reversed(order):
            node._back_pass = False
            node._propagate()

    def _enter(self) -> None:
        self._back_pass = True
        self._grad = Value(0.0)

    def _topo_sort(self) -> list["Value"]:
        order: list[Value] = []
        self._enter()
        stack = [(self, iter(self._operands))]
        while stack:
            node, operands = stack[-1]
            for operand in operands:
                if not operand._back_pass:
                    operand._enter()
                    stack.append((operand, iter(operand._operands)))
                    break
            else:
                stack.pop()
                order.append(node)
        return order

    def _accumulate(self, delta: "Value") -> None:
        current = self._grad if self._grad is not None else Value(0.0)
        self._grad = current + delta

    def _propagate(self) -> None:
        grad = self._grad
        if grad is None:
            raise RuntimeError("Cannot backpropagate when gradient is None")

        op = self._op
        if op is _Op.NONE:
            return

        if op is _Op.ADD:
            lhs, rhs = self._operands
            if lhs.requires_grad:
                lhs._accumulate(grad)
            if rhs.requires_grad:
                rhs._accumulate(grad)
        elif op is _Op.SUB:
            lhs, rhs = self._operands
            if lhs.requires_grad:
                lhs._accumulate(grad)
            if rhs.requires_grad:
                rhs._accumulate(-grad)
        elif op is _Op.MUL:
            lhs, rhs = self._operands
            if lhs.requires_grad:
                lhs._accumulate(grad * rhs)
            if rhs.requires_grad:
                rhs._accumulate(grad * lhs)
        elif op is _Op.DIV:
            numer, denom = self._operands
            if numer.requires_grad:
                numer._accumulate(grad / denom)
            if denom.requires_grad:
                derivative = -(numer / denom.pow(2.0))
                denom._accumulate(grad * derivative)
        elif op is _Op.POW:
            variable, exponent = self._operands
            if variable.requires_grad:
                wrt_variable = variable.pow(exponent - 1.0) * exponent
                variable._accumulate(grad * wrt_variable)
            if exponent.requires_grad:
                wrt_exponent = variable.log() * variable.pow(exponent)
                exponent._accumulate(grad * wrt_exponent)
        elif op is _Op.EXP:
            (operand,) = self._operands
            if operand.requires_grad:
                operand._accumulate(grad * self)
        elif op is _Op.LOG:
            (operand,) = self._operands
            if operand.requires_grad:
                operand._accumulate(grad / self)
        elif op is _Op.RELU:
            (operand,) = self._operands
            if operand.requires_grad:
                operand._accumulate(grad * (1.0 if self._data > 0 else 0.0))

    def __add__(self, other: object) -> "Value":
        rhs = _as_operand(other)
        if rhs is None:
            return NotImplemented
        return Value._binary(_Op.ADD, self, rhs)

    def __radd__(self, other: object) -> "Value":
        lhs = _as_operand(other)
        if lhs is None:
            return NotImplemented
        return Value._binary(_Op.ADD, lhs, self)

    def __sub__(self, other: object) -> "Value":
        rhs = _as_operand(other)
        if rhs is None:
            return NotImplemented
        return Value._binary(_Op.SUB, self, rhs)

    def __rsub__(self, other: object) -> "Value":
        lhs = _as_operand(other)
        if lhs is None:
            return NotImplemented
        return Value._binary(_Op.SUB, lhs, self)

    def __mul__(self, other: object) -> "Value":
        rhs = _as_operand(other)
        if rhs is None:
            return NotImplemented
        return Value._binary(_Op.MUL, self, rhs)

    def __rmul__(self, other: object) -> "Value":
        lhs = _as_operand(other)
        if lhs is None:
            return NotImplemented
        return Value._binary(_Op.MUL, lhs, self)

    def __truediv__(self, other: object) -> "Value":
        rhs = _as_operand(other)
        if rhs is None:
            return NotImplemented
        return Value._binary(_Op.DIV, self, rhs)

    def __rtruediv__(self, other: object) -> "Value":
        lhs = _as_operand(other)
        if lhs is None:
            return NotImplemented
        return Value._binary(_Op.DIV, lhs, self)

    def __pow__(self, exponent: object) -> "Value":
        if _as_operand(exponent) is None:
            return NotImplemented
        return self.pow(exponent)  # type: ignore[arg-type]

    def __neg__(self) -> "Value":
        return Value(0.0) - self

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Value):
            return self._data == other._data
        if isinstance(other, Real):
            return self._data == float(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __float__(self) -> float:
        return self._data

    def __repr__(self) -> str:
        return f"Value(data={self._data}, grad={self._grad!r})"