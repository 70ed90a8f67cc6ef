import gc
import math
import weakref

import pytest

from microtensor.value import Value


def nth_derivative(n, x, y):
    if n == 0:
        return y.value
    d = y
    for _ in range(n):
        x.zero_grad()
        d.backward()
        d = x.grad if x.grad is not None else Value(0.0)
    return d.value


def test_valid_neg():
    x = Value(3.0)
    x_neg = -x
    assert x_neg.value == -3.0
    assert x.value == 3.0


@pytest.mark.parametrize("n, expected", list(enumerate([7.0, 1.0, 0.0])))
def test_valid_add_grads(n, expected):
    x = Value(3.0)
    y = x + 4.0
    assert nth_derivative(n, x, y) == expected


def test_valid_add_assign_grads():
    x = Value(3.0)
    x += Value(4.0)
    assert x.value == 7.0


@pytest.mark.parametrize("n, expected", list(enumerate([-2.0, 1.0, 0.0])))
def test_valid_sub_grads(n, expected):
    x = Value(3.0)
    y = x - 5.0
    assert nth_derivative(n, x, y) == expected


def test_valid_sub_assign_grads():
    x = Value(3.0)
    x -= Value(13.0)
    assert x.value == -10.0


@pytest.mark.parametrize("n, expected", list(enumerate([9.0, 2.0, 0.0])))
def test_valid_mul_grads(n, expected):
    x = Value(3.0)
    y = (x * 2.0) + 3.0
    assert nth_derivative(n, x, y) == expected


def test_valid_mul_assign_grads():
    x = Value(5.0)
    x *= Value(-2.2)
    assert x.value == -11.0


@pytest.mark.parametrize(
    "n, expected", list(enumerate([7.0 / 9.0, -5.0 / 81.0, 20.0 / 729.0]))
)
def test_valid_div_grads(n, expected):
    x = Value(3.0)
    y = (x + 4.0) / ((x * 2.0) + 3.0)
    assert nth_derivative(n, x, y) == pytest.approx(expected, abs=1e-6)


def test_valid_div_assign_grads():
    x = Value(27.0)
    x /= Value(9.0)
    assert x.value == 3.0


@pytest.mark.parametrize("n, expected", list(enumerate([27.0, 27.0, 18.0, 6.0, 0.0])))
def test_valid_pow_grads(n, expected):
    x = Value(3.0)
    y = x.pow(3.0)
    assert nth_derivative(n, x, y) == pytest.approx(expected, rel=1e-12, abs=1e-12)


_REP = math.pow(math.e, 9.0)


@pytest.mark.parametrize(
    "n, expected", list(enumerate([_REP, 6.0 * _REP, 2.0 * (_REP + 18.0 * _REP)]))
)
def test_valid_exp_grads(n, expected):
    a = Value(3.0)
    b = a.pow(2.0)
    y = b.exp()
    assert nth_derivative(n, a, y) == pytest.approx(expected, rel=1e-9, abs=1e-6)


def test_valid_drop():
    a = Value(0.01)
    first = weakref.ref(a)
    for _ in range(500_000):
        a = a + a
    assert a.value == math.inf
    del a
    gc.collect()
    assert first() is None


def test_backward_through_deep_chain():
    x = Value(1.0)
    y = x
    for _ in range(20_000):
        y = y + 1.0
    y.backward()
    assert y.value == 20_001.0
    assert x.grad.value == 1.0


def test_nan_is_rejected():
    with pytest.raises(ValueError):
        Value(float("nan"))


def test_nan_result_is_rejected():
    with pytest.raises(ValueError):
        Value(-4.0).sqrt()


def test_value_setter_rejects_nan():
    x = Value(1.0)
    with pytest.raises(ValueError):
        x.value = float("nan")
    assert x.value == 1.0


def test_division_by_zero_is_infinite():
    assert (Value(1.0) / 0.0).value == math.inf
    assert (Value(-1.0) / 0.0).value == -math.inf


def test_constant_operand_gets_no_gradient():
    x = Value(3.0)
    c = Value(2.0, requires_grad=False)
    y = x * c
    y.backward()
    assert x.grad.value == 2.0
    assert c.grad.value == 0.0


def test_reflected_operators_with_numbers():
    x = Value(4.0)
    assert (1.0 + x).value == 5.0
    assert (10.0 - x).value == 6.0
    assert (3 * x).value == 12.0
    assert (8.0 / x).value == 2.0
    assert (x ** 2).value == 16.0


def test_shared_operand_gradient_accumulates():
    x = Value(3.0)
    y = x * x
    y.backward()
    assert x.grad.value == 6.0


def test_relu_value_and_grad():
    positive = Value(2.5)
    out = positive.relu()
    out.backward()
    assert out.value == 2.5
    assert positive.grad.value == 1.0

    negative = Value(-1.5)
    out = negative.relu()
    out.backward()
    assert out.value == 0.0
    assert negative.grad.value == 0.0


def test_log_and_exp_values():
    assert Value(1.0).log().value == 0.0
    assert Value(0.0).exp().value == 1.0
    assert Value(0.0).log().value == -math.inf


def test_max_returns_larger_operand():
    a = Value(1.0)
    b = Value(2.0)
    assert a.max(b) is b
    assert b.max(a) is b


def test_equality_compares_values():
    assert Value(2.0) == Value(2.0)
    assert Value(2.0) == 2.0
    assert not Value(2.0) == Value(3.0)


def test_zero_grad_clears_gradient():
    x = Value(3.0)
    (x * 2.0).backward()
    assert x.grad.value == 2.0
    x.zero_grad()
    assert x.grad is None


def test_grad_setter_accepts_numbers():
    x = Value(1.0)
    x.grad = 5.0
    assert x.grad.value == 5.0


def test_repr_shows_data_and_grad():
    x = Value(3.0)
    assert repr(x) == "Value(data=3.0, grad=None)"


def test_pow_rejects_non_numeric_exponent():
    with pytest.raises(TypeError):
        Value(2.0).pow("2")