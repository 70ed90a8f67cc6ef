import numpy as np
import pytest

from microtensor.layer import Layer
from microtensor.tensor import tensor, to_floats


class _Scaled(Layer):
    name = "scaled"
    trainable = True

    def __init__(self, weights, biases):
        self.weights = tensor(weights)
        self.biases = tensor(biases)

    def forward(self, input):
        return input

    def weights_flat(self):
        return self.weights.reshape(-1)

    def biases_flat(self):
        return self.biases.reshape(-1)


class _Plain(Layer):
    name = "plain"

    def forward(self, input):
        return input


def test_parameters_are_weights_then_biases():
    layer = _Scaled([[1.5, 2.5], [3.5, 4.5]], [7.0, 8.0])
    assert list(to_floats(layer.parameters())) == [1.5, 2.5, 3.5, 4.5, 7.0, 8.0]


def test_parameters_share_the_layer_values():
    layer = _Scaled([[1.5, 2.5]], [7.0])
    params = layer.parameters()
    assert to_floats(params).tolist() == [1.5, 2.5, 7.0]
    assert params[0] is layer.weights[0, 0]
    assert params[-1] is layer.biases[0]


def test_layer_without_parameters_has_none():
    layer = _Plain()
    assert to_floats(layer.parameters()).tolist() == []
    assert layer.trainable is False


def test_set_weights_and_biases():
    layer = _Scaled([[1.5, 2.5], [3.5, 4.5]], [7.0, 8.0])
    layer.set_weights([9.0, 10.0, 11.0, 12.0])
    layer.set_biases([-1.0, -2.0])
    assert to_floats(layer.weights).tolist() == [[9.0, 10.0], [11.0, 12.0]]
    assert to_floats(layer.biases).tolist() == [-1.0, -2.0]


def test_set_weights_with_short_list_changes_prefix_only():
    layer = _Scaled([[1.5, 2.5], [3.5, 4.5]], [7.0])
    layer.set_weights([9.0])
    assert to_floats(layer.weights).tolist() == [[9.0, 2.5], [3.5, 4.5]]


def test_call_runs_forward():
    layer = _Plain()
    data = tensor([1.5, 2.5])
    assert layer(data) is data


def test_forward_is_required():
    class Incomplete(Layer):
        name = "incomplete"

    with pytest.raises(TypeError):
        Layer()
    with pytest.raises(TypeError):
        Incomplete()


def test_set_weights_rejects_nan():
    layer = _Scaled([[1.5]], [7.0])
    with pytest.raises(ValueError):
        layer.set_weights([float("nan")])
    assert np.array_equal(to_floats(layer.weights), [[1.5]])