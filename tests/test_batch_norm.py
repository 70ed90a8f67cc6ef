import numpy as np
import pytest

from microtensor.batch_norm import BatchNorm
from microtensor.tensor import tensor, to_floats


def _ranged(count, shape):
    return tensor(np.arange(1.0, count + 1.0).reshape(shape))


def test_valid_1d_batch_norm():
    bn = BatchNorm("bn", 2)
    outputs = to_floats(bn.forward(tensor([[[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]]))).ravel()
    actuals = [-1.2247356, 0.0, 1.2247356, -1.2247357, 0.0, 1.2247355]
    assert outputs == pytest.approx(actuals, abs=1e-6)


def test_valid_2d_batch_norm():
    bn = BatchNorm("bn", 2)
    outputs = to_floats(bn.forward(_ranged(12, (1, 2, 2, 3)))).ravel()
    half = [-1.46384759, -0.87830855, -0.29276951, 0.292769519, 0.878308559, 1.463847599]
    assert outputs == pytest.approx(half + half, abs=1e-6)


def test_valid_3d_batch_norm():
    bn = BatchNorm("bn", 1)
    outputs = to_floats(bn.forward(_ranged(8, (1, 1, 2, 2, 2)))).ravel()
    actuals = [
        -1.52752388, -1.09108853, -0.65465307, -0.21821773,
        0.21821764, 0.65465301, 1.09108841, 1.52752376,
    ]
    assert outputs == pytest.approx(actuals, abs=1e-6)


def test_output_keeps_input_shape():
    bn = BatchNorm("bn", 2)
    assert bn.forward(_ranged(12, (1, 2, 2, 3))).shape == (1, 2, 2, 3)


def test_1d_running_statistics():
    bn = BatchNorm("bn", 2)
    bn.forward(tensor([[[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]]))
    stats = list(bn.running_mean) + list(bn.running_var)
    assert stats == pytest.approx([0.2, 0.5, 1.0, 1.0], abs=1e-2)


def test_2d_running_statistics():
    bn = BatchNorm("bn", 2)
    bn.forward(_ranged(12, (1, 2, 2, 3)))
    stats = list(bn.running_mean) + list(bn.running_var)
    assert stats == pytest.approx([0.35, 0.95, 1.25, 1.25], abs=1e-2)


def test_3d_running_statistics():
    bn = BatchNorm("bn", 1)
    bn.forward(_ranged(8, (1, 1, 2, 2, 2)))
    stats = list(bn.running_mean) + list(bn.running_var)
    assert stats == pytest.approx([0.45, 1.5], abs=1e-2)


def test_parameters_are_weights_then_biases():
    bn = BatchNorm("bn", 3)
    params = [v.value for v in bn.parameters()]
    assert params == [1.0, 1.0, 1.0, 0.0, 0.0, 0.0]
    assert bn.weights_flat()[0] is bn.weight[0]


def test_wrong_feature_count_raises():
    bn = BatchNorm("bn", 3)
    with pytest.raises(ValueError):
        bn.forward(_ranged(12, (1, 2, 2, 3)))


def test_single_value_per_channel_raises():
    bn = BatchNorm("bn", 2)
    with pytest.raises(ValueError):
        bn.forward(tensor([[1.0, 2.0]]))


def test_gradients_flow_to_weight():
    bn = BatchNorm("bn", 1)
    out = bn.forward(tensor([[[1.0, 3.0]]]))
    out[0, 0, 1].backward()
    assert bn.weight[0].grad.value == pytest.approx(1.0, abs=1e-4)