# microtensor

microtensor is a small automatic-differentiation engine. It is built on scalar
`Value` nodes. On top of them it provides numpy object arrays of those nodes as
tensors, neural-network layers, loss functions, optimizers and learning-rate
schedules.

Every number you compute with is a `Value`. Calling `backward()` on a result
fills in the gradient of every `Value` that led to it.

## Installation

```
pip install .
```

To install with the test dependencies:

```
pip install ".[test]"
```

## Scalars and gradients

```python
from microtensor.value import Value

x = Value(3.0)
y = (x * 2.0 + 3.0) ** 2
y.backward()
print(y)          # Value(data=81.0, grad=...)
print(x.grad)     # gradient of y with respect to x, itself a Value
```

Plain numbers mixed into arithmetic become constants that take no gradient.
Gradients are `Value` nodes themselves, so you can call `backward()` on a
gradient to get higher-order derivatives. `Value` also offers `pow`, `sqrt`,
`exp`, `log`, `relu`, `max` and `zero_grad`. A `Value` cannot hold NaN; trying
to create one raises `ValueError`.

## Tensors

`microtensor.tensor` works with numpy object arrays of `Value`:

- `tensor(data, requires_grad=True)` builds one from nested numbers.
- `scalar(x)` builds a zero-dimensional one.
- `zeros(shape)` fills a shape with fresh zero Values.
- `to_floats(t)` returns the plain float contents.
- `dot(a, b)` multiplies 1-d and 2-d arrays.

```python
from microtensor.tensor import tensor, to_floats, dot

a = tensor([[1.0, 2.0], [3.0, 4.0]])
b = tensor([[0.5], [-1.0]], requires_grad=False)
print(to_floats(dot(a, b)))
```

## Building and training a model

The available pieces are:

- Layers (all subclasses of `microtensor.layer.Layer`):
  - `Linear` in `microtensor.linear`.
  - `Conv1D`, `Conv2D` and `Conv3D` in `microtensor.convolution`.
  - `AvgPool` and `MaxPool` in `microtensor.pooling`.
  - `BatchNorm` in `microtensor.batch_norm`.
- Activations in `microtensor.activations`: `ReLU`, `Sigmoid`, `Tanh` and
  `Softmax(dim)`.
- Containers: `Sequential` in `microtensor.sequential`. Its `state_dict()` maps
  `"<layer>.weight"` and `"<layer>.bias"` to float lists. `save_state_dict` and
  `load_state_dict` write and read that dict with `pickle`.
- Losses in `microtensor.criterions`: `mse_loss` and `cross_entropy_loss`, each
  taking `Reduction.MEAN` or `Reduction.SUM`. Cross entropy accepts either class
  indices or class probabilities as the target.
- Optimizers in `microtensor.optimizers`: `SGD`, `Adam` and `RMSProp`.
- Schedules in `microtensor.lr_schedulers`. `LRScheduler` drives `ConstantLR`,
  `CosineAnnealingLR`, `ExponentialLR`, `LambdaLR`, `LinearLR`,
  `MultiplicativeLR`, `MultiStepLR`, `PolynomialLR` and `StepLR`. It changes
  the optimizer's learning rate in place through `step()` or `step_with(epoch)`.

```python
from microtensor.activations import Tanh
from microtensor.criterions import Reduction, mse_loss
from microtensor.linear import Linear
from microtensor.optimizers import SGD
from microtensor.sequential import Sequential
from microtensor.tensor import tensor

model = Sequential([Linear("fc1", 3, 4), Tanh(), Linear("fc2", 4, 1), Tanh()])
xs = tensor([[2.0, 3.0, -1.0], [3.0, -1.0, 0.5]])
ys = tensor([[1.0], [-1.0]], requires_grad=False)

optimizer = SGD(model.parameters(), lr=0.1, momentum=0.3)
for epoch in range(20):
    loss = mse_loss(Reduction.SUM, model.forward(xs), ys)
    optimizer.zero_grad()
    loss.backward()
    optimizer.step()

model.save_state_dict("model.pickle")
```

## Demo

The `microtensor-train` command trains a small feed-forward network on a
four-sample toy data set. It prints the loss every few epochs and then the
final predictions:

```
microtensor-train --epochs 20 --report-every 10
```

The same run is available from Python through `microtensor.train.train()`. It
returns the losses, the reported losses and the predictions.

## Limitations

- Every element is a Python `Value` object, so computation is slow. The package
  is meant for learning and small experiments, not real workloads.
- Pooling layers take their windows from the input as given. A padding or
  dilation setting that would change the output shape is rejected with
  `ValueError`.
- State dicts are plain pickled dicts of float lists. No other model file
  formats can be read.

## Running the tests

```
pytest
```