"""Scalar autograd engine with tensors, layers, losses, optimizers and schedules."""

__version__ = "0.1.0"