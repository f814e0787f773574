"""Activation utilities for backpropnet."""

from __future__ import annotations

import numpy as np

from .types import Array


def logistic(x: Array) -> Array:
    """Return the logistic squashing ``1 / (1 + exp(-x))``."""

    x = np.asarray(x, dtype=np.float32)
    return (1.0 / (1.0 + np.exp(-x))).astype(np.float32)


def logistic_deriv(y: Array) -> Array:
    """Derivative of the logistic function given its output ``y``."""

    y = np.asarray(y, dtype=np.float32)
    return y * (1.0 - y)
