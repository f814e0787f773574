"""Scalar and vector helpers shared by the network engine."""

from __future__ import annotations

import math

import numpy as np

from .types import Array


def row_sum_prod(matrix: Array, vector: Array, size: int | None = None) -> Array:
    """Combine ``matrix`` and ``vector`` with the row-sum-then-scale rule.

    ``out[k] = sum(matrix[k, :]) * vector[k]``. This is not a matrix-vector
    product: every row collapses to one scalar which is then scaled by the
    vector entry in the same position. Positions without both a row and a
    vector entry are left at 0.0. ``size`` fixes the output length and
    defaults to ``min(rows, len(vector))``.
    """

    matrix = np.asarray(matrix, dtype=np.float32)
    vector = np.asarray(vector, dtype=np.float32)
    sums = matrix.sum(axis=1, dtype=np.float32)
    paired = min(sums.shape[0], vector.shape[0])
    if size is None:
        size = paired
    out = np.zeros(size, dtype=np.float32)
    count = min(paired, size)
    out[:count] = sums[:count] * vector[:count]
    return out


def fit_length(vector: Array, size: int) -> Array:
    """Truncate or zero-pad ``vector`` to ``size`` entries."""

    vector = np.asarray(vector, dtype=np.float32)
    if vector.shape[0] == size:
        return vector
    out = np.zeros(size, dtype=np.float32)
    count = min(size, vector.shape[0])
    out[:count] = vector[:count]
    return out


def mean_squared_error(desired: Array, obtained: Array) -> float:
    """Average squared difference over every position, bias slot included."""

    desired = np.asarray(desired, dtype=np.float64)
    obtained = np.asarray(obtained, dtype=np.float64)
    if desired.shape != obtained.shape:
        raise ValueError(
            f"desired has shape {desired.shape} but obtained has {obtained.shape}"
        )
    return float(np.mean(np.square(desired - obtained)))


def round_to(x: float, precision: float = 10.0) -> float:
    """Round ``x`` to the nearest multiple of ``1 / precision``, halves away from zero."""

    return math.copysign(math.floor(abs(x) * precision + 0.5) / precision, x)


def augment(vector: Array, bias: float = 0.0) -> Array:
    """Prepend a bias slot to a raw per-unit vector."""

    vector = np.asarray(vector, dtype=np.float32).reshape(-1)
    return np.concatenate([np.array([bias], dtype=np.float32), vector])


__all__ = [
    "augment",
    "fit_length",
    "mean_squared_error",
    "round_to",
    "row_sum_prod",
]
