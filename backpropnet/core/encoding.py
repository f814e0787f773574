"""Stimulus and response encoders."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .types import Array

TEXT_SCALE = 1.0 / 255.0


def encode_text(text: str, size: int) -> Array:
    """Map characters to ``ord(c) / 255`` on ``size`` input units.

    Units beyond the end of ``text`` receive 0.0; characters beyond ``size``
    are dropped.
    """

    out = np.zeros(size, dtype=np.float32)
    codes = [ord(char) * TEXT_SCALE for char in text[:size]]
    out[: len(codes)] = codes
    return out


def encode_int(value: int, size: int, high: float = 0.9, low: float = 0.1) -> Array:
    """Spread the low ``size`` bits of ``value`` over ``size`` output units."""

    if value < 0:
        raise ValueError("only non-negative integers can be encoded")
    bits = [(value >> idx) & 1 for idx in range(size)]
    return np.where(np.array(bits, dtype=bool), high, low).astype(np.float32)


def decode_int(values: Iterable[float], threshold: float = 0.5) -> int:
    """Read an integer back from unit values, one bit per unit."""

    total = 0
    for idx, val in enumerate(values):
        if val >= threshold:
            total |= 1 << idx
    return total


__all__ = ["decode_int", "encode_int", "encode_text"]
