"""Core numerical primitives for backpropnet."""

from . import activations, encoding, errors, learning_rates, linalg, types

__all__ = ["activations", "encoding", "errors", "learning_rates", "linalg", "types"]
