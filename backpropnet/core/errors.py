"""Exceptions raised by backpropnet."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a network cannot be built from the supplied configuration."""


class TopologyError(ConfigurationError):
    """Raised for topologies with fewer than two layers or empty layers."""


class WeightShapeError(ConfigurationError):
    """Raised when supplied weights do not match the topology."""


class NotConvergedError(RuntimeError):
    """Raised by strict training runs that hit their iteration cap."""

    def __init__(self, result) -> None:
        super().__init__(
            f"did not converge within {result.iterations} iterations "
            f"(error={result.error:.6g})"
        )
        self.result = result
