"""Learning-rate strategies for the training loop."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Mapping, Protocol

from .linalg import round_to


class LearningRateStrategy(Protocol):
    """Protocol implemented by learning-rate policies."""

    def __call__(self, error: float) -> float:
        """Return the step size to use for the current ``error``."""


@dataclass
class ConstantLearningRate:
    """Always return the configured rate."""

    rate: float

    def __call__(self, error: float) -> float:
        return self.rate


@dataclass
class PlateauState:
    """Rounded error history of :class:`PlateauLearningRate`."""

    last_error: float = math.inf
    plateau: int = 0


def plateau_factor(
    error: float,
    state: PlateauState,
    *,
    precision: float = 1e6,
    patience: int = 3,
) -> float:
    """Update ``state`` with ``error`` and return the plateau multiplier.

    A rounded error that is not lower than the last recorded one extends the
    plateau; after ``patience`` stalled calls the multiplier becomes
    ``|ln(plateau)|``. Any improvement records the new error and resets the
    counter.
    """

    rounded = round_to(error, precision)
    if rounded >= state.last_error:
        state.plateau += 1
        if state.plateau < patience:
            return 1.0
        return abs(math.log(state.plateau))
    state.last_error = rounded
    state.plateau = 0
    return 1.0


@dataclass
class PlateauLearningRate:
    """Adaptive rate ``1 / |ln(error)|`` scaled up while the error stalls.

    The base rate is 1.0 when the error is exactly 0 or 1, where the
    logarithm is singular.
    """

    initial_error: float = math.inf
    precision: float = 1e6
    patience: int = 3
    state: PlateauState = field(init=False, repr=False)
    multiplier: float = field(init=False, default=1.0)

    def __post_init__(self) -> None:
        self.state = PlateauState(last_error=self.initial_error)

    @property
    def plateau(self) -> int:
        return self.state.plateau

    @property
    def last_error(self) -> float:
        return self.state.last_error

    def __call__(self, error: float) -> float:
        self.multiplier = plateau_factor(
            error, self.state, precision=self.precision, patience=self.patience
        )
        if error == 0.0 or error == 1.0:
            base = 1.0
        else:
            base = 1.0 / abs(math.log(error))
        return base * self.multiplier


RateFactory = Callable[..., LearningRateStrategy]


class LearningRateRegistry:
    """Central registry for named learning-rate strategies."""

    def __init__(self) -> None:
        self._registry: Dict[str, RateFactory] = {}

    def register(self, name: str, factory: RateFactory) -> None:
        self._registry[name] = factory

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def build(self, name: str, **options: object) -> LearningRateStrategy:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise KeyError(
                f"Unknown learning rate {name!r}. Available learning rates: {available}"
            )
        return self._registry[name](**options)

    def resolve(self, value: object) -> LearningRateStrategy:
        """Turn a float, a ``{"name": ...}`` mapping or a callable into a strategy."""

        if isinstance(value, bool):
            raise TypeError("learning rate must be a number, a mapping or a callable")
        if isinstance(value, (int, float)):
            return ConstantLearningRate(float(value))
        if isinstance(value, Mapping):
            options = dict(value)
            name = str(options.pop("name", "constant"))
            return self.build(name, **options)
        if callable(value):
            return value  # type: ignore[return-value]
        raise TypeError("learning rate must be a number, a mapping or a callable")


REGISTRY = LearningRateRegistry()
REGISTRY.register("constant", ConstantLearningRate)
REGISTRY.register("plateau", PlateauLearningRate)
# Name used by earlier releases for the plateau policy
REGISTRY.register("sawtooth", PlateauLearningRate)

__all__ = [
    "ConstantLearningRate",
    "LearningRateRegistry",
    "LearningRateStrategy",
    "PlateauLearningRate",
    "PlateauState",
    "REGISTRY",
    "plateau_factor",
]
