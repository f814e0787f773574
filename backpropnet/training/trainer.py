"""Convergence-driven training loop."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

import numpy as np

from ..core.errors import NotConvergedError
from ..core.learning_rates import REGISTRY as RATE_REGISTRY
from ..core.learning_rates import LearningRateStrategy
from ..core.linalg import mean_squared_error
from ..core.types import Array, TrainResult
from .network import Network

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100_000


class Trainer:
    """Train a :class:`Network` on one stimulus/response pair until it converges.

    ``callbacks`` receive ``(iteration, metrics)`` after every weight update,
    either through an ``on_step`` method or by being called directly. They
    only observe the run.
    """

    def __init__(
        self,
        network: Network,
        callbacks: Sequence[object] | None = None,
        *,
        log_every: int = 1000,
    ) -> None:
        self.network = network
        self.callbacks = list(callbacks or [])
        self.log_every = max(1, int(log_every))

    def train(
        self,
        stimulus: Array,
        desired: Array,
        rate: LearningRateStrategy | float | Mapping[str, object],
        tolerance: float,
        *,
        max_iterations: int | None = DEFAULT_MAX_ITERATIONS,
        strict: bool = False,
    ) -> TrainResult:
        """Iterate forward, back-propagate and adjust until ``error <= tolerance``.

        A NaN error never satisfies the tolerance. ``desired`` is bias-augmented: entry 0 lines up with the output
        layer's bias slot. ``max_iterations=None`` removes the iteration cap.
        With ``strict=True`` hitting the cap raises :class:`NotConvergedError`
        instead of returning an unconverged result.
        """

        strategy = RATE_REGISTRY.resolve(rate)
        desired = np.asarray(desired, dtype=np.float32).reshape(-1)
        expected = self.network.topology[-1] + 1
        if desired.shape[0] != expected:
            raise ValueError(
                f"desired has {desired.shape[0]} values, expected {expected} "
                "(output units plus the bias slot)"
            )

        obtained = self.network.evaluate(stimulus)
        error = mean_squared_error(desired, obtained)
        learning_rate = 0.0
        iterations = 0
        while not error <= tolerance:
            if max_iterations is not None and iterations >= max_iterations:
                result = TrainResult(
                    converged=False,
                    iterations=iterations,
                    error=error,
                    learning_rate=learning_rate,
                )
                logger.warning(
                    "Did not converge within %d iterations (error=%.6g, tolerance=%.3g)",
                    iterations,
                    error,
                    tolerance,
                )
                if strict:
                    raise NotConvergedError(result)
                return result

            errors = self.network.backpropagate(desired)
            learning_rate = float(strategy(error))
            self.network.adjust(errors, learning_rate)
            iterations += 1
            self._emit_step(
                iterations,
                {"iteration": iterations, "error": error, "learning_rate": learning_rate},
            )
            if iterations % self.log_every == 0:
                logger.debug(
                    "iteration %d error %.8g rate %.6g", iterations, error, learning_rate
                )

            obtained = self.network.evaluate(stimulus)
            error = mean_squared_error(desired, obtained)

        logger.info("Converged after %d iterations (error=%.6g)", iterations, error)
        return TrainResult(
            converged=True,
            iterations=iterations,
            error=error,
            learning_rate=learning_rate,
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _emit_step(self, step: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_step"):
                callback.on_step(step, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(step, metrics)


def train(
    network: Network,
    stimulus: Array,
    desired: Array,
    rate: LearningRateStrategy | float | Mapping[str, object],
    tolerance: float,
    **kwargs,
) -> TrainResult:
    """Shortcut for ``Trainer(network).train(...)``."""

    callbacks = kwargs.pop("callbacks", None)
    log_every = kwargs.pop("log_every", 1000)
    return Trainer(network, callbacks=callbacks, log_every=log_every).train(
        stimulus, desired, rate, tolerance, **kwargs
    )


__all__ = ["DEFAULT_MAX_ITERATIONS", "Trainer", "train"]
