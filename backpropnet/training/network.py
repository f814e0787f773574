"""Fully connected logistic network with implicit bias units."""

from __future__ import annotations

import numbers
from typing import List, Mapping, Sequence

import numpy as np

from ..core.activations import logistic, logistic_deriv
from ..core.errors import TopologyError, WeightShapeError
from ..core.linalg import fit_length, row_sum_prod
from ..core.types import Array, NetworkDescription, Topology


def _check_topology(topology: Topology) -> List[int]:
    dims = list(topology)
    if len(dims) < 2:
        raise TopologyError(
            f"topology needs at least an input and an output layer, got {dims}"
        )
    for size in dims:
        if isinstance(size, bool) or not isinstance(size, numbers.Integral):
            raise TopologyError(f"layer sizes must be integers, got {size!r}")
        if size <= 0:
            raise TopologyError(f"layer sizes must be positive, got {dims}")
    return [int(size) for size in dims]


class Network:
    """Layer activations and weight matrices of a feed-forward network.

    Every layer carries one extra unit at index 0. On the way forward that
    slot holds the constant 1.0 bias input of the next transition; in the
    output layer it is cleared to 0.0 once the pass completes. Weight matrix
    ``i`` has one row per unit of layer ``i`` and one column per unit of
    layer ``i + 1``, bias units included.

    Parameters
    ----------
    topology:
        Number of functional units per layer, input first.
    weights:
        Optional matrices copied verbatim instead of random initialisation.
    seed, rng:
        Random source for initialisation. ``rng`` wins when both are given.
    """

    def __init__(
        self,
        topology: Topology,
        weights: Sequence[Array] | None = None,
        *,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.topology = _check_topology(topology)
        shapes = [
            (in_dim + 1, out_dim + 1)
            for in_dim, out_dim in zip(self.topology[:-1], self.topology[1:])
        ]
        if weights is None:
            rng = rng if rng is not None else np.random.default_rng(seed)
            matrices = [
                (0.4 / (1 + rng.integers(0, 10, size=shape))).astype(np.float32)
                for shape in shapes
            ]
        else:
            matrices = self._copy_weights(weights, shapes)
        self._layers: List[Array] = [
            np.zeros(size + 1, dtype=np.float32) for size in self.topology
        ]
        self._weights: List[Array] = matrices

    def __repr__(self) -> str:
        return f"<Network topology={self.topology}>"

    @staticmethod
    def _copy_weights(
        weights: Sequence[Array], shapes: Sequence[tuple[int, int]]
    ) -> List[Array]:
        supplied = list(weights)
        if len(supplied) != len(shapes):
            raise WeightShapeError(
                f"expected {len(shapes)} weight matrices, got {len(supplied)}"
            )
        matrices: List[Array] = []
        for idx, (matrix, shape) in enumerate(zip(supplied, shapes)):
            arr = np.array(matrix, dtype=np.float32)
            if arr.shape != shape:
                raise WeightShapeError(
                    f"weight matrix {idx} has shape {arr.shape}, expected {shape}"
                )
            matrices.append(arr)
        return matrices

    # ------------------------------------------------------------------
    # Accessors

    @property
    def weights(self) -> List[Array]:
        return [w.copy() for w in self._weights]

    @property
    def activations(self) -> List[Array]:
        return [layer.copy() for layer in self._layers]

    @property
    def output(self) -> Array:
        return self._layers[-1].copy()

    def describe(self) -> NetworkDescription:
        return NetworkDescription(topology=list(self.topology))

    def state_dict(self) -> Mapping[str, Array]:
        return {f"W{idx}": w.copy() for idx, w in enumerate(self._weights)}

    def parameter_count(self) -> int:
        return int(sum(int(w.size) for w in self._weights))

    # ------------------------------------------------------------------
    # Forward propagation

    def evaluate(self, stimulus: Array) -> Array:
        """Propagate ``stimulus`` and return the output layer.

        The returned vector has ``topology[-1] + 1`` entries; entry 0 is the
        cleared bias slot.
        """

        stimulus = np.asarray(stimulus, dtype=np.float32).reshape(-1)
        if stimulus.shape[0] != self.topology[0]:
            raise ValueError(
                f"stimulus has {stimulus.shape[0]} values, "
                f"input layer has {self.topology[0]} units"
            )
        self._layers[0][1:] = stimulus
        for idx, W in enumerate(self._weights):
            source = self._layers[idx]
            target = self._layers[idx + 1]
            source[0] = 1.0
            z = row_sum_prod(W, source, size=target.shape[0])
            target[:] = logistic(z)
        self._layers[-1][0] = 0.0
        return self._layers[-1].copy()

    __call__ = evaluate

    # ------------------------------------------------------------------
    # Error back-propagation

    def output_error(self, desired: Array) -> Array:
        """Residual times logistic slope over the whole output vector."""

        desired = np.asarray(desired, dtype=np.float32).reshape(-1)
        obtained = self._layers[-1]
        if desired.shape != obtained.shape:
            raise ValueError(
                f"desired has {desired.shape[0]} values, "
                f"output layer has {obtained.shape[0]} (bias slot included)"
            )
        return (desired - obtained) * logistic_deriv(obtained)

    def backpropagate(self, desired: Array) -> List[Array]:
        """Return one error vector per weight matrix, i.e. per non-input layer.

        Errors are computed against the activations of the last
        :meth:`evaluate` call. Hidden errors combine the next matrix with the
        downstream errors through :func:`row_sum_prod` and scale them by the
        logistic slope of the downstream layer.
        """

        last = len(self._weights) - 1
        errors: List[Array] = [np.empty(0, dtype=np.float32)] * (last + 1)
        errors[last] = self.output_error(desired)
        for idx in range(last, 0, -1):
            size = self._layers[idx].shape[0]
            propagated = row_sum_prod(self._weights[idx], errors[idx], size=size)
            slope = fit_length(logistic_deriv(self._layers[idx + 1]), size)
            errors[idx - 1] = propagated * slope
        return errors

    # ------------------------------------------------------------------
    # Weight adjustment

    def adjust(self, errors: Sequence[Array], learning_rate: float) -> None:
        """Shift each weight row by ``activation * error * learning_rate``."""

        if len(errors) != len(self._weights):
            raise ValueError(
                f"expected {len(self._weights)} error vectors, got {len(errors)}"
            )
        rate = np.float32(learning_rate)
        for idx, W in enumerate(self._weights):
            source = self._layers[idx]
            error = fit_length(errors[idx], W.shape[0])
            adjustment = source * error * rate
            W += adjustment[:, np.newaxis]


__all__ = ["Network"]
