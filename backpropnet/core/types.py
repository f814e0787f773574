"""Core typing contracts for backpropnet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

Array = np.ndarray
Topology = Sequence[int]


@dataclass(frozen=True)
class NetworkDescription:
    """Description of the fully connected network shape."""

    topology: List[int]


@dataclass(frozen=True)
class TrainResult:
    """Summary returned by :meth:`backpropnet.training.trainer.Trainer.train`."""

    converged: bool
    iterations: int
    error: float
    learning_rate: float


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`backpropnet.training.pipelines.run_pipeline`."""

    train: TrainResult
    output: List[float]
    metrics_path: str
    manifest_path: str
