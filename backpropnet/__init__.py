"""backpropnet public API."""

from .core import activations, encoding, learning_rates, linalg, types  # noqa: F401
from .core.errors import (
    ConfigurationError,
    NotConvergedError,
    TopologyError,
    WeightShapeError,
)
from .core.learning_rates import ConstantLearningRate, PlateauLearningRate
from .core.logger import configure_logging
from .core.types import NetworkDescription, RunResult, TrainResult
from .training.network import Network
from .training.pipelines import load_config, load_preset, presets, run_pipeline
from .training.trainer import Trainer, train

__all__ = [
    "ConfigurationError",
    "ConstantLearningRate",
    "Network",
    "NetworkDescription",
    "NotConvergedError",
    "PlateauLearningRate",
    "RunResult",
    "TopologyError",
    "TrainResult",
    "Trainer",
    "WeightShapeError",
    "activations",
    "configure_logging",
    "encoding",
    "learning_rates",
    "linalg",
    "load_config",
    "load_preset",
    "presets",
    "run_pipeline",
    "train",
    "types",
]
