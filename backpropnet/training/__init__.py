"""Network engine, training loop and config pipeline."""

from .network import Network
from .pipelines import load_config, load_preset, presets, run_pipeline
from .trainer import DEFAULT_MAX_ITERATIONS, Trainer, train

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "Network",
    "Trainer",
    "load_config",
    "load_preset",
    "presets",
    "run_pipeline",
    "train",
]
