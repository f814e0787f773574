"""Config-driven assembly of a network, its training run and its artifacts."""

from __future__ import annotations

import json
import logging
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping

import numpy as np

from ..core.encoding import encode_int, encode_text
from ..core.linalg import augment
from ..core.logger import configure_logging
from ..core.types import Array, RunResult
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from .network import Network
from .trainer import DEFAULT_MAX_ITERATIONS, Trainer

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "single-unit-constant": {
        "model": {"topology": [1, 1], "seed": 0},
        "data": {"stimulus": {"values": [0.5]}, "desired": {"values": [1.0]}},
        "train": {
            "learning_rate": 0.25,
            "tolerance": 1e-3,
            "max_iterations": 50_000,
            "run_dir": "runs/single-unit-constant",
            "enable_plots": False,
        },
    },
    "ramp-plateau": {
        "model": {"topology": [8, 8, 8], "seed": 0},
        "data": {
            "stimulus": {"values": [i / 8 for i in range(8)]},
            "desired": {"values": [1.0 - i / 8 for i in range(8)]},
        },
        "train": {
            "learning_rate": {"name": "plateau"},
            "tolerance": 1e-4,
            "max_iterations": 100_000,
            "run_dir": "runs/ramp-plateau",
            "enable_plots": False,
        },
    },
    "text-to-int": {
        "model": {"topology": [4, 4, 4], "seed": 1},
        "data": {"stimulus": {"text": "ping"}, "desired": {"int": 5}},
        "train": {
            "learning_rate": {"name": "constant", "rate": 0.5},
            "tolerance": 1e-3,
            "max_iterations": 100_000,
            "run_dir": "runs/text-to-int",
            "enable_plots": False,
        },
    },
}


def load_config(path: str | Path) -> Mapping[str, object]:
    """Read a JSON or YAML run configuration."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(path.read_text()) or {}
    elif suffix == ".json":
        data = json.loads(path.read_text() or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    missing = {"model", "data", "train"} - set(data)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise KeyError(f"Config {path.name} is missing required sections: {missing_str}")
    return data


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}") from exc


def build_network(model_cfg: Mapping[str, object]) -> Network:
    if "topology" not in model_cfg:
        raise KeyError("model config requires `topology`")
    seed = model_cfg.get("seed")
    return Network(
        list(model_cfg["topology"]),  # type: ignore[arg-type]
        weights=model_cfg.get("weights"),  # type: ignore[arg-type]
        seed=int(seed) if seed is not None else None,
    )


def resolve_vector(entry: Mapping[str, object], size: int) -> Array:
    """Build a per-unit vector from ``values``, ``text`` or ``int`` entries."""

    if "values" in entry:
        values = np.asarray(entry["values"], dtype=np.float32).reshape(-1)
        if values.shape[0] != size:
            raise ValueError(f"expected {size} values, got {values.shape[0]}")
        return values
    if "text" in entry:
        return encode_text(str(entry["text"]), size)
    if "int" in entry:
        return encode_int(int(entry["int"]), size)  # type: ignore[arg-type]
    raise KeyError("vector entry needs one of `values`, `text` or `int`")


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    model_cfg = dict(config["model"])  # type: ignore[arg-type]
    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    train_cfg = dict(config["train"])  # type: ignore[arg-type]

    if "log_level" in train_cfg:
        configure_logging(str(train_cfg["log_level"]).upper())

    network = build_network(model_cfg)
    stimulus = resolve_vector(data_cfg["stimulus"], network.topology[0])  # type: ignore[arg-type]
    desired = augment(resolve_vector(data_cfg["desired"], network.topology[-1]))  # type: ignore[arg-type]

    tolerance = float(train_cfg.get("tolerance", 1e-7))
    max_iterations = train_cfg.get("max_iterations", DEFAULT_MAX_ITERATIONS)
    max_iterations = int(max_iterations) if max_iterations is not None else None
    run_dir = _resolve_run_dir(train_cfg)
    run_dir.mkdir(parents=True, exist_ok=True)

    logger.info(
        "Training topology %s (%d parameters), tolerance %.3g",
        network.topology,
        network.parameter_count(),
        tolerance,
    )

    jsonl = JsonlSink(run_dir / "metrics.jsonl", seed=model_cfg.get("seed"))  # type: ignore[arg-type]
    csv_sink = CsvSink(run_dir / "metrics.csv")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    trainer = Trainer(
        network,
        callbacks=[jsonl, csv_sink, plots],
        log_every=int(train_cfg.get("log_every", 1000)),
    )
    result = trainer.train(
        stimulus,
        desired,
        train_cfg.get("learning_rate", 0.25),
        tolerance,
        max_iterations=max_iterations,
        strict=bool(train_cfg.get("strict", False)),
    )
    plots.close()

    output = network.evaluate(stimulus)
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=json.loads(json.dumps(config)),
        result=result,
    )
    (run_dir / "output.json").write_text(json.dumps([float(v) for v in output], indent=2))

    return RunResult(
        train=result,
        output=[float(v) for v in output],
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
    )


def _resolve_run_dir(train_cfg: Mapping[str, object]) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp


__all__: List[str] = [
    "build_network",
    "load_config",
    "load_preset",
    "presets",
    "resolve_vector",
    "run_pipeline",
]
