"""Run artifact helpers."""

from __future__ import annotations

import dataclasses
import json
import time
from pathlib import Path
from typing import Mapping

import numpy as np

from ..core.types import TrainResult


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    result: TrainResult,
) -> str:
    """Write a manifest JSON file with the resolved config and the outcome."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "result": dataclasses.asdict(result),
        "environment": {"numpy": np.__version__},
    }
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)
