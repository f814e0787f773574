"""Logging setup shared by the training entry points."""

from __future__ import annotations

import logging
from pathlib import Path

FORMAT = "[%(asctime)s] %(levelname)-8s %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: int | str = logging.INFO,
    filename: str | Path | None = None,
    stdout: bool = True,
) -> logging.Logger:
    """Attach formatted handlers to the ``backpropnet`` logger."""

    logger = logging.getLogger("backpropnet")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=FORMAT, datefmt=DATEFMT)
    if filename is not None:
        fhandler = logging.FileHandler(filename, mode="w")
        fhandler.setFormatter(formatter)
        logger.addHandler(fhandler)
    if stdout:
        shandler = logging.StreamHandler()
        shandler.setFormatter(formatter)
        logger.addHandler(shandler)
    return logger
