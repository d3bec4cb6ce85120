"""Logging configuration for rrdcached-client."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


def setup_logging(log_path: Path, level: int = logging.DEBUG) -> None:
    """Configure the package logger with a rotating file handler.

    Idempotent: skips if a file handler is already attached.
    """
    root = logging.getLogger("rrdcached_client")
    if any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        return

    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter(fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))

    root.setLevel(level)
    root.addHandler(handler)
