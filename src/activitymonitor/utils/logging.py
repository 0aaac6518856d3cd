"""Logging helpers."""
from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ROOT_NAME = "activitymonitor"


def configure_logging(level: str | int = "WARNING") -> None:
    """Attach a single stderr handler to the package logger."""
    root = logging.getLogger(_ROOT_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.WARNING
    root.setLevel(level)
    if not any(getattr(handler, "_activitymonitor", False) for handler in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._activitymonitor = True  # type: ignore[attr-defined]
        root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
