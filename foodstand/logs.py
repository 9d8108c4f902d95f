"""File logging for the terminal app."""

from __future__ import annotations

import logging
from pathlib import Path

from foodstand.config import LOG_PATH

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(path: str | Path = LOG_PATH, level: int = logging.INFO) -> logging.Logger:
    """Send ``foodstand`` logs to ``path``. The terminal belongs to the UI, so nothing goes to stderr."""
    root = logging.getLogger("foodstand")
    root.setLevel(level)
    root.propagate = False
    if any(isinstance(handler, logging.FileHandler) for handler in root.handlers):
        return root
    try:
        log_file = Path(path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        # Logging must never interfere with app flow.
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    return root
