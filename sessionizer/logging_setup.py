"""File logging for sessionizer.

The picker owns the terminal, so log records go to a file under the
platform log directory instead of a stream handler.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> logging.Handler | None:
    """Attach a file handler to the ``sessionizer`` logger.

    Returns the handler, or ``None`` when the log directory is not writable;
    logging is then left unconfigured rather than failing the command.
    """
    path = log_file if log_file is not None else LOG_PATH
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        return None

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root = logging.getLogger(APP_NAME)
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root.addHandler(handler)
    return handler


__all__ = ["LOG_FORMAT", "LOG_PATH", "setup_logging"]
