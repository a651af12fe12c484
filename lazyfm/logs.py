"""File logging for the browser.

The terminal belongs to the UI, so records only ever go to a rotating file.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

MAX_LOG_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 2
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"


def configure_logging(log_file: Path | None = None, debug: bool = False) -> logging.Handler:
    """Attach one handler to the package logger and return it.

    Falls back to a ``NullHandler`` when the log file cannot be opened.
    """
    package_logger = logging.getLogger(APP_NAME)
    package_logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    package_logger.propagate = False
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
        existing.close()

    path = log_file or default_log_path()
    handler: logging.Handler
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    package_logger.addHandler(handler)
    return handler


__all__ = ["MAX_LOG_BYTES", "BACKUP_COUNT", "default_log_path", "configure_logging"]
