"""Orbit's rotating log file; a session never fails because logging can't start."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

ROOT_LOGGER = "orbit"
LOG_FILE = "orbit.log"
MAX_BYTES = 1024 * 1024
BACKUP_COUNT = 2
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_logger: logging.Logger | None = None


def log_path() -> Path:
    return Path(user_log_dir(ROOT_LOGGER)) / LOG_FILE


def _file_handler(path: Path) -> logging.Handler:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        return logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return handler


def get_logger(level: int = logging.DEBUG) -> logging.Logger:
    """Attach the log file to the ``orbit`` logger on first use.

    Module loggers (``logging.getLogger(__name__)``) sit under ``orbit`` and
    write through this handler. An unwritable log directory leaves a
    ``NullHandler`` in place.
    """
    global _logger
    if _logger is not None:
        return _logger

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    if not logger.handlers:
        logger.addHandler(_file_handler(log_path()))
    logger.propagate = False

    _logger = logger
    return _logger
