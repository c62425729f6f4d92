"""Logging for an unattended bridge.

Every logger writes to stderr. Unless ``HEART_OSC_LOG_TO_FILE`` is switched
off (for example under systemd, where the journal already keeps stderr), all
loggers of the process also share one rotating ``heart_osc.log`` so a session
can be followed across discovery, the BLE backend and the OSC publisher.
"""

import logging
import os
from functools import cache
from logging.handlers import RotatingFileHandler
from pathlib import Path

from heart_osc.utilities.env.parsing import _env_flag

LOG_LEVEL_ENV_VAR = "LOG_LEVEL"
LOG_DIR_ENV_VAR = "HEART_OSC_LOG_DIR"
LOG_TO_FILE_ENV_VAR = "HEART_OSC_LOG_TO_FILE"
DEFAULT_LOG_SUBDIR = Path(".heart_osc") / "logs"
LOG_FILENAME = "heart_osc.log"
MAX_LOG_BYTES = 5 * 1024 * 1024  # 5 MiB
BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_log_directory() -> Path:
    log_dir = os.getenv(LOG_DIR_ENV_VAR)
    path = Path(log_dir).expanduser() if log_dir else Path.home() / DEFAULT_LOG_SUBDIR
    path.mkdir(parents=True, exist_ok=True)
    return path


@cache
def _shared_file_handler(log_path: Path) -> RotatingFileHandler:
    """One handler per file, so rotation is not raced by several loggers."""
    handler = RotatingFileHandler(
        log_path, maxBytes=MAX_LOG_BYTES, backupCount=BACKUP_COUNT
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, attaching the bridge handlers on first use."""

    logger = logging.getLogger(name)
    level = getattr(logging, os.getenv(LOG_LEVEL_ENV_VAR, "INFO").upper(), logging.INFO)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)

    if _env_flag(LOG_TO_FILE_ENV_VAR, default=True):
        logger.addHandler(_shared_file_handler(_resolve_log_directory() / LOG_FILENAME))

    logger.propagate = False
    return logger
