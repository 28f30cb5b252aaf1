"""
Logging setup for the BoardTime API.

``setup_logging`` attaches handlers to the ``boardtime_api`` package
logger rather than the root logger, so uvicorn keeps its own access
log format and test runners keep their capture handlers.  Times are
written in UTC, the same clock meeting deadlines are stored in, which
makes "vote rejected after deadline" lines easy to check against the
stored value.
"""

import logging
import time
from logging.handlers import RotatingFileHandler
from typing import Optional

PACKAGE_LOGGER = "boardtime_api"
LOG_FORMAT = "%(asctime)sZ [%(levelname)s] %(name)s: %(message)s"


class _UTCFormatter(logging.Formatter):
    converter = time.gmtime


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> logging.Logger:
    """Configure and return the package logger.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"info"``.  Unknown names
        fall back to ``INFO``.
    logfile : Optional[str]
        If given, records are also written to this file, rotated at
        5 MB with three backups kept.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    numeric_level = logging.getLevelName(level.upper())
    logger.setLevel(numeric_level if isinstance(numeric_level, int) else logging.INFO)
    if logger.handlers:
        # create_app may run more than once per process.
        return logger

    formatter = _UTCFormatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        file_handler = RotatingFileHandler(
            logfile, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    return logger
