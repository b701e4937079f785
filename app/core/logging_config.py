"""Logging setup for the resume structuring service."""

import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
ROOT_LOGGER_NAME = "app"


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Attach a single stdout handler to the package logger.

    Safe to call repeatedly (e.g. once per test client); the handler is only added once.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
    if level is not None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
