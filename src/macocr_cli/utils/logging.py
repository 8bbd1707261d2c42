from __future__ import annotations

import logging
import sys
from logging import Logger

PACKAGE_LOGGER = "macocr_cli"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: int = logging.INFO) -> Logger:
    """
    Attach a stderr handler to the package logger.

    Only the CLI calls this; library use leaves handler setup to the caller.
    stdout stays free for language listings.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> Logger:
    return logging.getLogger(PACKAGE_LOGGER).getChild(name)
