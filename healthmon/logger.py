"""Logging configuration for the healthmon application."""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from textual.logging import TextualHandler

LOGGER_NAME = "healthmon"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package logger.

    The terminal is owned by the Textual app, so nothing is written to
    stderr. With a log file, records go to a rotating file; without one they
    go to the Textual devtools console.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid adding handlers multiple times
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
        ))
    else:
        handler = TextualHandler()

    logger.addHandler(handler)
    logger.propagate = False
    return logger
