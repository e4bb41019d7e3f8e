"""Logging setup shared by the API and the CLI."""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

from backend.config import settings

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"


def setup_logging(stream: Optional[IO[str]] = None) -> None:
    """Configure the root logger with a single console handler.

    The level comes from ``settings.log_level``; unknown names fall back to
    INFO.  Existing root handlers are removed first, so calling this more
    than once never duplicates output.
    """
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    numeric_level = level_map.get(settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))

    root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for *name*; relies on an explicit setup_logging() call."""
    return logging.getLogger(name)
