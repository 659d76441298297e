"""
Logging for the market-intel search service.

Every module asks ``get_logger(__name__)`` for its logger; all of them
write one line per record to stdout at the level configured in Settings.
"""
from __future__ import annotations

import logging
import sys

from src.core.config import get_settings

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _stdout_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
    return handler


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(_stdout_handler())
    logger.setLevel(_resolve_level(get_settings().log_level))
    return logger
