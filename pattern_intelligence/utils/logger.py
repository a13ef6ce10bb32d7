"""
Pattern Intelligence - Logging
==============================
Console + rotating file handlers for the CLI entry points. Library modules
only call logging.getLogger(__name__).
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

from ..config import LOG_LEVEL, LOG_FILE

_MAX_MB = int(os.getenv("LOG_MAX_MB", "5"))
_BACKUPS = int(os.getenv("LOG_BACKUPS", "5"))


def setup_logger(name: str = "pattern_intelligence",
                 level: Union[str, int] = LOG_LEVEL,
                 log_file: Optional[str] = LOG_FILE,
                 to_console: bool = True) -> logging.Logger:
    """
    Create/get a logger with console and rotating-file handlers.
    Re-using the same name returns the same configured logger (no duplicate handlers).
    """
    logger = logging.getLogger(name)
    if logger.handlers:  # already configured
        return logger

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=_MAX_MB * 1024 * 1024,
            backupCount=_BACKUPS,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    if to_console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        stream_handler.setLevel(level)
        logger.addHandler(stream_handler)

    return logger
