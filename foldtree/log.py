"""Loguru sinks for the command-line front door.

The package disables its own loggers on import; ``setup_logging`` turns them
back on with a stderr sink and, optionally, a rotating file sink.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger
from platformdirs import user_log_dir

from .config import APP_NAME

CONSOLE_FORMAT = "<level>{level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{function}:{line} - {message}"


def default_log_dir() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False))


def setup_logging(level: str = "WARNING", verbose: bool = False, log_to_file: bool = False) -> Path | None:
    """Configure loguru sinks and return the log file path when one is added."""
    log_level = "DEBUG" if verbose else level
    logger.remove()
    logger.enable(APP_NAME)
    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=None)
    if not log_to_file:
        return None

    log_file = default_log_dir() / "foldtree_{time:YYYY-MM-DD}.log"
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level="DEBUG",
            format=FILE_FORMAT,
            rotation="1 day",
            retention="7 days",
            encoding="utf-8",
        )
    except OSError as exc:
        logger.warning("File logging disabled, cannot write to {}: {}", log_file.parent, exc)
        return None
    logger.info("Logging initialized. Level: {}. Log file: {}", log_level, log_file)
    return log_file


__all__ = [
    "default_log_dir",
    "setup_logging",
]
