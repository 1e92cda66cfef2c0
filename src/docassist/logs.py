"""Loguru sink configuration."""

from __future__ import annotations

from enum import Enum
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class LogLevel(str, Enum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def setup_logging(log_level: LogLevel | str = LogLevel.WARNING, log_file: str | None = None) -> None:
    """Route logs to stderr (and optionally a file) at ``log_level``.

    Stdout stays reserved for command output.
    """
    level = LogLevel(log_level.upper()).value
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)
    if log_file:
        logger.add(log_file, level=level, format=LOG_FORMAT, colorize=False, encoding="utf-8")
