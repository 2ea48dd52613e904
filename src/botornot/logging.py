# botornot/logging.py
"""
Logging setup using Loguru.

The package logger is disabled on import; applications opt in here.
"""
from __future__ import annotations

import sys

from loguru import logger


def configure_logging(*, debug: bool = False) -> None:
    """Configure loguru logging sinks and enable botornot's messages.

    Args:
        debug: Enable verbose debug logging (per-field traversal steps).
    """
    logger.remove()
    level = "DEBUG" if debug else "WARNING"
    fmt = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> "
        "| <level>{level: <8}</level> "
        "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> "
        "- <level>{message}</level>"
    )
    logger.add(sys.stderr, level=level, format=fmt, backtrace=debug, diagnose=debug)
    logger.enable("botornot")
