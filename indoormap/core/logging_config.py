"""Logging setup for indoormap scripts."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file. If None, logs only to stderr.
    """
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level, colorize=True)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, format=LOG_FORMAT, level=level, rotation="10 MB")
