#!/usr/bin/env python3
"""
Logging configuration for the host integration utilities.
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


def setup_logging(
    log_level: str = "INFO", log_file: Optional[Union[str, Path]] = None
) -> None:
    """
    Set up logging configuration using loguru.

    Args:
        log_level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file for persistent, rotated logs.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=log_level,
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            rotation="10 MB",
            retention="1 week",
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )

    logger.debug("Logging initialized")
