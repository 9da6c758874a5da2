"""Loguru sink configuration for command-line entry points."""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


def configure_logging(
    level: str = "INFO", log_file: Optional[Union[str, Path]] = None
) -> None:
    """
    Reset loguru sinks to stderr and, optionally, a rotating log file.

    Args:
        level: Minimum level for the stderr sink
        log_file: Optional path for a DEBUG-level file sink
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    if log_file:
        logger.add(
            str(log_file), level="DEBUG", rotation="5 MB", retention=3, enqueue=False
        )
        logger.debug(f"Logging to {log_file}")
