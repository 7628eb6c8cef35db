"""Logging configuration for promreplay."""

import logging
import sys

# Create logger for promreplay
logger = logging.getLogger("promreplay")


def setup_logger(level: int = logging.INFO) -> None:
    """Setup the promreplay logger with default configuration.

    Args:
        level: Logging level (default: INFO)
    """
    if logger.handlers:
        # Already configured
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.NOTSET)

    formatter = logging.Formatter("promreplay: %(message)s")
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def set_level(level: int | str) -> None:
    """Change the promreplay log level.

    Args:
        level: Logging level as int or name (e.g. "DEBUG")
    """
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)


# Initialize logger on import
setup_logger()
