"""
Archive context logger.

Provides logging interface for container packing and JSON normalization with
automatic [archive] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[archive]"


def _log_debug(message: str) -> None:
    """Log debug message with [archive] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
