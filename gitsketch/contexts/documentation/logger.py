"""
Documentation context logger.

Provides logging interface for README maintenance with automatic [readme] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[readme]"


def _log_info(message: str) -> None:
    """Log info message with [readme] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [readme] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [readme] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
