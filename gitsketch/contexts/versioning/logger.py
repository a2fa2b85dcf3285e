"""
Versioning context logger.

Provides logging interface for git operations with automatic [git] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[git]"


def _log_info(message: str) -> None:
    """Log info message with [git] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [git] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [git] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
