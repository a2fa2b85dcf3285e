"""
Exporting context logger.

Provides logging interface for exporting context with automatic [export] prefix.
All exporting modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[export]"


def _log_info(message: str) -> None:
    """Log info message with [export] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [export] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [export] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [export] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [export] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_export_failure(result) -> None:
    """
    Log a failed sketchtool run with its full output.

    Args:
        result: CompletedProcess from the sketchtool invocation
    """
    _log_error(f"sketchtool exited with status {result.returncode}")

    # Use opt(raw=True) to bypass format template and preserve original formatting
    if result.stdout:
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\nSKETCHTOOL STDOUT:\n{'=' * 80}\n{result.stdout}\n"
        )
    if result.stderr:
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\nSKETCHTOOL STDERR:\n{'=' * 80}\n{result.stderr}\n"
        )
