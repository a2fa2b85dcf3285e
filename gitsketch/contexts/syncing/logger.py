"""
Syncing context logger.

Provides logging interface for the import/stage/generate workflows with
automatic [sketch] prefix.
"""

from pathlib import Path

from loguru import logger

from gitsketch.config import GitSketchConfig
from gitsketch.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[sketch]"


def setup_sync_logger(log_dir: Path, config: GitSketchConfig, verbose: bool = False) -> Path:
    """
    Setup logger for a sync run.

    Args:
        log_dir: Directory for this run's log file
        config: Loaded configuration (recorded in the provenance header)
        verbose: Show debug output on the console

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="sketch",
        log_dir=log_dir,
        verbose=verbose,
        extra_provenance={
            "Config": config.source_path,
            "Repository root": config.repo_root,
            "sketchtool": config.export.tool,
        },
    )


def _log_info(message: str) -> None:
    """Log info message with [sketch] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [sketch] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [sketch] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [sketch] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
