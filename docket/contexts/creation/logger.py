"""
Creation context logger.

Provides logging interface for item creation with automatic [create] prefix.
All creation modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

from docket.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[create]"


def setup_creation_logger(log_dir: Path, extra_provenance: dict = None) -> Path:
    """Setup logger for the creation context. Returns the log file path."""
    return _setup_logger(context_name="create", log_dir=log_dir, extra_provenance=extra_provenance)


# Wrapper functions with automatic [create] prefix


def _log_info(message: str) -> None:
    """Log info message with [create] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [create] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [create] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [create] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_item_created(index: int, total: int, external_id: str, title: str) -> None:
    _log_info(f"  [{index}/{total}] {external_id}: {title}")


def log_item_failed(index: int, total: int, title: str, error_message: str) -> None:
    _log_warning(f"  [{index}/{total}] FAILED {title}: {error_message}")


def log_creation_result(target_collection_id: str, created: int, failed: int) -> None:
    """Summarize a finished creation batch."""
    if failed:
        _log_warning(f"Created {created} items in {target_collection_id}, {failed} failed")
    else:
        _log_info(f"Created {created} items in {target_collection_id}")
