"""
Analysis context logger.

Provides logging interface for analysis with automatic [analyze] prefix.
All analysis modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

from docket.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[analyze]"


def setup_analysis_logger(log_dir: Path, extra_provenance: dict = None) -> Path:
    """
    Setup logger for the analysis context.

    Args:
        log_dir: Directory for this analysis session
        extra_provenance: Additional provenance lines (page, project, ...)

    Returns:
        Path to log file
    """
    return _setup_logger(context_name="analyze", log_dir=log_dir, extra_provenance=extra_provenance)


# Wrapper functions with automatic [analyze] prefix


def _log_info(message: str) -> None:
    """Log info message with [analyze] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [analyze] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [analyze] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_analysis_start(document_id: str, target_collection_id: str, force_refresh: bool = False) -> None:
    refresh = " (refresh requested)" if force_refresh else ""
    _log_info(f"Analyzing page {document_id} for project {target_collection_id}{refresh}")


def log_analysis_result(document_title: str, item_count: int, sections_found: int) -> None:
    _log_info(f'Analysis of "{document_title}": {item_count} items from {sections_found} sections')


def log_cache_hit(key: str, cache_age: str) -> None:
    _log_info(f"Cache hit for {key} (cached {cache_age})")


def log_cache_miss(key: str, reason: str = "no entry") -> None:
    _log_debug(f"Cache miss for {key}: {reason}")


def log_cache_failure(operation: str, key: str, error: Exception) -> None:
    """Cache failures are soft: log and carry on."""
    _log_warning(f"Cache {operation} failed for {key}: {type(error).__name__}: {error}")
