"""
Classification context logger.

Provides logging interface for classification with automatic [classify] prefix.
All classification modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[classify]"


def _log_info(message: str) -> None:
    """Log info message with [classify] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [classify] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [classify] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_document_profile(title: str, document_type: str, subject_name: str, section_count: int) -> None:
    """Log what the classifier concluded about a document before dispatching sections."""
    _log_info(f'Classifying "{title}" ({section_count} sections)')
    _log_debug(f"  Document type: {document_type}")
    _log_debug(f"  Subject: {subject_name}")


def log_section_dispatch(section_title: str, rule: str, item_count: int) -> None:
    """Log which rule handled a section and how many items it produced."""
    _log_debug(f'  "{section_title}" -> {rule} ({item_count} items)')
