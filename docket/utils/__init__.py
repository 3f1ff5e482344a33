"""
Shared utilities for DOCKET.

Common functionality used across contexts:
- Logger setup with provenance tracking
- Timestamp and cache-age formatting
"""

from docket.utils.timestamp import format_age, now_ms

__all__ = ["format_age", "now_ms"]
