"""Timestamp formatting utilities."""

import time
from datetime import datetime


def now() -> str:
    """Current local time as a sortable stamp for log directory names (e.g., "20251114_123456")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_ms() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def format_age(age_ms: int) -> str:
    """
    Format an age in milliseconds as compact relative time (e.g., "2h ago").

    Matches the compact style used in cache indicators:
    - Seconds: "30s ago"
    - Minutes: "15m ago"
    - Hours: "2h ago"
    - Days: "5d ago"

    Args:
        age_ms: Elapsed time in milliseconds (negative values mean the future)

    Returns:
        Compact relative time string
    """
    if age_ms < 0:
        age_ms = -age_ms
        suffix = "from now"
    else:
        suffix = "ago"

    seconds = age_ms // 1000
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return f"{seconds}s {suffix}"
    elif minutes < 60:
        return f"{minutes}m {suffix}"
    elif hours < 24:
        return f"{hours}h {suffix}"
    else:
        return f"{days}d {suffix}"
