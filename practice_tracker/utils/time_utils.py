"""
Utility functions for the Practice Efficiency Tracker application.

This module contains time helpers used throughout the application. All
timestamps handled by the tracker are integer epoch milliseconds.
"""
import time
from datetime import datetime


def now_ms() -> int:
    """
    Get current timestamp in epoch milliseconds.

    Returns:
        Current time as integer epoch milliseconds
    """
    return int(time.time() * 1000)


def now_iso() -> str:
    """Return the current local time as an ISO 8601 string."""
    return datetime.now().isoformat()


def fmt_stopwatch(milliseconds: int) -> str:
    """
    Format milliseconds as a MM:SS.t stopwatch string.

    Args:
        milliseconds: Duration to format

    Returns:
        Formatted time string with tenths of a second

    Example:
        >>> fmt_stopwatch(65300)
        '01:05.3'
    """
    milliseconds = max(0, int(milliseconds))
    total_seconds = milliseconds // 1000
    minutes = total_seconds // 60
    seconds = total_seconds % 60
    tenths = (milliseconds % 1000) // 100
    return f"{minutes:02d}:{seconds:02d}.{tenths}"


def fmt_duration(milliseconds: int) -> str:
    """
    Format milliseconds as M:SS, the format used in reports.

    Example:
        >>> fmt_duration(125000)
        '2:05'
    """
    total_seconds = max(0, int(milliseconds)) // 1000
    m = total_seconds // 60
    s = total_seconds % 60
    return f"{m}:{s:02d}"
