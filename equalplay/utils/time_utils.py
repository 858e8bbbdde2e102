"""
Utility functions for the Equal Play Tracker.

This module contains common time helpers used throughout the application.
"""
import time


def fmt_mmss(seconds: float) -> str:
    """
    Format seconds as MM:SS string.

    Fractional seconds (e.g. a mean) are truncated and negative values are
    shown as 00:00.

    Args:
        seconds: Number of seconds to format

    Returns:
        Formatted time string in MM:SS format

    Example:
        >>> fmt_mmss(90)
        '01:30'
        >>> fmt_mmss(3661)
        '61:01'
    """
    total = max(0, int(seconds))
    m = total // 60
    s = total % 60
    return f"{m:02d}:{s:02d}"


def now_ts() -> float:
    """
    Get current timestamp in epoch seconds.

    Returns:
        Current time as floating point epoch seconds
    """
    return time.time()
