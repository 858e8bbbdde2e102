"""
Utilities package for the Equal Play Tracker.

This package contains utility functions and constants used throughout the application.
"""
from .time_utils import fmt_mmss, now_ts
from .constants import (
    APP_TITLE, DEFAULT_FIELD_TARGET, MIN_FIELD_TARGET, MAX_FIELD_TARGET,
    DEFAULT_HALF_MINUTES, MIN_HALF_MINUTES, MAX_HALF_MINUTES,
    DEFAULT_MAX_SUGGESTIONS, MIN_MAX_SUGGESTIONS, MAX_MAX_SUGGESTIONS,
    SWAP_THRESHOLD_SECONDS, TICK_INTERVAL_SECONDS, PROTECTED_STAT_IDS,
    SORT_ASC, SORT_DESC, SORT_ORDERS,
)

__all__ = [
    "fmt_mmss", "now_ts", "APP_TITLE",
    "DEFAULT_FIELD_TARGET", "MIN_FIELD_TARGET", "MAX_FIELD_TARGET",
    "DEFAULT_HALF_MINUTES", "MIN_HALF_MINUTES", "MAX_HALF_MINUTES",
    "DEFAULT_MAX_SUGGESTIONS", "MIN_MAX_SUGGESTIONS", "MAX_MAX_SUGGESTIONS",
    "SWAP_THRESHOLD_SECONDS", "TICK_INTERVAL_SECONDS", "PROTECTED_STAT_IDS",
    "SORT_ASC", "SORT_DESC", "SORT_ORDERS",
]
