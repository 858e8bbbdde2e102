"""
Constants for the Equal Play Tracker.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Equal Play Tracker"

# Field size configuration
DEFAULT_FIELD_TARGET = 7
MIN_FIELD_TARGET = 1
MAX_FIELD_TARGET = 11

# Half length (minutes)
DEFAULT_HALF_MINUTES = 25
MIN_HALF_MINUTES = 1
MAX_HALF_MINUTES = 90

# Substitution suggestions
DEFAULT_MAX_SUGGESTIONS = 3
MIN_MAX_SUGGESTIONS = 1
MAX_MAX_SUGGESTIONS = 10
SWAP_THRESHOLD_SECONDS = 60  # strict: a difference of exactly 60s does not qualify

# Fairness rating thresholds on the standard deviation of accrued seconds
FAIRNESS_EXCELLENT_STDEV = 60
FAIRNESS_GOOD_STDEV = 120
FAIRNESS_EXCELLENT = "Excellent"
FAIRNESS_GOOD = "Good"
FAIRNESS_NEEDS_IMPROVEMENT = "Needs Improvement"

# Clock
TICK_INTERVAL_SECONDS = 1.0

# Roster display
SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_ORDERS = (SORT_ASC, SORT_DESC)

# Scoreboard defaults
DEFAULT_HOME_NAME = "Home"
DEFAULT_AWAY_NAME = "Away"

DEFAULT_STAT_ICON = "📊"
PROTECTED_STAT_IDS = ("goals", "assists", "saves")

# Default save location used by the web host
DEFAULT_SAVE_FILE = "autosave/equalplay.json"
