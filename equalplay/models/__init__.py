"""
Models package for the Equal Play Tracker.

This package contains the core data models used throughout the application.
"""
from .player import (
    ALL_POSITIONS, CustomStat, Player, Position, default_custom_stats,
    new_player_id, normalize_positions, stat_id_from_name,
)
from .substitution import StagedSubstitution, SubstitutionSuggestion
from .match_state import MatchClock, MatchSettings, MatchState, Scoreboard
from .match_report import MatchReport, MinutesStats, PlayerTimeSummary

__all__ = [
    "ALL_POSITIONS", "CustomStat", "Player", "Position", "default_custom_stats",
    "new_player_id", "normalize_positions", "stat_id_from_name",
    "StagedSubstitution", "SubstitutionSuggestion",
    "MatchClock", "MatchSettings", "MatchState", "Scoreboard",
    "MatchReport", "MinutesStats", "PlayerTimeSummary",
]
