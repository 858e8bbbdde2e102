"""
Equal Play Tracker

Tracks playing time during a youth match, rates how evenly minutes are
shared, and suggests substitutions that keep playing time balanced.

This package provides the match services and a Flask web interface
for coaches to run them from the sideline.
"""
from .models import MatchState, Player, Position
from .services import (
    ClockService, ClockTicker, FairnessService, PersistenceService,
    RosterService, SubstitutionService, compute_minutes_stats, suggest_substitutions,
)
from .ui import create_app, run_web_app
from .utils import fmt_mmss, now_ts, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "MatchState", "Player", "Position",
    "ClockService", "ClockTicker", "FairnessService", "PersistenceService",
    "RosterService", "SubstitutionService", "compute_minutes_stats", "suggest_substitutions",
    "create_app", "run_web_app", "fmt_mmss", "now_ts", "APP_TITLE",
]
