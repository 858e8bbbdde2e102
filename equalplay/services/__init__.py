"""
Services package for the Equal Play Tracker.

This package contains service classes that handle business logic.
Includes factory for proper dependency injection.
"""
from .clock_service import ClockService
from .ticker import ClockTicker
from .fairness_service import (
    FairnessService, ReportExporter, classify_fairness, compute_minutes_stats,
)
from .roster_service import RosterService, parse_bulk_names
from .substitution_service import SubstitutionService, suggest_substitutions
from .persistence_service import PersistenceService
from .service_factory import ServiceFactory

__all__ = [
    "ClockService", "ClockTicker",
    "FairnessService", "ReportExporter", "classify_fairness", "compute_minutes_stats",
    "RosterService", "parse_bulk_names",
    "SubstitutionService", "suggest_substitutions",
    "PersistenceService", "ServiceFactory",
]
