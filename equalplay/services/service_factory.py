"""
Service Factory for dependency injection.

This module provides a factory for creating service instances over a shared
MatchState with their dependencies wired together.
"""
from typing import Dict, Optional

from ..models import MatchState
from .clock_service import ClockService
from .fairness_service import FairnessService, ReportExporter
from .persistence_service import PersistenceService
from .roster_service import RosterService
from .substitution_service import SubstitutionService
from .ticker import ClockTicker, TimerFactory


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.

    Stateless collaborators (persistence, report exporter) are shared
    singletons; state-bound services are created per MatchState.
    """

    def __init__(self, timer_factory: Optional[TimerFactory] = None):
        self._persistence_service: Optional[PersistenceService] = None
        self._export_service: Optional[ReportExporter] = None
        self._timer_factory = timer_factory

    def create_clock_service(self, match_state: MatchState) -> ClockService:
        return ClockService(match_state)

    def create_ticker(self, clock_service: ClockService) -> ClockTicker:
        return ClockTicker(clock_service, timer_factory=self._timer_factory)

    def create_roster_service(self, match_state: MatchState) -> RosterService:
        return RosterService(match_state)

    def create_substitution_service(
        self,
        match_state: MatchState,
        roster_service: Optional[RosterService] = None,
    ) -> SubstitutionService:
        """
        Create SubstitutionService sharing the given roster service.

        Args:
            match_state: Match state to read suggestions from
            roster_service: Roster service that executes swaps

        Returns:
            Configured SubstitutionService instance
        """
        return SubstitutionService(
            match_state,
            roster_service or self.create_roster_service(match_state),
        )

    def create_fairness_service(self, match_state: MatchState) -> FairnessService:
        return FairnessService(match_state, export_service=self._get_export_service())

    def create_complete_service_suite(self, match_state: MatchState) -> Dict[str, object]:
        """
        Create a complete suite of services with proper dependencies.

        Args:
            match_state: Match state for the services

        Returns:
            Dictionary containing all configured services
        """
        clock_service = self.create_clock_service(match_state)
        roster_service = self.create_roster_service(match_state)

        return {
            "clock": clock_service,
            "ticker": self.create_ticker(clock_service),
            "roster": roster_service,
            "substitution": self.create_substitution_service(match_state, roster_service),
            "fairness": self.create_fairness_service(match_state),
        }

    def get_persistence_service(self) -> PersistenceService:
        """Get singleton persistence service."""
        if self._persistence_service is None:
            self._persistence_service = PersistenceService()
        return self._persistence_service

    def _get_export_service(self) -> ReportExporter:
        """Get singleton export service."""
        if self._export_service is None:
            self._export_service = ReportExporter()
        return self._export_service
