"""Substitution suggestions and staged batch substitutions."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set

from ..models import MatchState, Player, StagedSubstitution, SubstitutionSuggestion
from ..models.match_state import clamp
from ..utils import now_ts
from ..utils.constants import (
    DEFAULT_MAX_SUGGESTIONS, MAX_MAX_SUGGESTIONS, MIN_MAX_SUGGESTIONS,
    SWAP_THRESHOLD_SECONDS,
)
from .roster_service import RosterService

logger = logging.getLogger(__name__)


def suggest_substitutions(
    on_field: Sequence[Player],
    bench: Sequence[Player],
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    position_aware: bool = True,
) -> List[SubstitutionSuggestion]:
    """
    Pair overplayed field players with underplayed bench players.

    Field players are taken most-played first and each is matched with the
    first unused bench player (least-played first) who trails by more than
    ``SWAP_THRESHOLD_SECONDS``. When position tags exist, a first pass only
    accepts compatible pairs (either side untagged, or shared tag); a second
    pass fills the remaining slots on time alone. Matching is greedy and
    order dependent; ties keep roster order.

    Returns:
        At most ``max_suggestions`` suggestions, no player used twice
    """
    if not on_field or not bench:
        return []

    limit = clamp(max_suggestions, MIN_MAX_SUGGESTIONS, MAX_MAX_SUGGESTIONS, DEFAULT_MAX_SUGGESTIONS)
    field_sorted = sorted(on_field, key=lambda p: p.seconds, reverse=True)
    bench_sorted = sorted(bench, key=lambda p: p.seconds)

    suggestions: List[SubstitutionSuggestion] = []
    used: Set[str] = set()

    def run_pass(require_position_match: bool) -> None:
        for field_player in field_sorted:
            if len(suggestions) >= limit:
                return
            if field_player.id in used:
                continue
            for bench_player in bench_sorted:
                if bench_player.id in used:
                    continue
                if require_position_match and not field_player.shares_position_with(bench_player):
                    continue
                diff = field_player.seconds - bench_player.seconds
                if diff > SWAP_THRESHOLD_SECONDS:
                    suggestions.append(
                        SubstitutionSuggestion(off=field_player, on=bench_player, diff=diff)
                    )
                    used.update((field_player.id, bench_player.id))
                    break

    has_positions = any(p.has_positions() for p in list(on_field) + list(bench))
    if position_aware and has_positions:
        run_pass(require_position_match=True)
    run_pass(require_position_match=False)
    return suggestions


class SubstitutionService:
    """
    Suggestion queries plus the staging area for batch substitutions.

    Staged pairs are only proposals; ``commit_staged`` hands them to
    :meth:`RosterService.execute_batch`, the same atomic primitive used for
    accepting a suggestion.
    """

    def __init__(self, match_state: MatchState, roster_service: Optional[RosterService] = None):
        self.match_state = match_state
        self.roster_service = roster_service or RosterService(match_state)

    # ---------- Suggestions ---------- #

    def get_suggestions(
        self,
        max_count: Optional[int] = None,
        position_aware: Optional[bool] = None,
    ) -> List[SubstitutionSuggestion]:
        """Suggestions for the current roster; arguments default to the saved settings."""
        settings = self.match_state.settings
        with self.match_state.lock:
            players = list(self.match_state.players)
        return suggest_substitutions(
            [p for p in players if p.on_field],
            [p for p in players if not p.on_field],
            max_suggestions=settings.max_suggestions if max_count is None else max_count,
            position_aware=settings.position_aware if position_aware is None else position_aware,
        )

    def accept_suggestion(self, suggestion: SubstitutionSuggestion) -> bool:
        return self.roster_service.execute_swap(suggestion.off.id, suggestion.on.id)

    # ---------- Staging ---------- #

    def get_staged(self) -> List[StagedSubstitution]:
        with self.match_state.lock:
            return list(self.match_state.staged)

    def stage(self, off_id: str, on_id: str) -> Optional[StagedSubstitution]:
        """
        Stage a field player to come off for a bench player.

        Rejected (returns None) when either player is unknown, the off player
        is not on the field, the on player is not on the bench, or either is
        already part of a staged pair.
        """
        with self.match_state.lock:
            off_player = self.match_state.find_player(off_id)
            on_player = self.match_state.find_player(on_id)
            if off_player is None or on_player is None:
                logger.debug("Cannot stage unknown player(s) %s/%s", off_id, on_id)
                return None
            if not off_player.on_field or on_player.on_field:
                logger.debug("Cannot stage %s -> %s: wrong side of the line", off_id, on_id)
                return None
            if any(s.involves(off_id) or s.involves(on_id) for s in self.match_state.staged):
                logger.debug("Player already staged in %s -> %s", off_id, on_id)
                return None

            staged = StagedSubstitution.create(off_player, on_player, now_ts())
            self.match_state.staged = self.match_state.staged + [staged]
            return staged

    def unstage(self, staged_id: str) -> bool:
        with self.match_state.lock:
            remaining = [s for s in self.match_state.staged if s.id != staged_id]
            if len(remaining) == len(self.match_state.staged):
                return False
            self.match_state.staged = remaining
            return True

    def clear_staged(self) -> None:
        with self.match_state.lock:
            self.match_state.staged = []

    def commit_staged(self) -> bool:
        """Apply all staged pairs in one roster update and clear the batch."""
        with self.match_state.lock:
            pairs = [(s.off_player.id, s.on_player.id) for s in self.match_state.staged]
            return self.roster_service.execute_batch(pairs)
