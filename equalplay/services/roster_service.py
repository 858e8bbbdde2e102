"""
Roster service for the Equal Play Tracker.

This module owns every change to who is on the roster and who is on the
field: adding and removing players, on/off toggles with the field-size
gate, one-for-one swaps and batch commits, stat counters, position tags,
custom stat definitions, settings and the scoreboard.

Invalid input never raises. Blank or duplicate names, unknown ids and
out-of-range settings are ignored or clamped and logged at DEBUG level.
"""
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..models import (
    CustomStat, MatchState, Player, Position, new_player_id,
    normalize_positions, stat_id_from_name,
)
from ..models.match_state import clamp
from ..utils.constants import (
    DEFAULT_FIELD_TARGET, DEFAULT_HALF_MINUTES, DEFAULT_MAX_SUGGESTIONS,
    DEFAULT_STAT_ICON, MAX_FIELD_TARGET, MAX_HALF_MINUTES,
    MAX_MAX_SUGGESTIONS, MIN_FIELD_TARGET, MIN_HALF_MINUTES,
    MIN_MAX_SUGGESTIONS, SORT_ASC, SORT_DESC, SORT_ORDERS,
)

logger = logging.getLogger(__name__)

# Called with (player being turned on, longest-serving field player).
SwapConfirmation = Callable[[Player, Player], bool]


def parse_bulk_names(text: str) -> List[str]:
    """Split pasted roster text on newlines or commas, dropping blanks."""
    return [name.strip() for name in re.split(r"[\n,]+", text or "") if name.strip()]


class RosterService:
    """Service for roster membership, on/off status and per-player counters."""

    def __init__(self, match_state: MatchState):
        self.match_state = match_state

    # ---------- Queries ---------- #

    def get_players(self) -> List[Player]:
        """Snapshot of the roster in insertion order."""
        return self.match_state.snapshot()

    def get_sorted_players(self, order: Optional[str] = None) -> List[Player]:
        """Roster sorted by name using ``order`` or the saved preference."""
        order = order if order in SORT_ORDERS else self.match_state.settings.roster_sort
        return sorted(
            self.get_players(),
            key=lambda p: p.name.casefold(),
            reverse=(order == SORT_DESC),
        )

    def get_player(self, player_id: str) -> Optional[Player]:
        return self.match_state.find_player(player_id)

    def on_field_count(self) -> int:
        return len(self.match_state.on_field_players())

    # ---------- Roster membership ---------- #

    def add_player(self, name: str, number: str = "") -> Optional[Player]:
        """
        Add one player.

        Returns:
            The new player, or None if the name was blank or already taken
        """
        added = self.add_players_with_positions([{"name": name, "number": number}])
        return added[0] if added else None

    def add_players(self, names: Iterable[str]) -> List[Player]:
        """Add several players by name; blanks and duplicates are skipped."""
        return self.add_players_with_positions({"name": n} for n in names)

    def add_players_with_positions(self, entries: Iterable[Dict[str, Any]]) -> List[Player]:
        """
        Add players described as ``{"name", "number"?, "positions"?}`` dicts.

        Duplicates are checked case-insensitively against the roster and
        against earlier entries of the same batch.

        Returns:
            Players actually added, in input order
        """
        candidates = []
        for entry in entries:
            name = str(entry.get("name") or "").strip()
            if not name:
                logger.debug("Rejected blank player name")
                continue
            candidates.append(
                Player(
                    id=new_player_id(),
                    name=name,
                    number=str(entry.get("number") or "").strip(),
                    positions=normalize_positions(entry.get("positions")),
                )
            )

        added: List[Player] = []

        def transform(players: List[Player]) -> Optional[List[Player]]:
            taken = {p.name.casefold() for p in players}
            for candidate in candidates:
                key = candidate.name.casefold()
                if key in taken:
                    logger.debug("Rejected duplicate player name %r", candidate.name)
                    continue
                taken.add(key)
                added.append(candidate)
            return players + added if added else None

        self.match_state.update_players(transform)
        if added:
            logger.info("Added %d player(s)", len(added))
        return added

    def remove_player(self, player_id: str) -> bool:
        """Remove a player and any staged substitution that mentions them."""
        with self.match_state.lock:
            removed = self.match_state.update_players(
                lambda players: (
                    [p for p in players if p.id != player_id]
                    if any(p.id == player_id for p in players) else None
                )
            )
            if removed:
                self.match_state.staged = [
                    s for s in self.match_state.staged if not s.involves(player_id)
                ]
                logger.info("Removed player %s", player_id)
            return removed

    # ---------- On/off status ---------- #

    def toggle(self, player_id: str, confirm: Optional[SwapConfirmation] = None) -> bool:
        """
        Flip a player's on-field flag.

        Turning a player on when the field already holds ``field_target``
        players asks ``confirm`` whether to send off the longest-serving field
        player instead. Without a confirmation nothing changes.

        Returns:
            True if any on/off flag changed
        """
        target = self.match_state.settings.field_target

        def transform(players: List[Player]) -> Optional[List[Player]]:
            player = next((p for p in players if p.id == player_id), None)
            if player is None:
                return None

            if not player.on_field:
                field_players = [p for p in players if p.on_field]
                if len(field_players) >= target:
                    longest = max(field_players, key=lambda p: p.seconds, default=None)
                    if longest is None or confirm is None or not confirm(player, longest):
                        logger.debug("Field full; %s stays on the bench", player.name)
                        return None
                    logger.info("Field full; swapping %s off for %s", longest.name, player.name)
                    return _apply_pairs(players, [(longest.id, player.id)])

            return [
                p.with_on_field(not p.on_field) if p.id == player_id else p
                for p in players
            ]

        return self.match_state.update_players(transform)

    def execute_swap(self, off_id: str, on_id: str) -> bool:
        """Set ``off_id`` off and ``on_id`` on in a single update."""
        changed = self.match_state.update_players(
            lambda players: _apply_pairs(players, [(off_id, on_id)])
        )
        if changed:
            logger.info("Swapped %s off for %s", off_id, on_id)
        return changed

    def execute_batch(self, pairs: Sequence[Tuple[str, str]]) -> bool:
        """
        Apply every (off_id, on_id) pair as one transition, then clear staging.

        Returns:
            True if the roster was updated
        """
        with self.match_state.lock:
            changed = self.match_state.update_players(
                lambda players: _apply_pairs(players, pairs) if pairs else None
            )
            self.match_state.staged = []
            if changed:
                logger.info("Committed %d substitution(s)", len(pairs))
            return changed

    def bench_all(self) -> None:
        self.match_state.update_players(
            lambda players: [p.with_on_field(False) for p in players]
        )

    # ---------- Counters and tags ---------- #

    def update_stat(self, player_id: str, stat_id: str, delta: int) -> bool:
        """Move a stat counter by ``delta``; counters never go below zero."""
        try:
            delta = int(delta)
        except (TypeError, ValueError):
            logger.debug("Ignored non-numeric stat delta %r", delta)
            return False

        return self.match_state.update_players(
            lambda players: (
                [p.with_stat_delta(stat_id, delta) if p.id == player_id else p for p in players]
                if any(p.id == player_id for p in players) else None
            )
        )

    def reset_stats(self) -> None:
        self.match_state.update_players(
            lambda players: [p.with_stats_cleared() for p in players]
        )

    def toggle_position(self, player_id: str, position: Any) -> bool:
        """Add or remove a position tag. Unknown positions are ignored."""
        parsed = Position.parse(position)
        if parsed is None:
            logger.debug("Ignored unknown position %r", position)
            return False

        return self.match_state.update_players(
            lambda players: (
                [p.with_position_toggled(parsed) if p.id == player_id else p for p in players]
                if any(p.id == player_id for p in players) else None
            )
        )

    # ---------- Custom stats ---------- #

    def add_custom_stat(self, name: str, icon: str = "") -> Optional[CustomStat]:
        name = (name or "").strip()
        if not name:
            return None
        stat_id = stat_id_from_name(name)
        with self.match_state.lock:
            if any(s.id == stat_id for s in self.match_state.custom_stats):
                logger.debug("Custom stat %r already exists", stat_id)
                return None
            stat = CustomStat(id=stat_id, name=name, icon=icon or DEFAULT_STAT_ICON, enabled=True)
            self.match_state.custom_stats = self.match_state.custom_stats + [stat]
            return stat

    def remove_custom_stat(self, stat_id: str) -> bool:
        """Remove a stat definition; built-in stats can only be disabled."""
        with self.match_state.lock:
            stat = next((s for s in self.match_state.custom_stats if s.id == stat_id), None)
            if stat is None or stat.protected:
                return False
            self.match_state.custom_stats = [
                s for s in self.match_state.custom_stats if s.id != stat_id
            ]
            return True

    def toggle_stat_enabled(self, stat_id: str) -> bool:
        with self.match_state.lock:
            for stat in self.match_state.custom_stats:
                if stat.id == stat_id:
                    stat.enabled = not stat.enabled
                    return True
            return False

    # ---------- Settings and scoreboard ---------- #

    def update_settings(
        self,
        *,
        field_target: Optional[Any] = None,
        half_minutes: Optional[Any] = None,
        max_suggestions: Optional[Any] = None,
        position_aware: Optional[bool] = None,
        roster_sort: Optional[str] = None,
    ) -> None:
        """Apply setting changes, clamping each value into its allowed range."""
        with self.match_state.lock:
            settings = self.match_state.settings
            if field_target is not None:
                settings.field_target = clamp(
                    field_target, MIN_FIELD_TARGET, MAX_FIELD_TARGET, settings.field_target
                )
            if half_minutes is not None:
                settings.half_minutes = clamp(
                    half_minutes, MIN_HALF_MINUTES, MAX_HALF_MINUTES, settings.half_minutes
                )
            if max_suggestions is not None:
                settings.max_suggestions = clamp(
                    max_suggestions, MIN_MAX_SUGGESTIONS, MAX_MAX_SUGGESTIONS,
                    settings.max_suggestions,
                )
            if position_aware is not None:
                settings.position_aware = bool(position_aware)
            if roster_sort is not None:
                settings.roster_sort = roster_sort if roster_sort in SORT_ORDERS else SORT_ASC

    def reset_settings(self) -> None:
        self.update_settings(
            field_target=DEFAULT_FIELD_TARGET,
            half_minutes=DEFAULT_HALF_MINUTES,
            max_suggestions=DEFAULT_MAX_SUGGESTIONS,
            position_aware=True,
            roster_sort=SORT_ASC,
        )

    def set_team_names(self, home: Optional[str] = None, away: Optional[str] = None) -> None:
        with self.match_state.lock:
            board = self.match_state.scoreboard
            if home and home.strip():
                board.home_name = home.strip()
            if away and away.strip():
                board.away_name = away.strip()

    def adjust_score(self, side: str, delta: int) -> bool:
        """Move the home or away score by ``delta``, never below zero."""
        with self.match_state.lock:
            board = self.match_state.scoreboard
            if side == "home":
                board.home_score = max(0, board.home_score + int(delta))
            elif side == "away":
                board.away_score = max(0, board.away_score + int(delta))
            else:
                logger.debug("Ignored score change for unknown side %r", side)
                return False
            return True


def _apply_pairs(
    players: List[Player], pairs: Sequence[Tuple[str, str]]
) -> Optional[List[Player]]:
    """
    Return ``players`` with every off id benched and every on id fielded.

    A player named on both sides ends up off. Returns None when no flag
    actually changes.
    """
    off_ids = {off for off, _ in pairs}
    on_ids = {on for _, on in pairs}
    result = []
    changed = False
    for player in players:
        if player.id in off_ids:
            updated = player.with_on_field(False)
        elif player.id in on_ids:
            updated = player.with_on_field(True)
        else:
            updated = player
        changed = changed or updated is not player
        result.append(updated)
    return result if changed else None
