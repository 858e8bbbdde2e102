"""
MatchState model for the Equal Play Tracker.

This module contains the MatchState dataclass which represents the complete
state of a live match: the ordered roster, the match clock, settings, custom
stat definitions, the scoreboard and any staged substitutions.
"""
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from .player import CustomStat, Player, default_custom_stats
from .substitution import StagedSubstitution
from ..utils.time_utils import now_ts
from ..utils.constants import (
    DEFAULT_AWAY_NAME, DEFAULT_FIELD_TARGET, DEFAULT_HALF_MINUTES,
    DEFAULT_HOME_NAME, DEFAULT_MAX_SUGGESTIONS, MAX_FIELD_TARGET,
    MAX_HALF_MINUTES, MAX_MAX_SUGGESTIONS, MIN_FIELD_TARGET,
    MIN_HALF_MINUTES, MIN_MAX_SUGGESTIONS, SORT_ASC, SORT_ORDERS,
)


def clamp(value: Any, low: int, high: int, default: int) -> int:
    """Coerce ``value`` to an int inside ``[low, high]``; fall back to ``default``."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))


@dataclass
class MatchClock:
    """
    Match clock state.

    Attributes:
        running: Whether the clock is advancing
        elapsed_seconds: Seconds of match time accrued so far
        anchor_ts: Wall-clock epoch seconds at which elapsed was 0, while running
    """
    running: bool = False
    elapsed_seconds: int = 0
    anchor_ts: Optional[float] = None


@dataclass
class MatchSettings:
    """User configuration; every value is clamped by ``normalize``."""
    field_target: int = DEFAULT_FIELD_TARGET
    half_minutes: int = DEFAULT_HALF_MINUTES
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS
    position_aware: bool = True
    roster_sort: str = SORT_ASC

    def normalize(self) -> None:
        self.field_target = clamp(
            self.field_target, MIN_FIELD_TARGET, MAX_FIELD_TARGET, DEFAULT_FIELD_TARGET
        )
        self.half_minutes = clamp(
            self.half_minutes, MIN_HALF_MINUTES, MAX_HALF_MINUTES, DEFAULT_HALF_MINUTES
        )
        self.max_suggestions = clamp(
            self.max_suggestions, MIN_MAX_SUGGESTIONS, MAX_MAX_SUGGESTIONS, DEFAULT_MAX_SUGGESTIONS
        )
        self.position_aware = bool(self.position_aware)
        if self.roster_sort not in SORT_ORDERS:
            self.roster_sort = SORT_ASC


@dataclass
class Scoreboard:
    home_name: str = DEFAULT_HOME_NAME
    away_name: str = DEFAULT_AWAY_NAME
    home_score: int = 0
    away_score: int = 0


@dataclass
class MatchState:
    """
    Represents the complete state of a match.

    The roster is an ordered list (insertion order is display order). It is
    only ever replaced as a whole through ``update_players`` so concurrent
    triggers (a clock tick and a manual toggle) cannot lose each other's
    updates.

    Attributes:
        players: Ordered roster
        clock: Match clock
        settings: User configuration
        custom_stats: Tracked stat definitions
        scoreboard: Team names and scores
        staged: Pending substitutions awaiting a batch commit
    """
    players: List[Player] = field(default_factory=list)
    clock: MatchClock = field(default_factory=MatchClock)
    settings: MatchSettings = field(default_factory=MatchSettings)
    custom_stats: List[CustomStat] = field(default_factory=default_custom_stats)
    scoreboard: Scoreboard = field(default_factory=Scoreboard)
    staged: List[StagedSubstitution] = field(default_factory=list)
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    # ------------------------------------------------------------------
    # Atomic roster transforms
    # ------------------------------------------------------------------
    def update_players(
        self, transform: Callable[[List[Player]], Optional[List[Player]]]
    ) -> bool:
        """
        Replace the roster with ``transform(previous_roster)`` in one step.

        The transform receives a copy of the current list and returns the new
        list, or None to leave the roster untouched.

        Returns:
            True if the roster was replaced
        """
        with self.lock:
            updated = transform(list(self.players))
            if updated is None:
                return False
            self.players = list(updated)
            return True

    def snapshot(self) -> List[Player]:
        with self.lock:
            return list(self.players)

    def find_player(self, player_id: str) -> Optional[Player]:
        with self.lock:
            return next((p for p in self.players if p.id == player_id), None)

    def on_field_players(self) -> List[Player]:
        with self.lock:
            return [p for p in self.players if p.on_field]

    def bench_players(self) -> List[Player]:
        with self.lock:
            return [p for p in self.players if not p.on_field]

    def enabled_stats(self) -> List[CustomStat]:
        return [s for s in self.custom_stats if s.enabled]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_json(self) -> dict:
        """
        Convert MatchState to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        with self.lock:
            return {
                "players": [p.to_dict() for p in self.players],
                "match_seconds": self.clock.elapsed_seconds,
                "running": self.clock.running,
                "anchor_ts": self.clock.anchor_ts,
                "field_target": self.settings.field_target,
                "half_minutes": self.settings.half_minutes,
                "max_suggestions": self.settings.max_suggestions,
                "position_aware": self.settings.position_aware,
                "roster_sort": self.settings.roster_sort,
                "custom_stats": [s.to_dict() for s in self.custom_stats],
                "home_name": self.scoreboard.home_name,
                "away_name": self.scoreboard.away_name,
                "home_score": self.scoreboard.home_score,
                "away_score": self.scoreboard.away_score,
                "staged": [s.to_dict() for s in self.staged],
            }

    @staticmethod
    def from_json(data: dict) -> "MatchState":
        """
        Create MatchState from JSON dictionary.

        Missing keys fall back to defaults and out-of-range settings are
        clamped, so older or hand-edited saves still load.

        Args:
            data: Dictionary with match state data

        Returns:
            New MatchState instance
        """
        ms = MatchState()
        ms.players = _unique_players(Player.from_dict(p) for p in data.get("players", []) or [])

        ms.clock.elapsed_seconds = max(0, int(data.get("match_seconds", 0) or 0))
        ms.clock.running = bool(data.get("running", False))
        anchor = data.get("anchor_ts")
        ms.clock.anchor_ts = float(anchor) if anchor is not None else None
        if not ms.clock.running:
            ms.clock.anchor_ts = None
        elif ms.clock.anchor_ts is None:
            ms.clock.anchor_ts = now_ts() - ms.clock.elapsed_seconds

        ms.settings = MatchSettings(
            field_target=data.get("field_target", DEFAULT_FIELD_TARGET),
            half_minutes=data.get("half_minutes", DEFAULT_HALF_MINUTES),
            max_suggestions=data.get("max_suggestions", DEFAULT_MAX_SUGGESTIONS),
            position_aware=data.get("position_aware", True),
            roster_sort=data.get("roster_sort", SORT_ASC),
        )
        ms.settings.normalize()

        if data.get("custom_stats"):
            ms.custom_stats = [CustomStat.from_dict(s) for s in data["custom_stats"]]

        ms.scoreboard = Scoreboard(
            home_name=str(data.get("home_name") or DEFAULT_HOME_NAME),
            away_name=str(data.get("away_name") or DEFAULT_AWAY_NAME),
            home_score=max(0, int(data.get("home_score", 0) or 0)),
            away_score=max(0, int(data.get("away_score", 0) or 0)),
        )

        ms.staged = [StagedSubstitution.from_dict(s) for s in data.get("staged", []) or []]
        return ms


def _unique_players(players: Iterable[Player]) -> List[Player]:
    # Stored rosters may predate the uniqueness rules; first entry wins.
    seen_ids = set()
    seen_names = set()
    result: List[Player] = []
    for player in players:
        key = player.name.casefold()
        if not player.name or player.id in seen_ids or key in seen_names:
            continue
        seen_ids.add(player.id)
        seen_names.add(key)
        result.append(player)
    return result
