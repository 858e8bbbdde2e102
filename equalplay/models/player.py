"""
Player model for the Equal Play Tracker.

This module contains the Player dataclass which represents an individual
player and their live match state (accrued seconds, on-field flag, stat
counters and position tags), plus the CustomStat definitions that decide
which counters are tracked.

Players are treated as values: mutations go through ``dataclasses.replace``
(see the ``with_*`` helpers) so the roster can be updated as a transform of
the previous list.
"""
import re
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from ..utils.constants import DEFAULT_STAT_ICON, PROTECTED_STAT_IDS


class Position(Enum):
    """Position tags a player may carry (multiple allowed)."""
    GK = "GK"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"

    @property
    def full_name(self) -> str:
        return POSITION_FULL_NAMES[self]

    @classmethod
    def parse(cls, value: Any) -> Optional["Position"]:
        """
        Resolve a position from its code or full name, case-insensitively.

        Returns:
            Matching Position, or None when the value is not recognised
        """
        if isinstance(value, Position):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip().upper()
        for position in cls:
            if text == position.value or text == position.full_name.upper():
                return position
        return None


POSITION_FULL_NAMES = {
    Position.GK: "Goalkeeper",
    Position.DEF: "Defense",
    Position.MID: "Midfield",
    Position.FWD: "Forward",
}

ALL_POSITIONS: List[Position] = list(Position)


def normalize_positions(values: Optional[Iterable[Any]]) -> List[str]:
    """
    Turn arbitrary position input into a de-duplicated list of codes.

    Unknown values are dropped. The result follows enumeration order so
    equal tag sets always serialize the same way.
    """
    wanted = {Position.parse(v) for v in (values or [])}
    return [p.value for p in ALL_POSITIONS if p in wanted]


def new_player_id() -> str:
    """Generate an opaque unique player id."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Player:
    """
    A rostered player and their live match state.

    Attributes:
        id: Opaque unique identifier
        name: Display name (trimmed, unique within roster ignoring case)
        number: Jersey number, free-form short string
        seconds: Accrued on-field seconds for this match
        on_field: Whether the player is currently on the field
        stats: Stat id -> non-negative count
        positions: Position codes (see Position), no duplicates
    """
    id: str
    name: str
    number: str = ""
    seconds: int = 0
    on_field: bool = False
    stats: Dict[str, int] = field(default_factory=dict)
    positions: List[str] = field(default_factory=list)

    # Mutable field types; compare by value but never hash.
    __hash__ = None

    def has_positions(self) -> bool:
        return bool(self.positions)

    def shares_position_with(self, other: "Player") -> bool:
        """True when either player is untagged or their tags intersect."""
        if not self.positions or not other.positions:
            return True
        return bool(set(self.positions) & set(other.positions))

    def stat(self, stat_id: str) -> int:
        return self.stats.get(stat_id, 0)

    def with_seconds_added(self, seconds: int) -> "Player":
        return replace(self, seconds=self.seconds + max(0, seconds))

    def with_seconds_reset(self) -> "Player":
        return replace(self, seconds=0) if self.seconds else self

    def with_stats_cleared(self) -> "Player":
        return replace(self, stats={}) if self.stats else self

    def with_on_field(self, on_field: bool) -> "Player":
        if self.on_field == on_field:
            return self
        return replace(self, on_field=on_field)

    def with_stat_delta(self, stat_id: str, delta: int) -> "Player":
        """Return a copy with ``stat_id`` moved by ``delta``, floored at 0."""
        stats = dict(self.stats)
        stats[stat_id] = max(0, stats.get(stat_id, 0) + int(delta))
        return replace(self, stats=stats)

    def with_position_toggled(self, position: Position) -> "Player":
        current = set(self.positions)
        if position.value in current:
            current.discard(position.value)
        else:
            current.add(position.value)
        return replace(self, positions=normalize_positions(current))

    def to_dict(self) -> Dict[str, Any]:
        """Convert player to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "number": self.number,
            "seconds": self.seconds,
            "on_field": self.on_field,
            "stats": dict(self.stats),
            "positions": list(self.positions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """
        Create player from dictionary for JSON deserialization.

        Negative counters found in stored data are clamped to zero.
        """
        stats = {
            str(k): max(0, int(v)) for k, v in (data.get("stats") or {}).items()
        }
        return cls(
            id=str(data.get("id") or new_player_id()),
            name=str(data["name"]).strip(),
            number=str(data.get("number") or "").strip(),
            seconds=max(0, int(data.get("seconds", 0) or 0)),
            on_field=bool(data.get("on_field", False)),
            stats=stats,
            positions=normalize_positions(data.get("positions")),
        )


def stat_id_from_name(name: str) -> str:
    """Derive a stable stat id: lowercase, whitespace runs become ``_``."""
    return re.sub(r"\s+", "_", name.strip().lower())


@dataclass
class CustomStat:
    """A tracked per-player counter definition."""
    id: str
    name: str
    icon: str = DEFAULT_STAT_ICON
    enabled: bool = True

    @property
    def protected(self) -> bool:
        """Built-in stats can be disabled but never removed."""
        return self.id in PROTECTED_STAT_IDS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomStat":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            icon=str(data.get("icon") or DEFAULT_STAT_ICON),
            enabled=bool(data.get("enabled", True)),
        )


def default_custom_stats() -> List[CustomStat]:
    """Fresh copy of the built-in stat definitions."""
    return [
        CustomStat(id="goals", name="Goals", icon="⚽", enabled=True),
        CustomStat(id="assists", name="Assists", icon="🅰️", enabled=True),
        CustomStat(id="saves", name="Saves", icon="🧤", enabled=True),
        CustomStat(id="shots", name="Shots", icon="🎯", enabled=False),
        CustomStat(id="steals", name="Steals", icon="🦶", enabled=False),
        CustomStat(id="blocks", name="Blocks", icon="🛡️", enabled=False),
    ]
