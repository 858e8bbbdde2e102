"""Dataclasses describing suggested and staged substitutions."""

import uuid
from dataclasses import dataclass
from typing import Any, Dict

from .player import Player


@dataclass(frozen=True)
class SubstitutionSuggestion:
    """A derived off/on pairing. Recomputed on every query, never persisted."""

    off: Player
    on: Player
    diff: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "off": self.off.to_dict(),
            "on": self.on.to_dict(),
            "diff": self.diff,
        }


@dataclass(frozen=True)
class StagedSubstitution:
    """A user-proposed swap waiting for a batch commit."""

    id: str
    off_player: Player
    on_player: Player
    created_ts: float

    @classmethod
    def create(cls, off_player: Player, on_player: Player, created_ts: float) -> "StagedSubstitution":
        return cls(
            id=uuid.uuid4().hex,
            off_player=off_player,
            on_player=on_player,
            created_ts=created_ts,
        )

    def involves(self, player_id: str) -> bool:
        return player_id in (self.off_player.id, self.on_player.id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "off_player": self.off_player.to_dict(),
            "on_player": self.on_player.to_dict(),
            "created_ts": self.created_ts,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StagedSubstitution":
        return cls(
            id=str(data["id"]),
            off_player=Player.from_dict(data["off_player"]),
            on_player=Player.from_dict(data["on_player"]),
            created_ts=float(data.get("created_ts", 0.0)),
        )
