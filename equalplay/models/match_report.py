"""Dataclasses representing playing time statistics and reports."""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class MinutesStats:
    """Distribution summary of accrued seconds across the roster."""

    median: float = 0.0
    mean: float = 0.0
    stdev: float = 0.0
    min: int = 0
    max: int = 0

    def to_dict(self) -> Dict[str, float]:
        return {
            "median": self.median,
            "mean": self.mean,
            "stdev": self.stdev,
            "min": self.min,
            "max": self.max,
        }


@dataclass
class PlayerTimeSummary:
    """Playing time information for a single player."""

    id: str
    name: str
    number: str
    on_field: bool
    seconds: int
    delta_from_median: float
    positions: List[str] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)


@dataclass
class MatchReport:
    """Snapshot of playing time distribution for the current match."""

    generated_ts: float
    match_seconds: int
    roster_size: int
    on_field_count: int
    minutes_stats: MinutesStats
    fairness: str
    players: List[PlayerTimeSummary] = field(default_factory=list)
    stat_totals: Dict[str, int] = field(default_factory=dict)
