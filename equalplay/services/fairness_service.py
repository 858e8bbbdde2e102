"""Fairness statistics and match reports for the Equal Play Tracker."""

from __future__ import annotations

import csv
import datetime as dt
import io
import statistics
from typing import Iterable, List, Optional, Protocol, Sequence

from ..models import CustomStat, MatchReport, MatchState, MinutesStats, Player, PlayerTimeSummary
from ..utils import fmt_mmss, now_ts
from ..utils.constants import (
    FAIRNESS_EXCELLENT, FAIRNESS_EXCELLENT_STDEV, FAIRNESS_GOOD,
    FAIRNESS_GOOD_STDEV, FAIRNESS_NEEDS_IMPROVEMENT,
)


def compute_minutes_stats(players: Iterable[Player]) -> MinutesStats:
    """
    Summarize accrued seconds across ``players``.

    Uses the population standard deviation (divide by n). An empty roster
    yields all zeros.
    """
    secs = sorted(max(0, p.seconds) for p in players)
    if not secs:
        return MinutesStats()

    return MinutesStats(
        median=float(statistics.median(secs)),
        mean=float(statistics.mean(secs)),
        stdev=float(statistics.pstdev(secs)),
        min=secs[0],
        max=secs[-1],
    )


def classify_fairness(stdev: float) -> str:
    """Rate play-time balance from the standard deviation in seconds."""
    if stdev < FAIRNESS_EXCELLENT_STDEV:
        return FAIRNESS_EXCELLENT
    if stdev < FAIRNESS_GOOD_STDEV:
        return FAIRNESS_GOOD
    return FAIRNESS_NEEDS_IMPROVEMENT


class ExportServiceInterface(Protocol):
    """Interface for report export."""

    def to_text(self, report: MatchReport, enabled_stats: Sequence[CustomStat]) -> str:
        ...

    def to_csv(self, players: Sequence[Player], enabled_stats: Sequence[CustomStat]) -> str:
        ...


class ReportExporter:
    """Formats a :class:`MatchReport` as a plain-text summary or CSV."""

    RULE = "=" * 30

    def to_text(self, report: MatchReport, enabled_stats: Sequence[CustomStat]) -> str:
        generated = dt.datetime.fromtimestamp(report.generated_ts)
        lines = [
            "GAME REPORT",
            f"Match Time: {fmt_mmss(report.match_seconds)}",
            f"Date: {generated.date().isoformat()}",
            "",
            "PLAYING TIME SUMMARY",
            self.RULE,
        ]
        by_minutes = sorted(report.players, key=lambda s: s.seconds, reverse=True)
        for summary in by_minutes:
            prefix = f"#{summary.number} " if summary.number else ""
            lines.append(f"{prefix}{summary.name}: {fmt_mmss(summary.seconds)}")

        lines += ["", "STATS SUMMARY", self.RULE]
        for stat in enabled_stats:
            leaders = sorted(
                (s for s in report.players if s.stats.get(stat.id, 0) > 0),
                key=lambda s: s.stats.get(stat.id, 0),
                reverse=True,
            )
            if leaders:
                lines.append("")
                lines.append(f"{stat.name.upper()}:")
                lines.extend(f"  {s.name}: {s.stats[stat.id]}" for s in leaders)

        lines += ["", "TEAM TOTALS:"]
        for stat in enabled_stats:
            total = report.stat_totals.get(stat.id, 0)
            if total > 0:
                lines.append(f"  {stat.name}: {total}")

        stats = report.minutes_stats
        lines += [
            "",
            "FAIRNESS METRICS",
            self.RULE,
            f"Average Playing Time: {fmt_mmss(stats.mean)}",
            f"Playing Time Range: {fmt_mmss(stats.min)} - {fmt_mmss(stats.max)}",
            f"Standard Deviation: {round(stats.stdev)}s",
            f"Fairness Rating: {report.fairness}",
        ]
        return "\n".join(lines) + "\n"

    def to_csv(self, players: Sequence[Player], enabled_stats: Sequence[CustomStat]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_ALL)
        writer.writerow(["Number", "Name", "Minutes"] + [s.name for s in enabled_stats])
        for player in players:
            writer.writerow(
                [player.number or "", player.name, fmt_mmss(player.seconds)]
                + [str(player.stat(s.id)) for s in enabled_stats]
            )
        csv_text = buffer.getvalue()
        buffer.close()
        return csv_text


class FairnessService:
    """
    Derives playing time statistics and reports from the match state.

    Export formatting is delegated to an injected exporter.
    """

    def __init__(
        self,
        match_state: MatchState,
        export_service: Optional[ExportServiceInterface] = None,
    ) -> None:
        self.match_state = match_state
        self.export_service = export_service or ReportExporter()

    def get_minutes_stats(self) -> MinutesStats:
        return compute_minutes_stats(self.match_state.snapshot())

    def get_fairness_rating(self) -> str:
        return classify_fairness(self.get_minutes_stats().stdev)

    def generate_report(self) -> MatchReport:
        """Build a :class:`MatchReport` snapshot for the current match."""

        with self.match_state.lock:
            players = list(self.match_state.players)
            match_seconds = self.match_state.clock.elapsed_seconds
            enabled = self.match_state.enabled_stats()

        minutes_stats = compute_minutes_stats(players)
        summaries: List[PlayerTimeSummary] = [
            PlayerTimeSummary(
                id=p.id,
                name=p.name,
                number=p.number,
                on_field=p.on_field,
                seconds=p.seconds,
                delta_from_median=p.seconds - minutes_stats.median,
                positions=list(p.positions),
                stats=dict(p.stats),
            )
            for p in players
        ]
        stat_totals = {s.id: sum(p.stat(s.id) for p in players) for s in enabled}

        return MatchReport(
            generated_ts=now_ts(),
            match_seconds=match_seconds,
            roster_size=len(players),
            on_field_count=sum(1 for p in players if p.on_field),
            minutes_stats=minutes_stats,
            fairness=classify_fairness(minutes_stats.stdev),
            players=summaries,
            stat_totals=stat_totals,
        )

    def generate_report_text(self, report: Optional[MatchReport] = None) -> str:
        report = report or self.generate_report()
        return self.export_service.to_text(report, self.match_state.enabled_stats())

    def export_csv(self) -> str:
        """Return the roster as CSV with minutes and enabled stat columns."""
        return self.export_service.to_csv(
            self.match_state.snapshot(), self.match_state.enabled_stats()
        )
