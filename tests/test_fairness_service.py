"""Tests for minutes statistics, fairness rating and reports."""

import csv
import io
import math

import pytest

from equalplay.models import MatchState, Player
from equalplay.services import FairnessService, classify_fairness, compute_minutes_stats


def _players(*seconds):
    return [Player(id=str(i), name=f"P{i}", seconds=s) for i, s in enumerate(seconds)]


def test_empty_roster_gives_zero_stats():
    stats = compute_minutes_stats([])

    assert stats.median == 0
    assert stats.mean == 0
    assert stats.stdev == 0
    assert stats.min == 0
    assert stats.max == 0


def test_odd_roster_statistics():
    stats = compute_minutes_stats(_players(30, 10, 20))

    assert stats.median == 20
    assert stats.mean == 20
    assert stats.stdev == pytest.approx(math.sqrt(200 / 3), rel=1e-4)
    assert stats.min == 10
    assert stats.max == 30


def test_even_roster_median_is_midpoint():
    assert compute_minutes_stats(_players(10, 20)).median == 15


@pytest.mark.parametrize(
    "stdev, expected",
    [
        (0, "Excellent"),
        (59.9, "Excellent"),
        (60, "Good"),
        (119.9, "Good"),
        (120, "Needs Improvement"),
    ],
)
def test_classify_fairness_thresholds(stdev, expected):
    assert classify_fairness(stdev) == expected


def _report_state():
    state = MatchState(
        players=[
            Player(id="a", name="Alice", number="10", seconds=300, on_field=True, stats={"goals": 2}),
            Player(id="b", name="Bob", number="", seconds=240, stats={"assists": 1}),
        ]
    )
    state.clock.elapsed_seconds = 300
    return state


def test_generate_report_includes_delta_from_median():
    service = FairnessService(_report_state())

    report = service.generate_report()

    assert report.roster_size == 2
    assert report.on_field_count == 1
    assert report.match_seconds == 300
    assert report.minutes_stats.median == 270
    assert report.fairness == "Excellent"
    deltas = {s.name: s.delta_from_median for s in report.players}
    assert deltas == {"Alice": 30, "Bob": -30}
    assert report.stat_totals["goals"] == 2
    assert report.stat_totals["assists"] == 1


def test_report_text_sections():
    text = FairnessService(_report_state()).generate_report_text()

    assert text.startswith("GAME REPORT\n")
    assert "Match Time: 05:00" in text
    assert "#10 Alice: 05:00" in text
    assert "\nBob: 04:00" in text
    assert "GOALS:\n  Alice: 2" in text
    assert "  Goals: 2" in text
    assert "Average Playing Time: 04:30" in text
    assert "Standard Deviation: 30s" in text
    assert text.rstrip().endswith("Fairness Rating: Excellent")


def test_export_csv_uses_enabled_stats():
    state = _report_state()
    csv_text = FairnessService(state).export_csv()

    rows = list(csv.reader(io.StringIO(csv_text)))
    assert rows[0] == ["Number", "Name", "Minutes", "Goals", "Assists", "Saves"]
    assert rows[1] == ["10", "Alice", "05:00", "2", "0", "0"]
    assert rows[2] == ["", "Bob", "04:00", "0", "1", "0"]
    assert csv_text.startswith('"Number","Name","Minutes"')


def test_export_csv_omits_disabled_stats():
    state = _report_state()
    for stat in state.custom_stats:
        if stat.id == "saves":
            stat.enabled = False

    header = FairnessService(state).export_csv().splitlines()[0]
    assert "Saves" not in header
