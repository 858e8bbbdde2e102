"""Tests for the player and match state models."""

from collections.abc import Hashable
from unittest.mock import patch

import pytest

from equalplay.models import MatchState, Player, Position
from equalplay.utils import fmt_mmss


def test_position_parse_accepts_codes_and_full_names():
    assert Position.parse("gk") is Position.GK
    assert Position.parse("Midfield") is Position.MID
    assert Position.parse(Position.FWD) is Position.FWD
    assert Position.parse("libero") is None
    assert Position.parse(None) is None


def test_player_from_dict_clamps_negative_counters():
    player = Player.from_dict({
        "id": "x",
        "name": " Alice ",
        "seconds": -30,
        "stats": {"goals": -2, "assists": 1},
        "positions": ["DEF", "GK", "DEF"],
    })

    assert player.name == "Alice"
    assert player.seconds == 0
    assert player.stats == {"goals": 0, "assists": 1}
    assert player.positions == ["GK", "DEF"]


def test_player_helpers_return_new_values():
    player = Player(id="a", name="Alice")

    moved = player.with_on_field(True).with_seconds_added(5)

    assert player.on_field is False
    assert moved.on_field is True
    assert moved.seconds == 5
    assert player.with_on_field(False) is player


def test_player_compares_by_value_but_is_not_hashable():
    player = Player(id="a", name="Alice", positions=["MID"])

    assert player == Player(id="a", name="Alice", positions=["MID"])
    assert not isinstance(player, Hashable)
    with pytest.raises(TypeError):
        hash(player)


def test_shares_position_with():
    untagged = Player(id="a", name="A")
    defender = Player(id="b", name="B", positions=["DEF"])
    forward = Player(id="c", name="C", positions=["FWD", "MID"])
    midfielder = Player(id="d", name="D", positions=["MID"])

    assert untagged.shares_position_with(defender)
    assert not defender.shares_position_with(forward)
    assert forward.shares_position_with(midfielder)


def test_update_players_is_atomic_replace():
    state = MatchState(players=[Player(id="a", name="Alice")])

    assert not state.update_players(lambda players: None)
    assert state.update_players(lambda players: players + [Player(id="b", name="Bob")])
    assert [p.id for p in state.players] == ["a", "b"]


def test_from_json_normalizes_stored_data():
    state = MatchState.from_json({
        "players": [
            {"id": "a", "name": "Alice", "seconds": 90, "on_field": True},
            {"id": "b", "name": "alice"},
            {"id": "a", "name": "Duplicate Id"},
        ],
        "match_seconds": 90,
        "running": False,
        "anchor_ts": 12345.0,
        "field_target": 40,
        "half_minutes": -5,
        "max_suggestions": "x",
        "roster_sort": "random",
    })

    assert [p.name for p in state.players] == ["Alice"]
    assert state.clock.elapsed_seconds == 90
    assert state.clock.anchor_ts is None
    assert state.settings.field_target == 11
    assert state.settings.half_minutes == 1
    assert state.settings.max_suggestions == 3
    assert state.settings.roster_sort == "asc"
    assert [s.id for s in state.custom_stats][:3] == ["goals", "assists", "saves"]


def test_to_json_keeps_running_clock_anchor():
    state = MatchState(players=[Player(id="a", name="Alice", on_field=True)])
    state.clock.running = True
    state.clock.elapsed_seconds = 42
    state.clock.anchor_ts = 1000.0
    state.scoreboard.home_score = 2

    restored = MatchState.from_json(state.to_json())

    assert restored.clock.running is True
    assert restored.clock.anchor_ts == 1000.0
    assert restored.clock.elapsed_seconds == 42
    assert restored.players == state.players
    assert restored.scoreboard.home_score == 2


def test_from_json_anchors_running_clock_without_anchor():
    with patch("equalplay.models.match_state.now_ts", return_value=1000.0):
        state = MatchState.from_json({"players": [], "match_seconds": 90, "running": True})

    assert state.clock.running is True
    assert state.clock.anchor_ts == 910.0


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "00:00"), (59, "00:59"), (90, "01:30"), (3661, "61:01"), (-5, "00:00"), (270.9, "04:30")],
)
def test_fmt_mmss(seconds, expected):
    assert fmt_mmss(seconds) == expected
