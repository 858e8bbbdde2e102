"""Tests for substitution suggestions and staged batch substitutions."""

import pytest

from equalplay.models import MatchState, Player
from equalplay.services import RosterService, SubstitutionService, suggest_substitutions


def _p(pid, seconds, on_field=False, positions=None):
    return Player(id=pid, name=pid.upper(), seconds=seconds, on_field=on_field, positions=positions or [])


def _pairs(suggestions):
    return [(s.off.id, s.on.id, s.diff) for s in suggestions]


def test_greedy_pairs_most_played_with_least_played():
    field = [_p("a", 300, True), _p("b", 200, True), _p("c", 100, True)]
    bench = [_p("d", 0), _p("e", 50)]

    result = suggest_substitutions(field, bench, max_suggestions=3)

    assert _pairs(result) == [("a", "d", 300), ("b", "e", 150)]


def test_threshold_is_strict():
    field = [_p("a", 100, True)]

    assert suggest_substitutions(field, [_p("b", 40)]) == []
    assert _pairs(suggest_substitutions(field, [_p("b", 39)])) == [("a", "b", 61)]


def test_empty_sides_give_no_suggestions():
    assert suggest_substitutions([], [_p("b", 0)]) == []
    assert suggest_substitutions([_p("a", 500, True)], []) == []


@pytest.mark.parametrize("limit, expected", [(1, 1), (0, 1), (50, 4)])
def test_suggestion_count_is_capped_and_clamped(limit, expected):
    field = [_p(f"f{i}", 600 - i, True) for i in range(4)]
    bench = [_p(f"b{i}", i) for i in range(4)]

    assert len(suggest_substitutions(field, bench, max_suggestions=limit)) == expected


def test_players_are_never_reused():
    field = [_p("a", 300, True), _p("b", 290, True)]
    bench = [_p("c", 0)]

    result = suggest_substitutions(field, bench)

    assert _pairs(result) == [("a", "c", 300)]


def test_ties_keep_roster_order():
    field = [_p("x", 100, True), _p("y", 100, True)]
    bench = [_p("z", 0), _p("w", 0)]

    assert _pairs(suggest_substitutions(field, bench)) == [("x", "z", 100), ("y", "w", 100)]


def test_position_pass_prefers_shared_tags():
    field = [_p("a", 300, True, ["DEF"]), _p("b", 200, True, ["FWD"])]
    bench = [_p("c", 0, positions=["FWD"]), _p("d", 10, positions=["DEF"])]

    aware = suggest_substitutions(field, bench, position_aware=True)
    blind = suggest_substitutions(field, bench, position_aware=False)

    assert _pairs(aware) == [("a", "d", 290), ("b", "c", 200)]
    assert _pairs(blind) == [("a", "c", 300), ("b", "d", 190)]


def test_time_only_pass_fills_when_positions_never_match():
    field = [_p("a", 300, True, ["GK"])]
    bench = [_p("c", 0, positions=["FWD"])]

    assert _pairs(suggest_substitutions(field, bench, position_aware=True)) == [("a", "c", 300)]


class TestSubstitutionService:
    def setup_method(self):
        self.state = MatchState(
            players=[
                _p("a", 300, True),
                _p("b", 200, True),
                _p("c", 0),
                _p("d", 20),
            ]
        )
        self.roster = RosterService(self.state)
        self.service = SubstitutionService(self.state, self.roster)

    def on_field_ids(self):
        return {p.id for p in self.state.players if p.on_field}

    def test_get_suggestions_uses_settings(self):
        self.state.settings.max_suggestions = 1

        assert _pairs(self.service.get_suggestions()) == [("a", "c", 300)]
        assert len(self.service.get_suggestions(max_count=5)) == 2

    def test_accept_suggestion_swaps_players(self):
        suggestion = self.service.get_suggestions()[0]

        assert self.service.accept_suggestion(suggestion)
        assert self.on_field_ids() == {"b", "c"}

    def test_stage_validates_sides_and_duplicates(self):
        assert self.service.stage("c", "d") is None
        assert self.service.stage("a", "b") is None
        assert self.service.stage("a", "missing") is None

        staged = self.service.stage("a", "c")
        assert staged is not None
        assert staged.off_player.id == "a"
        assert self.service.stage("a", "d") is None
        assert self.service.stage("b", "c") is None
        assert len(self.service.get_staged()) == 1

    def test_commit_staged_applies_all_pairs_and_clears(self):
        self.service.stage("a", "c")
        self.service.stage("b", "d")

        assert self.service.commit_staged()
        assert self.on_field_ids() == {"c", "d"}
        assert self.service.get_staged() == []

    def test_unstage_and_clear(self):
        first = self.service.stage("a", "c")
        self.service.stage("b", "d")

        assert self.service.unstage(first.id)
        assert not self.service.unstage(first.id)
        assert [s.off_player.id for s in self.service.get_staged()] == ["b"]

        self.service.clear_staged()
        assert self.service.get_staged() == []

    def test_removing_player_drops_their_staged_pair(self):
        self.service.stage("a", "c")

        assert self.roster.remove_player("c")
        assert self.service.get_staged() == []
