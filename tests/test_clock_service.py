import unittest
from unittest.mock import patch

from equalplay.models import MatchState, Player
from equalplay.services import ClockService


def _roster():
    return [
        Player(id="a", name="Alice", seconds=100, on_field=True),
        Player(id="b", name="Bob", seconds=40, on_field=False),
        Player(id="c", name="Cara", seconds=0, on_field=True),
    ]


class ClockServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = MatchState(players=_roster())
        self.service = ClockService(self.state)

    def seconds(self):
        return {p.id: p.seconds for p in self.state.players}

    def test_tick_is_noop_while_paused(self) -> None:
        self.assertFalse(self.service.tick())
        self.assertEqual(self.state.clock.elapsed_seconds, 0)
        self.assertEqual(self.seconds(), {"a": 100, "b": 40, "c": 0})

    def test_tick_advances_clock_and_on_field_players_only(self) -> None:
        with patch("equalplay.services.clock_service.now_ts", return_value=1000):
            self.service.start()

        self.assertTrue(self.service.tick())
        self.assertTrue(self.service.tick())

        self.assertEqual(self.state.clock.elapsed_seconds, 2)
        self.assertEqual(self.seconds(), {"a": 102, "b": 40, "c": 2})

    def test_start_anchors_to_wall_clock(self) -> None:
        self.state.clock.elapsed_seconds = 5
        with patch("equalplay.services.clock_service.now_ts", return_value=2000):
            self.service.start()

        self.assertTrue(self.state.clock.running)
        self.assertEqual(self.state.clock.anchor_ts, 1995)

    def test_pause_clears_anchor_and_stops_ticks(self) -> None:
        with patch("equalplay.services.clock_service.now_ts", return_value=1000):
            self.service.start()
        self.service.tick()
        self.service.pause()

        self.assertFalse(self.state.clock.running)
        self.assertIsNone(self.state.clock.anchor_ts)
        self.assertFalse(self.service.tick())
        self.assertEqual(self.state.clock.elapsed_seconds, 1)

    def test_toggle_running(self) -> None:
        self.assertTrue(self.service.toggle_running())
        self.assertFalse(self.service.toggle_running())

    def test_reconcile_applies_gap_once(self) -> None:
        with patch("equalplay.services.clock_service.now_ts", return_value=1000):
            self.service.start()

        applied = self.service.reconcile_on_resume(now=1030)
        self.assertEqual(applied, 30)
        self.assertEqual(self.state.clock.elapsed_seconds, 30)
        self.assertEqual(self.seconds(), {"a": 130, "b": 40, "c": 30})

        self.assertEqual(self.service.reconcile_on_resume(now=1030), 0)
        self.assertEqual(self.state.clock.elapsed_seconds, 30)
        self.assertEqual(self.seconds(), {"a": 130, "b": 40, "c": 30})

    def test_reconcile_only_counts_missing_seconds(self) -> None:
        with patch("equalplay.services.clock_service.now_ts", return_value=1000):
            self.service.start()
        for _ in range(10):
            self.service.tick()

        self.assertEqual(self.service.reconcile_on_resume(now=1010), 0)
        # Fractional wall-clock seconds are truncated.
        self.assertEqual(self.service.reconcile_on_resume(now=1015.7), 5)
        self.assertEqual(self.state.clock.elapsed_seconds, 15)

    def test_reconcile_is_noop_when_paused(self) -> None:
        self.assertEqual(self.service.reconcile_on_resume(now=99999), 0)
        self.assertEqual(self.state.clock.elapsed_seconds, 0)

    def test_reset_minutes(self) -> None:
        with patch("equalplay.services.clock_service.now_ts", return_value=1000):
            self.service.start()
        self.service.tick()

        with patch("equalplay.services.clock_service.now_ts", return_value=5000):
            self.service.reset_minutes()

        self.assertEqual(self.state.clock.elapsed_seconds, 0)
        self.assertEqual(self.state.clock.anchor_ts, 5000)
        self.assertEqual(self.seconds(), {"a": 0, "b": 0, "c": 0})

    def test_half_tracking(self) -> None:
        self.state.settings.half_minutes = 1

        self.state.clock.elapsed_seconds = 59
        self.assertEqual(self.service.current_half(), 1)
        self.assertFalse(self.service.is_half_complete())

        self.state.clock.elapsed_seconds = 60
        self.assertEqual(self.service.current_half(), 2)
        self.assertTrue(self.service.is_half_complete())
        self.assertFalse(self.service.is_full_time())

        self.state.clock.elapsed_seconds = 120
        self.assertTrue(self.service.is_full_time())

        status = self.service.get_clock_status()
        self.assertEqual(status["half"], 2)
        self.assertEqual(status["half_length_seconds"], 60)
        self.assertTrue(status["full_time"])


if __name__ == "__main__":
    unittest.main()
