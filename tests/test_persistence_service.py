"""Tests for saving and loading match state."""

import json
import os
import tempfile
import threading
import unittest

from equalplay.models import MatchState, Player
from equalplay.services import PersistenceService


class TestPersistenceService(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.path = os.path.join(self.temp_dir.name, "nested", "match.json")

    def test_save_and_load(self) -> None:
        state = MatchState(players=[Player(id="a", name="Alice", seconds=120, on_field=True)])
        state.settings.field_target = 9

        PersistenceService.save_match_to_file(state, self.path)
        self.assertFalse(os.path.exists(self.path + ".tmp"))

        loaded = PersistenceService.load_match_from_file(self.path)
        self.assertEqual(loaded.players, state.players)
        self.assertEqual(loaded.settings.field_target, 9)

    def test_concurrent_saves_all_land(self) -> None:
        state = MatchState(
            players=[Player(id=str(i), name=f"Player {i}", seconds=i) for i in range(200)]
        )
        errors = []

        def save() -> None:
            try:
                PersistenceService.save_match_to_file(state, self.path)
            except OSError as e:
                errors.append(e)

        for _ in range(5):
            threads = [threading.Thread(target=save) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(os.listdir(os.path.dirname(self.path)), ["match.json"])
        self.assertEqual(len(PersistenceService.load_match_from_file(self.path).players), 200)

    def test_save_keeps_latest_snapshot(self) -> None:
        state = MatchState(players=[Player(id="a", name="Alice")])
        PersistenceService.save_match_to_file(state, self.path)

        state.clock.elapsed_seconds = 75
        PersistenceService.save_match_to_file(state, self.path)

        self.assertEqual(PersistenceService.load_match_from_file(self.path).clock.elapsed_seconds, 75)

    def test_load_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            PersistenceService.load_match_from_file(self.path)

    def test_load_rejects_non_object(self) -> None:
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([1, 2, 3], f)

        with self.assertRaises(ValueError):
            PersistenceService.load_match_from_file(self.path)

    def test_load_or_new_falls_back_to_fresh_state(self) -> None:
        self.assertEqual(PersistenceService.load_or_new(self.path).players, [])

        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")

        with self.assertLogs("equalplay.services.persistence_service", level="WARNING"):
            state = PersistenceService.load_or_new(self.path)
        self.assertEqual(state.players, [])

    def test_auto_save_writes_timestamped_file(self) -> None:
        state = MatchState(players=[Player(id="a", name="Alice")])

        path = PersistenceService.auto_save(state, self.temp_dir.name)

        self.assertIsNotNone(path)
        self.assertTrue(os.path.basename(path).startswith("match_autosave_"))
        self.assertEqual(PersistenceService.load_match_from_file(path).players[0].name, "Alice")


if __name__ == "__main__":
    unittest.main()
