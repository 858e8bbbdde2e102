"""
Persistence service for the Equal Play Tracker.

This module handles saving and loading match state to/from JSON files.
"""
import datetime
import json
import logging
import os
import tempfile
from typing import Optional

from ..models import MatchState

logger = logging.getLogger(__name__)


class PersistenceService:
    """
    Service for persisting match state to JSON files.

    The clock is saved as-is (running flag, elapsed seconds, anchor) so a
    match interrupted by a restart can be caught up with
    ``ClockService.reconcile_on_resume`` after loading.
    """

    @staticmethod
    def save_match_to_file(match_state: MatchState, file_path: str) -> None:
        """
        Save match state to a JSON file.

        Args:
            match_state: The match state to save
            file_path: Path where to save the file

        Raises:
            OSError: If the file cannot be written
        """
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        # Snapshot, write and rename under the state lock so concurrent saves
        # land in order; a crash mid-write keeps the previous save.
        with match_state.lock:
            snapshot = match_state.to_json()
            tmp = tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory or ".",
                prefix=f".{os.path.basename(file_path)}.", suffix=".tmp", delete=False,
            )
            try:
                with tmp:
                    json.dump(snapshot, tmp, indent=2, ensure_ascii=False)
                os.replace(tmp.name, file_path)
            except Exception:
                os.remove(tmp.name)
                raise

    @staticmethod
    def load_match_from_file(file_path: str) -> MatchState:
        """
        Load match state from a JSON file.

        Args:
            file_path: Path to the JSON file to load

        Returns:
            MatchState instance loaded from file

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file contains invalid JSON
            ValueError: If JSON structure is invalid
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Match file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError("Invalid match file: expected a JSON object")

        try:
            return MatchState.from_json(data)
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid match file structure: {e}") from e

    @staticmethod
    def load_or_new(file_path: str) -> MatchState:
        """
        Load a saved match, or start a fresh one if nothing usable is saved.

        A missing file is normal on first launch; an unreadable one is
        logged and replaced by a new state rather than stopping the app.
        """
        try:
            return PersistenceService.load_match_from_file(file_path)
        except FileNotFoundError:
            return MatchState()
        except (OSError, ValueError) as e:
            logger.warning("Could not load saved match from %s: %s", file_path, e)
            return MatchState()

    @staticmethod
    def auto_save(match_state: MatchState, auto_save_dir: str = "autosave") -> Optional[str]:
        """
        Save match state to a timestamped file.

        Args:
            match_state: Match state to save
            auto_save_dir: Directory for auto-save files

        Returns:
            Path to saved file, or None if save failed
        """
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        file_path = os.path.join(auto_save_dir, f"match_autosave_{timestamp}.json")
        try:
            PersistenceService.save_match_to_file(match_state, file_path)
        except OSError as e:
            logger.warning("Auto-save to %s failed: %s", file_path, e)
            return None
        return file_path
