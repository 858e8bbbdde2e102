"""Clock service for the Equal Play Tracker."""

import logging
from typing import Optional

from ..models import MatchState
from ..utils import now_ts

logger = logging.getLogger(__name__)


class ClockService:
    """
    Service for advancing match time and per-player accrued time.

    Match time advances through ``tick()`` once per second. A wall-clock
    anchor (``now - elapsed`` at start) lets ``reconcile_on_resume()`` catch
    up after the host was suspended without replaying each missed tick.
    """

    def __init__(self, match_state: MatchState):
        self.match_state = match_state

    # ------------------------------------------------------------------
    # Core clock controls
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """
        Advance match time and every on-field player by one second.

        Returns:
            False (and changes nothing) when the clock is not running
        """
        with self.match_state.lock:
            clock = self.match_state.clock
            if not clock.running:
                return False
            self._advance(1)
            return True

    def start(self) -> None:
        """Start or resume the clock, anchoring it to the wall clock."""

        with self.match_state.lock:
            clock = self.match_state.clock
            if clock.running:
                return
            if clock.anchor_ts is None:
                clock.anchor_ts = now_ts() - clock.elapsed_seconds
            clock.running = True
            logger.info("Clock started at %ss", clock.elapsed_seconds)

    def pause(self) -> None:
        """Stop the clock and drop the wall-clock anchor."""

        with self.match_state.lock:
            clock = self.match_state.clock
            clock.running = False
            clock.anchor_ts = None
            logger.info("Clock paused at %ss", clock.elapsed_seconds)

    def toggle_running(self) -> bool:
        """Start a stopped clock or pause a running one. Returns the new running flag."""

        with self.match_state.lock:
            if self.match_state.clock.running:
                self.pause()
            else:
                self.start()
            return self.match_state.clock.running

    def reconcile_on_resume(self, now: Optional[float] = None) -> int:
        """
        Catch the clock up with the wall clock after a suspension.

        The gap between ``now - anchor`` and the stored elapsed seconds is
        applied once to the match clock and to every on-field player.
        Calling it again for the same gap applies nothing.

        Args:
            now: Wall-clock epoch seconds; defaults to the current time

        Returns:
            Number of seconds applied
        """
        with self.match_state.lock:
            clock = self.match_state.clock
            if not clock.running or clock.anchor_ts is None:
                return 0

            current = now_ts() if now is None else now
            elapsed = int(current - clock.anchor_ts)
            gap = elapsed - clock.elapsed_seconds
            if gap <= 0:
                return 0

            self._advance(gap)
            logger.info("Reconciled clock after suspension: +%ss", gap)
            return gap

    def reset_minutes(self) -> None:
        """Zero every player's accrued seconds and the match clock."""

        with self.match_state.lock:
            self.match_state.update_players(
                lambda players: [p.with_seconds_reset() for p in players]
            )
            clock = self.match_state.clock
            clock.elapsed_seconds = 0
            clock.anchor_ts = now_ts() if clock.running else None
            logger.info("Match minutes reset")

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    def get_match_seconds(self) -> int:
        return self.match_state.clock.elapsed_seconds

    def is_running(self) -> bool:
        return self.match_state.clock.running

    def half_length_seconds(self) -> int:
        return self.match_state.settings.half_minutes * 60

    def current_half(self) -> int:
        """Return the 1-based half the match clock is in (2 once past one half)."""

        return 1 if self.get_match_seconds() < self.half_length_seconds() else 2

    def is_half_complete(self) -> bool:
        """True once the first half length has been played."""

        return self.get_match_seconds() >= self.half_length_seconds()

    def is_full_time(self) -> bool:
        return self.get_match_seconds() >= 2 * self.half_length_seconds()

    def get_clock_status(self) -> dict:
        """Return the clock state for display purposes."""

        with self.match_state.lock:
            clock = self.match_state.clock
            return {
                "running": clock.running,
                "match_seconds": clock.elapsed_seconds,
                "anchor_ts": clock.anchor_ts,
                "half": self.current_half(),
                "half_length_seconds": self.half_length_seconds(),
                "half_complete": self.is_half_complete(),
                "full_time": self.is_full_time(),
            }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _advance(self, seconds: int) -> None:
        # Caller holds the state lock.
        self.match_state.clock.elapsed_seconds += seconds
        self.match_state.update_players(
            lambda players: [
                p.with_seconds_added(seconds) if p.on_field else p for p in players
            ]
        )
