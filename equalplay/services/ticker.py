"""Background ticker that drives ClockService.tick once per second."""

import logging
import threading
from typing import Callable, Optional

from ..utils import TICK_INTERVAL_SECONDS
from .clock_service import ClockService

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


class ClockTicker:
    """
    Re-arming one-shot timer around ``ClockService.tick``.

    Every arm carries a generation number. ``stop()`` bumps the generation
    and cancels the pending timer, so a callback that was already in flight
    when the clock stopped finds a stale generation and does nothing.
    """

    def __init__(
        self,
        clock_service: ClockService,
        interval: float = TICK_INTERVAL_SECONDS,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.clock_service = clock_service
        self.interval = interval
        self._timer_factory = timer_factory or _daemon_timer
        self._lock = threading.Lock()
        self._generation = 0
        self._timer: Optional[threading.Timer] = None

    @property
    def active(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        """Begin ticking; restarting an active ticker keeps a single timer."""

        with self._lock:
            self._cancel_locked()
            self._generation += 1
            self._arm_locked(self._generation)

    def stop(self) -> None:
        """Stop ticking. No tick fires after this returns."""

        with self._lock:
            self._generation += 1
            self._cancel_locked()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            # Tick under the ticker lock so a concurrent stop() waits for it.
            advanced = self.clock_service.tick()
            if not advanced:
                logger.debug("Ticker fired while clock paused; stopping")
                self._timer = None
                return
            self._arm_locked(generation)

    def _arm_locked(self, generation: int) -> None:
        timer = self._timer_factory(self.interval, lambda: self._fire(generation))
        self._timer = timer
        timer.start()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


def _daemon_timer(interval: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, callback)
    timer.daemon = True
    return timer
