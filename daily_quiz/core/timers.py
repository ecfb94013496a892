"""Countdown timers driving a participant session.

Both timers tick through a `Scheduler` one interval at a time and never keep
more than one pending tick. Every schedule or cancel bumps a generation
token; a tick carrying an older token is ignored, so a callback that already
fired before `suspend()` cannot decrement a reset or suspended timer.

When a session lock is supplied, ticks and the expiry callback run while
holding it, which serializes them with user actions on the same session.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import math
from threading import RLock

from daily_quiz.core.scheduler import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)


class CountdownTimer:
    """Whole-second countdown that fires `on_expired` once when it hits zero."""

    def __init__(
        self,
        scheduler: Scheduler,
        budget_seconds: int,
        on_expired: Callable[[], None],
        *,
        tick_interval_seconds: float = 1.0,
        lock: RLock | None = None,
        name: str = "countdown",
    ) -> None:
        if budget_seconds < 0:
            raise ValueError("Timer budget cannot be negative.")
        self._scheduler = scheduler
        self._budget_seconds = budget_seconds
        self._on_expired = on_expired
        self._tick_interval_seconds = tick_interval_seconds
        self._lock = lock if lock is not None else RLock()
        self._name = name

        self._remaining = budget_seconds
        self._running = False
        self._generation = 0
        self._pending: ScheduledCall | None = None

    @property
    def budget_seconds(self) -> int:
        return self._budget_seconds

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._remaining

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def start(self) -> None:
        """Begin ticking; a timer already at zero stays stopped."""
        with self._lock:
            if self._running or self._remaining <= 0:
                return
            self._running = True
            self._schedule_tick()

    def suspend(self) -> None:
        """Stop ticking and drop the pending tick, keeping the remaining time."""
        with self._lock:
            self._running = False
            self._cancel_pending()

    def reset(self, seconds: int | None = None) -> None:
        """Suspend and set the remaining time (the full budget by default)."""
        with self._lock:
            self.suspend()
            value = self._budget_seconds if seconds is None else seconds
            self._remaining = max(0, value)

    def _schedule_tick(self) -> None:
        self._generation += 1
        generation = self._generation
        self._pending = self._scheduler.call_later(
            self._tick_interval_seconds, lambda: self._tick(generation)
        )

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or not self._running:
                return
            self._pending = None
            self._remaining -= 1
            if self._remaining > 0:
                self._schedule_tick()
                return
            self._remaining = 0
            self._running = False
            logger.debug("%s timer expired", self._name)
            self._on_expired()


class GlobalTimer(CountdownTimer):
    """Whole-quiz countdown anchored on the quiz publish timestamp."""

    def __init__(
        self,
        scheduler: Scheduler,
        on_expired: Callable[[], None],
        *,
        tick_interval_seconds: float = 1.0,
        lock: RLock | None = None,
    ) -> None:
        super().__init__(
            scheduler,
            0,
            on_expired,
            tick_interval_seconds=tick_interval_seconds,
            lock=lock,
            name="global",
        )

    def sync_to_anchor(self, duration_seconds: int, published_at_ms: int, now_ms: int) -> int:
        """Derive the remaining seconds from the shared publish anchor.

        Participants loading the quiz at different moments converge on the
        same deadline: `duration - floor(elapsed_ms / 1000)`, clamped to
        `0..duration`.
        """
        elapsed_seconds = math.floor((now_ms - published_at_ms) / 1000)
        remaining = min(duration_seconds, max(0, duration_seconds - elapsed_seconds))
        with self._lock:
            self._budget_seconds = duration_seconds
            self._remaining = remaining
            if remaining == 0:
                self.suspend()
        return remaining


class QuestionTimer(CountdownTimer):
    """Per-question countdown that forces advancement when it runs out."""

    def __init__(
        self,
        scheduler: Scheduler,
        budget_seconds: int,
        on_expired: Callable[[], None],
        *,
        tick_interval_seconds: float = 1.0,
        lock: RLock | None = None,
    ) -> None:
        super().__init__(
            scheduler,
            budget_seconds,
            on_expired,
            tick_interval_seconds=tick_interval_seconds,
            lock=lock,
            name="question",
        )

    def restart(self) -> None:
        """Refill the full budget and start ticking."""
        with self._lock:
            self.reset()
            self.start()
