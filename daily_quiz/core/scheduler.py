"""Scheduling of delayed callbacks used by the session timers."""

from __future__ import annotations

from collections.abc import Callable
from threading import Timer
import time
from typing import Protocol


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after `delay_seconds`."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall: ...


class ThreadingScheduler:
    """Scheduler backed by daemon `threading.Timer` instances."""

    def __init__(self, name_prefix: str = "QuizTimer") -> None:
        self._name_prefix = name_prefix

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> Timer:
        timer = Timer(delay_seconds, callback)
        timer.name = f"{self._name_prefix}-{timer.name}"
        timer.daemon = True
        timer.start()
        return timer


def epoch_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)
