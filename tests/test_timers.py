"""Tests for the countdown timers."""

from __future__ import annotations

import pytest

from daily_quiz.core.timers import CountdownTimer, GlobalTimer, QuestionTimer


def test_countdown_fires_once_at_zero(scheduler):
    expired = []
    timer = CountdownTimer(scheduler, 3, lambda: expired.append(True))

    timer.start()
    scheduler.advance(2)
    assert timer.remaining == 1
    assert expired == []

    scheduler.advance(5)
    assert timer.remaining == 0
    assert expired == [True]
    assert timer.is_running is False


def test_suspend_keeps_remaining_time(scheduler):
    timer = CountdownTimer(scheduler, 10, lambda: None)
    timer.start()
    scheduler.advance(4)

    timer.suspend()
    scheduler.advance(4)

    assert timer.remaining == 6
    assert scheduler.pending() == 0


def test_stale_tick_is_ignored(scheduler):
    timer = CountdownTimer(scheduler, 10, lambda: None)
    timer.start()
    stale = scheduler._calls[-1]

    timer.reset()
    timer.start()
    stale.callback()

    assert timer.remaining == 10


def test_negative_budget_is_rejected(scheduler):
    with pytest.raises(ValueError):
        CountdownTimer(scheduler, -1, lambda: None)


def test_question_timer_restart_refills_budget(scheduler):
    timer = QuestionTimer(scheduler, 60, lambda: None)
    timer.start()
    scheduler.advance(45)

    timer.restart()

    assert timer.remaining == 60
    assert timer.is_running is True
    assert scheduler.pending() == 1


@pytest.mark.parametrize(
    ("now_offset_ms", "expected"),
    [
        (125_000, 475),
        (125_999, 475),
        (0, 600),
        (-5_000, 600),
        (600_000, 0),
        (3_600_000, 0),
    ],
)
def test_global_timer_derives_remaining_from_anchor(scheduler, now_offset_ms, expected):
    timer = GlobalTimer(scheduler, lambda: None)
    published_at = 1_700_000_000_000

    remaining = timer.sync_to_anchor(600, published_at, published_at + now_offset_ms)

    assert remaining == expected
    assert timer.remaining == expected


def test_global_timer_at_zero_does_not_start(scheduler):
    expired = []
    timer = GlobalTimer(scheduler, lambda: expired.append(True))
    timer.sync_to_anchor(60, 0, 120_000)

    timer.start()

    assert timer.is_running is False
    assert scheduler.pending() == 0
    assert expired == []
