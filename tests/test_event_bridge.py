from __future__ import annotations

from daily_quiz.core.services.event_bridge import (
    EventBridge,
    OnlineCountUpdate,
    QuizPublished,
    SubmissionReceived,
)


def test_subscribers_receive_events_until_unsubscribed():
    bridge = EventBridge()
    received = []
    unsubscribe = bridge.subscribe(received.append)

    bridge.notify_quiz_published("daily-1")
    unsubscribe()
    bridge.notify_quiz_published("daily-2")

    assert received == [QuizPublished(quiz_id="daily-1")]
    assert bridge.subscriber_count() == 0


def test_failing_handler_does_not_block_others():
    bridge = EventBridge()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bridge.subscribe(broken)
    bridge.subscribe(received.append)

    bridge.notify_submission_received("daily-1", "A01")

    assert received == [SubmissionReceived(quiz_id="daily-1", participant_id="A01")]


def test_online_count_is_retained():
    bridge = EventBridge()
    received = []
    bridge.subscribe(received.append)

    bridge.notify_online_count(3)

    assert bridge.get_online_count() == 3
    assert received == [OnlineCountUpdate(count=3)]
