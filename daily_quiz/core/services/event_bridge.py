"""In-process publish/subscribe channel for quiz notifications."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
from threading import Lock

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QuizPublished:
    quiz_id: str


@dataclass(frozen=True, slots=True)
class OnlineCountUpdate:
    count: int


@dataclass(frozen=True, slots=True)
class SubmissionReceived:
    quiz_id: str
    participant_id: str


QuizEvent = QuizPublished | OnlineCountUpdate | SubmissionReceived
EventHandler = Callable[[QuizEvent], None]


class EventBridge:
    """Delivers quiz events to every subscribed handler.

    Handlers are invoked synchronously on the publishing thread, outside the
    bridge lock. A failing handler is logged and does not stop delivery to
    the remaining subscribers.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._handlers: dict[int, EventHandler] = {}
        self._next_token: int = 0
        self._online_count: int = 0

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register `handler` and return a disposer that unsubscribes it."""
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._handlers[token] = handler

        def unsubscribe() -> None:
            with self._lock:
                self._handlers.pop(token, None)

        return unsubscribe

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._handlers)

    def publish(self, event: QuizEvent) -> None:
        with self._lock:
            if isinstance(event, OnlineCountUpdate):
                self._online_count = event.count
            handlers = list(self._handlers.values())

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler failed for %s", event)

    def notify_quiz_published(self, quiz_id: str) -> None:
        logger.info("Quiz %s published", quiz_id)
        self.publish(QuizPublished(quiz_id=quiz_id))

    def notify_online_count(self, count: int) -> None:
        self.publish(OnlineCountUpdate(count=count))

    def notify_submission_received(self, quiz_id: str, participant_id: str) -> None:
        self.publish(SubmissionReceived(quiz_id=quiz_id, participant_id=participant_id))

    def get_online_count(self) -> int:
        with self._lock:
            return self._online_count
