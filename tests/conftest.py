"""
Pytest configuration and fixtures for DailyQuiz tests.

Timers run on a manual scheduler driven by a fake clock, so tests advance
time explicitly instead of sleeping.
"""
from __future__ import annotations

import pytest

from daily_quiz.core.config import SessionConfig
from daily_quiz.core.errors import StoreWriteError
from daily_quiz.core.models import QuestionOption, Quiz, QuizQuestion, QuizStatus, SubmissionReceipt
from daily_quiz.core.services.event_bridge import EventBridge
from daily_quiz.core.services.quiz_session import QuizSession

PUBLISHED_AT = 1_700_000_000_000


class FakeClock:
    """Wall clock in epoch milliseconds, moved only by the scheduler."""

    def __init__(self, start_ms: int = PUBLISHED_AT) -> None:
        self.start_ms = start_ms
        self.elapsed_seconds = 0.0

    def __call__(self) -> int:
        return self.start_ms + round(self.elapsed_seconds * 1000)

    def jump(self, milliseconds: int) -> None:
        self.elapsed_seconds += milliseconds / 1000


class ManualCall:
    def __init__(self, due: float, sequence: int, callback) -> None:
        self.due = due
        self.sequence = sequence
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Runs scheduled callbacks in due order when time is advanced."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self._calls: list[ManualCall] = []
        self._sequence = 0

    def call_later(self, delay_seconds: float, callback) -> ManualCall:
        self._sequence += 1
        call = ManualCall(self.clock.elapsed_seconds + delay_seconds, self._sequence, callback)
        self._calls.append(call)
        return call

    def advance(self, seconds: float) -> None:
        target = self.clock.elapsed_seconds + seconds
        while True:
            due = [c for c in self._calls if not c.cancelled and c.due <= target + 1e-9]
            if not due:
                break
            call = min(due, key=lambda c: (c.due, c.sequence))
            self._calls.remove(call)
            self.clock.elapsed_seconds = max(self.clock.elapsed_seconds, call.due)
            call.callback()
        self.clock.elapsed_seconds = target

    def pending(self) -> int:
        return sum(1 for c in self._calls if not c.cancelled)


class FakeProvider:
    def __init__(self, quiz: Quiz | None = None, questions: list[QuizQuestion] | None = None) -> None:
        self.quiz = quiz
        self.questions = questions or []
        self.fail_questions = False

    def get_active_quiz(self) -> Quiz | None:
        return self.quiz

    def get_questions(self) -> list[QuizQuestion]:
        if self.fail_questions:
            raise ConnectionError("question service unavailable")
        return list(self.questions)


class FakeStore:
    """Records submissions; fails the first `failures` writes."""

    def __init__(self, failures: int = 0) -> None:
        self.failures = failures
        self.records = []
        self.calls = 0

    def submit_quiz(self, record) -> SubmissionReceipt:
        self.calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise StoreWriteError("database is down")
        self.records.append(record)
        return SubmissionReceipt(record.quiz_id, record.participant_id, stored_at=None)


def make_question(question_id: str, correct: str = "a", option_count: int = 4) -> QuizQuestion:
    letters = "abcdef"[:option_count]
    return QuizQuestion(
        id=question_id,
        prompt=f"Prompt for {question_id}",
        options=tuple(QuestionOption(id=letter, text=f"Option {letter.upper()}") for letter in letters),
        correct_option_id=correct,
    )


def make_quiz(quiz_id: str = "daily-1", duration_minutes: int = 10, published_at: int | None = PUBLISHED_AT) -> Quiz:
    return Quiz(
        id=quiz_id,
        title="Daily Quiz",
        duration_minutes=duration_minutes,
        status=QuizStatus.PUBLISHED if published_at is not None else QuizStatus.DRAFT,
        published_at=published_at,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock) -> ManualScheduler:
    return ManualScheduler(clock)


@pytest.fixture
def ten_questions() -> list[QuizQuestion]:
    return [make_question(f"q{i}") for i in range(1, 11)]


@pytest.fixture
def two_questions() -> list[QuizQuestion]:
    return [make_question("q1", correct="b"), make_question("q2", correct="a")]


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def bridge() -> EventBridge:
    return EventBridge()


@pytest.fixture
def session_factory(clock, scheduler, store, bridge):
    """Build a session for `participant_id` on the given provider."""

    def factory(provider: FakeProvider, config: SessionConfig | None = None, participant_id: str = "A01") -> QuizSession:
        return QuizSession(
            participant_id,
            provider,
            store,
            bridge,
            config=config or SessionConfig(),
            scheduler=scheduler,
            clock=clock,
        )

    return factory
