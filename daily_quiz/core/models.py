"""Domain models for the daily quiz."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(frozen=True, slots=True)
class QuestionOption:
    """One selectable answer of a question."""

    id: str
    text: str


@dataclass(frozen=True, slots=True)
class QuizQuestion:
    """Multiple-choice question; immutable once loaded for a session."""

    id: str
    prompt: str
    options: tuple[QuestionOption, ...]
    correct_option_id: str

    def option_ids(self) -> list[str]:
        return [option.id for option in self.options]

    def has_option(self, option_id: str) -> bool:
        return any(option.id == option_id for option in self.options)


class QuizStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass(slots=True)
class Quiz:
    """A daily quiz; `published_at` is the epoch-millisecond publish anchor."""

    id: str
    title: str
    duration_minutes: int
    question_ids: list[str] = field(default_factory=list)
    status: QuizStatus = QuizStatus.DRAFT
    published_at: int | None = None

    @property
    def duration_seconds(self) -> int:
        return self.duration_minutes * 60

    @property
    def is_published(self) -> bool:
        return self.status is QuizStatus.PUBLISHED and self.published_at is not None


@dataclass(frozen=True, slots=True)
class AnsweredPair:
    """Option chosen by a participant for one question."""

    question_id: str
    option_id: str


@dataclass(frozen=True, slots=True)
class SubmissionRecord:
    """The single final result of one attempt."""

    quiz_id: str
    participant_id: str
    answers: tuple[AnsweredPair, ...]
    score: int
    total_questions: int
    submitted_at: int

    def __post_init__(self) -> None:
        if not 0 <= self.score <= self.total_questions:
            raise ValueError(
                f"Score {self.score} outside of 0..{self.total_questions}."
            )


@dataclass(frozen=True, slots=True)
class SubmissionReceipt:
    """Acknowledgement returned by a submission store."""

    quiz_id: str
    participant_id: str
    stored_at: datetime


@dataclass(frozen=True, slots=True)
class Feedback:
    """Transient correctness indicator for the choice just made."""

    selected_option_id: str
    is_correct: bool


@dataclass(frozen=True, slots=True)
class SessionResult:
    score: int
    total_questions: int

    @property
    def percentage(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return round(self.score / self.total_questions * 100, 1)

    @property
    def label(self) -> str:
        return f"{self.score} / {self.total_questions}"


class SessionPhase(Enum):
    """Discriminated phase of a participant session."""

    IDLE = "idle"
    AWAITING_QUIZ = "awaiting_quiz"
    IN_PROGRESS = "in_progress"
    SHOWING_FEEDBACK = "showing_feedback"
    SUBMITTED = "submitted"
    ERRORED = "errored"


@dataclass(frozen=True, slots=True)
class SessionView:
    """Read-only projection of a session for the presentation layer."""

    phase: SessionPhase
    quiz_id: str | None = None
    quiz_title: str | None = None
    current_question: QuizQuestion | None = None
    question_number: int = 0
    total_questions: int = 0
    question_seconds_left: int = 0
    global_seconds_left: int = 0
    feedback: Feedback | None = None
    submitted: bool = False
    result: SessionResult | None = None
    submission_persisted: bool = False
    error_message: str | None = None
    online_count: int = 0


@dataclass(slots=True)
class Participant:
    """A registered student; `id` is the issued login code."""

    id: str
    name: str
    age: int
    village: str
    registered_at: datetime
