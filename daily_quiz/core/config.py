"""Session configuration."""

from __future__ import annotations

from dataclasses import dataclass

from daily_quiz.constants.quiz_constants import (
    FEEDBACK_DELAY_SECONDS,
    QUESTION_TIME_LIMIT_SECONDS,
    QUESTIONS_PER_ATTEMPT,
    SUBMISSION_RETRY_ATTEMPTS,
    TICK_INTERVAL_SECONDS,
)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Timer budgets and limits for participant sessions.

    `quiz_duration_seconds` overrides the duration carried by the quiz, which
    lets tests and rehearsals run on compressed time.
    """

    question_time_limit_seconds: int = QUESTION_TIME_LIMIT_SECONDS
    feedback_delay_seconds: float = FEEDBACK_DELAY_SECONDS
    tick_interval_seconds: float = TICK_INTERVAL_SECONDS
    questions_per_attempt: int = QUESTIONS_PER_ATTEMPT
    submission_retry_attempts: int = SUBMISSION_RETRY_ATTEMPTS
    quiz_duration_seconds: int | None = None

    def __post_init__(self) -> None:
        if self.question_time_limit_seconds <= 0:
            raise ValueError("Question time limit must be a positive number of seconds.")
        if self.feedback_delay_seconds < 0:
            raise ValueError("Feedback delay cannot be negative.")
        if self.tick_interval_seconds <= 0:
            raise ValueError("Tick interval must be positive.")
        if self.questions_per_attempt <= 0:
            raise ValueError("An attempt needs at least one question.")
        if self.submission_retry_attempts < 1:
            raise ValueError("At least one submission attempt is required.")
        if self.quiz_duration_seconds is not None and self.quiz_duration_seconds <= 0:
            raise ValueError("Quiz duration override must be positive.")
