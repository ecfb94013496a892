"""Service holding the question bank and the daily quizzes."""

from __future__ import annotations

from collections.abc import Callable
from threading import Lock
from uuid import uuid4

from daily_quiz.core.errors import InvalidInputError, NotReadyError
from daily_quiz.core.models import QuestionOption, Quiz, QuizQuestion, QuizStatus
from daily_quiz.core.scheduler import epoch_millis


class QuizRepository:
    """Manages the question bank and the Draft -> Published quiz lifecycle."""

    def __init__(self, clock: Callable[[], int] = epoch_millis) -> None:
        self._lock = Lock()
        self._clock = clock
        self._questions: list[QuizQuestion] = []
        self._quizzes: dict[str, Quiz] = {}
        self._active_quiz_id: str | None = None
        self._question_counter: int = 0

    # --- Question bank ---

    def load_questions(self, questions: list[QuizQuestion]) -> None:
        """Replace the question bank."""
        if not questions:
            raise InvalidInputError("The question bank must contain at least one question.")
        prepared: list[QuizQuestion] = []
        seen_ids: set[str] = set()
        with self._lock:
            for question in questions:
                candidate = self._prepare_question(question)
                if candidate.id in seen_ids:
                    raise InvalidInputError(f"Duplicate question id '{candidate.id}'.")
                seen_ids.add(candidate.id)
                prepared.append(candidate)
            self._questions = prepared

    def get_questions(self) -> list[QuizQuestion]:
        """Return a copy of the full bank in order."""
        with self._lock:
            return list(self._questions)

    def get_question_count(self) -> int:
        with self._lock:
            return len(self._questions)

    def has_questions(self) -> bool:
        with self._lock:
            return bool(self._questions)

    # --- Quizzes ---

    def create_quiz(
        self,
        title: str,
        duration_minutes: int,
        question_ids: list[str] | None = None,
    ) -> Quiz:
        cleaned_title = title.strip()
        if not cleaned_title:
            raise InvalidInputError("Quiz title must not be empty.")
        if not isinstance(duration_minutes, int) or duration_minutes <= 0:
            raise InvalidInputError("Quiz duration must be a positive number of minutes.")

        with self._lock:
            known_ids = {question.id for question in self._questions}
            ids = list(question_ids or [])
            unknown = [qid for qid in ids if qid not in known_ids]
            if unknown:
                raise InvalidInputError(f"Unknown question ids: {', '.join(unknown)}")
            quiz = Quiz(
                id=uuid4().hex,
                title=cleaned_title,
                duration_minutes=duration_minutes,
                question_ids=ids,
            )
            self._quizzes[quiz.id] = quiz
            return quiz

    def publish_quiz(self, quiz_id: str) -> Quiz:
        """Set the publish anchor exactly once and make the quiz the active one."""
        with self._lock:
            quiz = self._quizzes.get(quiz_id)
            if quiz is None:
                raise InvalidInputError(f"Unknown quiz '{quiz_id}'.")
            if quiz.status is QuizStatus.PUBLISHED:
                raise InvalidInputError(f"Quiz '{quiz.title}' is already published.")
            if not self._questions:
                raise NotReadyError("Load a question bank before publishing a quiz.")
            quiz.status = QuizStatus.PUBLISHED
            quiz.published_at = self._clock()
            self._active_quiz_id = quiz.id
            return self._copy(quiz)

    def get_quiz(self, quiz_id: str) -> Quiz | None:
        with self._lock:
            quiz = self._quizzes.get(quiz_id)
            return self._copy(quiz) if quiz else None

    def get_active_quiz(self) -> Quiz | None:
        """Return the most recently published quiz, if any."""
        with self._lock:
            if self._active_quiz_id is None:
                return None
            return self._copy(self._quizzes[self._active_quiz_id])

    @staticmethod
    def _copy(quiz: Quiz) -> Quiz:
        return Quiz(
            id=quiz.id,
            title=quiz.title,
            duration_minutes=quiz.duration_minutes,
            question_ids=list(quiz.question_ids),
            status=quiz.status,
            published_at=quiz.published_at,
        )

    def _prepare_question(self, question: QuizQuestion) -> QuizQuestion:
        """Validate and normalize a question before storage."""
        prompt = question.prompt.strip()
        if not prompt:
            raise InvalidInputError("Question text must not be empty.")

        options = self._validate_options(question.options)
        correct_option_id = question.correct_option_id.strip()
        if correct_option_id not in {option.id for option in options}:
            raise InvalidInputError(
                f"Correct option '{correct_option_id}' is not one of the options."
            )

        question_id = question.id.strip() if question.id else ""
        if not question_id:
            question_id = self._next_question_id()

        return QuizQuestion(
            id=question_id,
            prompt=prompt,
            options=options,
            correct_option_id=correct_option_id,
        )

    def _next_question_id(self) -> str:
        self._question_counter += 1
        return f"q{self._question_counter}"

    @staticmethod
    def _validate_options(options: tuple[QuestionOption, ...]) -> tuple[QuestionOption, ...]:
        if len(options) < 2:
            raise InvalidInputError("Each question needs at least two options.")
        cleaned = tuple(QuestionOption(id=option.id.strip(), text=option.text.strip()) for option in options)
        if any(not option.id for option in cleaned):
            raise InvalidInputError("Option ids cannot be empty.")
        if any(not option.text for option in cleaned):
            raise InvalidInputError("Option text cannot be empty.")
        if len({option.id for option in cleaned}) != len(cleaned):
            raise InvalidInputError("Option ids must be unique within a question.")
        return cleaned
