"""Per-participant quiz session state machine.

A session moves through IDLE -> AWAITING_QUIZ -> IN_PROGRESS <-> SHOWING_FEEDBACK
-> SUBMITTED, or into ERRORED when the question list cannot be loaded or the
current question is missing. Every transition, including timer callbacks,
runs under one re-entrant lock owned by the session, and both submit paths
(global expiry and finishing the last question) funnel into
`_finalize_locked`, which is guarded by the submitted flag and therefore
produces at most one SubmissionRecord per attempt.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
from threading import RLock
from typing import Protocol

from daily_quiz.core.config import SessionConfig
from daily_quiz.core.errors import (
    DuplicateSubmissionError,
    InvalidInputError,
    NotReadyError,
)
from daily_quiz.core.models import (
    AnsweredPair,
    Feedback,
    Quiz,
    QuizQuestion,
    SessionPhase,
    SessionResult,
    SessionView,
    SubmissionReceipt,
    SubmissionRecord,
)
from daily_quiz.core.scheduler import ScheduledCall, Scheduler, ThreadingScheduler, epoch_millis
from daily_quiz.core.scoring import score
from daily_quiz.core.services.event_bridge import (
    EventHandler,
    OnlineCountUpdate,
    QuizEvent,
    QuizPublished,
)
from daily_quiz.core.timers import GlobalTimer, QuestionTimer

logger = logging.getLogger(__name__)

_ACTIVE_PHASES = (SessionPhase.IN_PROGRESS, SessionPhase.SHOWING_FEEDBACK)


class QuizProvider(Protocol):
    def get_active_quiz(self) -> Quiz | None: ...

    def get_questions(self) -> list[QuizQuestion]: ...


class SubmissionStore(Protocol):
    def submit_quiz(self, record: SubmissionRecord) -> SubmissionReceipt: ...


class EventSource(Protocol):
    def subscribe(self, handler: EventHandler) -> Callable[[], None]: ...


def select_attempt_questions(
    quiz: Quiz, bank: Sequence[QuizQuestion], limit: int
) -> list[QuizQuestion]:
    """Pick the attempt's questions: the quiz's ids in quiz order, else the bank order."""
    if quiz.question_ids:
        by_id = {question.id: question for question in bank}
        missing = [qid for qid in quiz.question_ids if qid not in by_id]
        if missing:
            logger.warning("Quiz %s references unknown questions: %s", quiz.id, ", ".join(missing))
        chosen = [by_id[qid] for qid in quiz.question_ids if qid in by_id]
    else:
        chosen = list(bank)
    return chosen[:limit]


class QuizSession:
    """Drives one participant through one attempt of the published quiz."""

    def __init__(
        self,
        participant_id: str,
        provider: QuizProvider,
        store: SubmissionStore,
        events: EventSource | None = None,
        *,
        config: SessionConfig | None = None,
        scheduler: Scheduler | None = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._participant_id = participant_id
        self._provider = provider
        self._store = store
        self._events = events
        self._config = config or SessionConfig()
        self._scheduler = scheduler or ThreadingScheduler()
        self._clock = clock
        self._lock = RLock()

        self._global_timer = GlobalTimer(
            self._scheduler,
            self._handle_global_timeout,
            tick_interval_seconds=self._config.tick_interval_seconds,
            lock=self._lock,
        )
        self._question_timer = QuestionTimer(
            self._scheduler,
            self._config.question_time_limit_seconds,
            self._handle_question_timeout,
            tick_interval_seconds=self._config.tick_interval_seconds,
            lock=self._lock,
        )

        self._unsubscribe: Callable[[], None] | None = None
        self._online_count: int = 0
        self._phase = SessionPhase.IDLE
        self._clear_attempt()

    def _clear_attempt(self) -> None:
        self._quiz: Quiz | None = None
        self._questions: list[QuizQuestion] = []
        self._index: int = 0
        self._answers: dict[str, str] = {}
        self._feedback: Feedback | None = None
        self._feedback_call: ScheduledCall | None = None
        self._feedback_generation: int = 0
        self._submitted: bool = False
        self._record: SubmissionRecord | None = None
        self._result: SessionResult | None = None
        self._submission_persisted: bool = False
        self._submission_error: str | None = None
        self._error_message: str | None = None

    # --- Lifecycle ---

    @property
    def participant_id(self) -> str:
        return self._participant_id

    @property
    def phase(self) -> SessionPhase:
        with self._lock:
            return self._phase

    @property
    def submission_record(self) -> SubmissionRecord | None:
        with self._lock:
            return self._record

    def start(self) -> SessionPhase:
        """Enter AWAITING_QUIZ, subscribe to events and try to load the active quiz."""
        with self._lock:
            if self._phase is not SessionPhase.IDLE:
                return self._phase
            if self._events is not None and self._unsubscribe is None:
                self._unsubscribe = self._events.subscribe(self.handle_event)
            self._phase = SessionPhase.AWAITING_QUIZ
            return self.load_active_quiz()

    def close(self) -> None:
        """Tear the session down: cancel timers, unsubscribe, return to IDLE."""
        with self._lock:
            self._stop_activity()
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None
            self._clear_attempt()
            self._phase = SessionPhase.IDLE
        logger.info("Session for %s closed", self._participant_id)

    def handle_event(self, event: QuizEvent) -> None:
        if isinstance(event, QuizPublished):
            self.load_active_quiz()
        elif isinstance(event, OnlineCountUpdate):
            with self._lock:
                self._online_count = event.count

    # --- Quiz loading ---

    def load_active_quiz(self) -> SessionPhase:
        """(Re)load the published quiz.

        Re-delivery for the quiz already being taken only re-derives the
        global deadline; a submitted attempt is left untouched.
        """
        with self._lock:
            if self._phase is SessionPhase.IDLE:
                return self._phase

            try:
                quiz = self._provider.get_active_quiz()
            except Exception:
                logger.exception("Loading the active quiz failed for %s", self._participant_id)
                self._enter_error("The daily quiz could not be loaded. Please try again later.")
                return self._phase

            if quiz is None:
                if self._phase is SessionPhase.ERRORED:
                    self._error_message = None
                    self._phase = SessionPhase.AWAITING_QUIZ
                return self._phase

            if self._quiz is not None and self._quiz.id == quiz.id:
                if self._phase in _ACTIVE_PHASES:
                    if self._sync_global_timer(quiz) == 0:
                        self._finalize_locked()
                    return self._phase
                if self._phase is SessionPhase.SUBMITTED:
                    return self._phase

            if self._phase in _ACTIVE_PHASES:
                logger.info(
                    "Quiz %s replaced by %s; finalizing the running attempt of %s",
                    self._quiz.id if self._quiz else None,
                    quiz.id,
                    self._participant_id,
                )
                self._finalize_locked()

            self._begin_attempt(quiz)
            return self._phase

    def _begin_attempt(self, quiz: Quiz) -> None:
        self._stop_activity()
        self._clear_attempt()

        if not quiz.is_published:
            self._enter_error("The daily quiz has not been published yet.")
            return

        try:
            bank = self._provider.get_questions()
        except Exception:
            logger.exception("Loading questions failed for quiz %s", quiz.id)
            self._enter_error("The quiz questions could not be loaded. Please try again later.")
            return

        questions = select_attempt_questions(quiz, bank, self._config.questions_per_attempt)
        if not questions:
            self._enter_error("The daily quiz does not contain any questions yet.")
            return

        self._quiz = quiz
        self._questions = questions

        if self._restore_existing_submission(quiz):
            return

        remaining = self._sync_global_timer(quiz)
        logger.info(
            "Participant %s started quiz %s with %d questions, %ds left",
            self._participant_id,
            quiz.id,
            len(questions),
            remaining,
        )
        if remaining == 0:
            self._finalize_locked()
            return

        self._phase = SessionPhase.IN_PROGRESS
        self._global_timer.start()
        self._question_timer.restart()

    def _restore_existing_submission(self, quiz: Quiz) -> bool:
        lookup = getattr(self._store, "get_submission", None)
        if lookup is None:
            return False
        existing: SubmissionRecord | None = lookup(quiz.id, self._participant_id)
        if existing is None:
            return False
        self._answers = {pair.question_id: pair.option_id for pair in existing.answers}
        self._record = existing
        self._result = SessionResult(score=existing.score, total_questions=existing.total_questions)
        self._submitted = True
        self._submission_persisted = True
        self._phase = SessionPhase.SUBMITTED
        logger.info("Participant %s already submitted quiz %s", self._participant_id, quiz.id)
        return True

    def _sync_global_timer(self, quiz: Quiz) -> int:
        duration = self._config.quiz_duration_seconds or quiz.duration_seconds
        return self._global_timer.sync_to_anchor(duration, quiz.published_at or 0, self._clock())

    # --- User actions ---

    def select_option(self, option_id: str) -> Feedback | None:
        """Record the choice for the current question and show feedback.

        Returns None without changing anything while feedback is visible or
        after submission.
        """
        with self._lock:
            if self._submitted or self._phase is SessionPhase.SUBMITTED:
                return None
            if self._phase is SessionPhase.SHOWING_FEEDBACK or self._feedback is not None:
                return None
            if self._phase is not SessionPhase.IN_PROGRESS:
                raise NotReadyError("No quiz question is available yet.")

            question = self._current_question()
            if question is None:
                raise NotReadyError("The current question is unavailable.")
            if not question.has_option(option_id):
                raise InvalidInputError(
                    f"Option '{option_id}' does not belong to question {question.id}."
                )

            self._answers[question.id] = option_id
            feedback = Feedback(
                selected_option_id=option_id,
                is_correct=option_id == question.correct_option_id,
            )
            self._feedback = feedback
            self._phase = SessionPhase.SHOWING_FEEDBACK
            self._question_timer.suspend()
            self._schedule_feedback_clear()
            logger.debug(
                "Participant %s answered %s with %s (%s)",
                self._participant_id,
                question.id,
                option_id,
                "correct" if feedback.is_correct else "incorrect",
            )
            return feedback

    def finalize(self) -> SubmissionRecord | None:
        """Submit the attempt now; a second call is a no-op returning None."""
        with self._lock:
            return self._finalize_locked()

    def retry_submission(self) -> bool:
        """Persist the already computed record again; the score is not recomputed."""
        with self._lock:
            if self._record is None:
                raise NotReadyError("There is no submission to retry.")
            return self._persist_locked()

    # --- Timer and feedback callbacks ---

    def _schedule_feedback_clear(self) -> None:
        self._feedback_generation += 1
        generation = self._feedback_generation
        self._feedback_call = self._scheduler.call_later(
            self._config.feedback_delay_seconds,
            lambda: self._handle_feedback_elapsed(generation),
        )

    def _cancel_feedback_clear(self) -> None:
        self._feedback_generation += 1
        if self._feedback_call is not None:
            self._feedback_call.cancel()
            self._feedback_call = None

    def _handle_feedback_elapsed(self, generation: int) -> None:
        with self._lock:
            if generation != self._feedback_generation:
                return
            if self._phase is not SessionPhase.SHOWING_FEEDBACK:
                return
            self._feedback_call = None
            self._feedback = None
            self._phase = SessionPhase.IN_PROGRESS
            self._advance()

    def _handle_question_timeout(self) -> None:
        with self._lock:
            if self._phase is not SessionPhase.IN_PROGRESS:
                return
            logger.debug(
                "Question %d timed out for %s", self._index + 1, self._participant_id
            )
            self._advance()

    def _handle_global_timeout(self) -> None:
        with self._lock:
            if self._phase not in _ACTIVE_PHASES:
                return
            logger.info("Quiz time is up for %s; submitting", self._participant_id)
            self._finalize_locked()

    def _advance(self) -> None:
        if self._index < len(self._questions) - 1:
            self._index += 1
            if self._current_question() is not None:
                self._question_timer.restart()
            return
        self._finalize_locked()

    # --- Finalize and persistence ---

    def _finalize_locked(self) -> SubmissionRecord | None:
        if self._submitted or self._quiz is None:
            return None
        self._submitted = True
        self._stop_activity()

        answers = tuple(
            AnsweredPair(question_id=question.id, option_id=self._answers[question.id])
            for question in self._questions
            if question.id in self._answers
        )
        final_score = score(self._questions, answers)
        record = SubmissionRecord(
            quiz_id=self._quiz.id,
            participant_id=self._participant_id,
            answers=answers,
            score=final_score,
            total_questions=len(self._questions),
            submitted_at=self._clock(),
        )
        self._record = record
        self._result = SessionResult(score=final_score, total_questions=len(self._questions))
        self._phase = SessionPhase.SUBMITTED
        logger.info(
            "Participant %s finished quiz %s: %s",
            self._participant_id,
            self._quiz.id,
            self._result.label,
        )
        self._persist_locked()
        return record

    def _persist_locked(self) -> bool:
        if self._record is None:
            return False
        if self._submission_persisted:
            return True

        last_error: Exception | None = None
        for attempt in range(1, self._config.submission_retry_attempts + 1):
            try:
                self._store.submit_quiz(self._record)
            except DuplicateSubmissionError:
                logger.info(
                    "Submission of %s for quiz %s was already stored",
                    self._participant_id,
                    self._record.quiz_id,
                )
                break
            except Exception as exc:
                last_error = exc
                logger.warning(
                    "Storing submission of %s failed (attempt %d/%d): %s",
                    self._participant_id,
                    attempt,
                    self._config.submission_retry_attempts,
                    exc,
                )
            else:
                break
        else:
            self._submission_error = str(last_error)
            logger.error(
                "Submission of %s for quiz %s could not be stored; result kept locally",
                self._participant_id,
                self._record.quiz_id,
            )
            return False

        self._submission_persisted = True
        self._submission_error = None
        return True

    # --- Helpers ---

    def _current_question(self) -> QuizQuestion | None:
        if 0 <= self._index < len(self._questions):
            return self._questions[self._index]
        self._enter_error("The current question could not be found.")
        return None

    def _stop_activity(self) -> None:
        self._global_timer.suspend()
        self._question_timer.suspend()
        self._cancel_feedback_clear()
        self._feedback = None

    def _enter_error(self, message: str) -> None:
        self._stop_activity()
        self._phase = SessionPhase.ERRORED
        self._error_message = message
        logger.warning("Session of %s errored: %s", self._participant_id, message)

    # --- Projection ---

    def view(self) -> SessionView:
        with self._lock:
            current: QuizQuestion | None = None
            if self._phase in _ACTIVE_PHASES and 0 <= self._index < len(self._questions):
                current = self._questions[self._index]
            error_message = self._error_message
            if self._phase is SessionPhase.SUBMITTED and self._submission_error:
                error_message = "Your result could not be saved yet. Please retry."
            return SessionView(
                phase=self._phase,
                quiz_id=self._quiz.id if self._quiz else None,
                quiz_title=self._quiz.title if self._quiz else None,
                current_question=current,
                question_number=self._index + 1 if self._questions else 0,
                total_questions=len(self._questions),
                question_seconds_left=self._question_timer.remaining if current else 0,
                global_seconds_left=self._global_timer.remaining,
                feedback=self._feedback,
                submitted=self._submitted,
                result=self._result,
                submission_persisted=self._submission_persisted,
                error_message=error_message,
                online_count=self._online_count,
            )

    def get_answers(self) -> dict[str, str]:
        with self._lock:
            return dict(self._answers)
