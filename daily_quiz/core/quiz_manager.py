"""Business logic for the daily quiz shared between the operator UI and the API."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Lock

from daily_quiz.constants.quiz_constants import DEFAULT_QUIZ_DURATION_MINUTES
from daily_quiz.core.config import SessionConfig
from daily_quiz.core.errors import UnknownParticipantError
from daily_quiz.core.models import (
    Feedback,
    Participant,
    Quiz,
    QuizQuestion,
    SessionView,
    SubmissionRecord,
)
from daily_quiz.core.scheduler import Scheduler, ThreadingScheduler, epoch_millis
from daily_quiz.core.services.event_bridge import EventBridge
from daily_quiz.core.services.quiz_repository import QuizRepository
from daily_quiz.core.services.quiz_session import QuizSession
from daily_quiz.core.services.roster import Roster
from daily_quiz.core.services.scoreboard import ResultRow, ResultsBoard
from daily_quiz.core.services.submission_store import InMemorySubmissionStore

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade for quiz services: Repository, Roster, Sessions, Store and Results.

    The manager lock only guards its own registries. Events are published and
    sessions are started or closed after releasing it, because session
    handlers call back into the repository.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        scheduler: Scheduler | None = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._lock = Lock()
        self._config = config or SessionConfig()
        self._scheduler = scheduler or ThreadingScheduler()
        self._clock = clock

        # Services
        self._events = EventBridge()
        self._repository = QuizRepository(clock=clock)
        self._store = InMemorySubmissionStore(on_stored=self._handle_submission_stored)
        self._roster = Roster()
        self._results = ResultsBoard()
        self._sessions: dict[str, QuizSession] = {}

    @property
    def events(self) -> EventBridge:
        return self._events

    # --- Question bank ---

    def load_question_bank(self, questions: list[QuizQuestion]) -> None:
        self._repository.load_questions(questions)
        logger.info("Question bank loaded with %d questions", len(questions))

    def get_questions(self) -> list[QuizQuestion]:
        return self._repository.get_questions()

    def get_question_count(self) -> int:
        return self._repository.get_question_count()

    def has_question_bank(self) -> bool:
        return self._repository.has_questions()

    # --- Quizzes ---

    def create_quiz(
        self,
        title: str,
        duration_minutes: int = DEFAULT_QUIZ_DURATION_MINUTES,
        question_ids: list[str] | None = None,
    ) -> Quiz:
        return self._repository.create_quiz(title, duration_minutes, question_ids)

    def publish_quiz(self, quiz_id: str) -> Quiz:
        quiz = self._repository.publish_quiz(quiz_id)
        self._events.notify_quiz_published(quiz.id)
        return quiz

    def publish_daily_quiz(
        self,
        title: str,
        duration_minutes: int = DEFAULT_QUIZ_DURATION_MINUTES,
        question_ids: list[str] | None = None,
    ) -> Quiz:
        """Create a quiz and publish it right away."""
        quiz = self.create_quiz(title, duration_minutes, question_ids)
        return self.publish_quiz(quiz.id)

    def get_active_quiz(self) -> Quiz | None:
        return self._repository.get_active_quiz()

    # --- Participants ---

    def register_participant(self, name: str, age: int | str, village: str) -> Participant:
        with self._lock:
            participant = self._roster.register(name, age, village)
        logger.info("Registered participant %s", participant.id)
        return participant

    def login(self, code: str) -> Participant:
        """Log a participant in and start their session if none is running."""
        with self._lock:
            participant = self._roster.login(code)
            session = self._sessions.get(participant.id)
            created = session is None
            if session is None:
                session = QuizSession(
                    participant.id,
                    self._repository,
                    self._store,
                    self._events,
                    config=self._config,
                    scheduler=self._scheduler,
                    clock=self._clock,
                )
                self._sessions[participant.id] = session
            online = self._roster.online_count()

        if created:
            session.start()
        self._events.notify_online_count(online)
        logger.info("Participant %s logged in (%d online)", participant.id, online)
        return participant

    def logout(self, participant_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(participant_id, None)
            was_online = self._roster.logout(participant_id)
            online = self._roster.online_count()

        if session is not None:
            session.close()
        if was_online:
            self._events.notify_online_count(online)
            logger.info("Participant %s logged out (%d online)", participant_id, online)

    def get_participant(self, participant_id: str) -> Participant | None:
        with self._lock:
            return self._roster.get(participant_id)

    def get_participants(self) -> list[Participant]:
        with self._lock:
            return self._roster.get_participants()

    def is_online(self, participant_id: str) -> bool:
        with self._lock:
            return self._roster.is_online(participant_id)

    def get_online_count(self) -> int:
        return self._events.get_online_count()

    # --- Session delegation ---

    def get_session(self, participant_id: str) -> QuizSession:
        with self._lock:
            session = self._sessions.get(participant_id)
        if session is None:
            raise UnknownParticipantError(f"Participant '{participant_id}' is not logged in.")
        return session

    def get_session_view(self, participant_id: str) -> SessionView:
        return self.get_session(participant_id).view()

    def select_option(self, participant_id: str, option_id: str) -> Feedback | None:
        return self.get_session(participant_id).select_option(option_id)

    def retry_submission(self, participant_id: str) -> bool:
        return self.get_session(participant_id).retry_submission()

    def shutdown(self) -> None:
        """Close every running session."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()

    # --- Results ---

    def get_submissions(self, quiz_id: str | None = None) -> list[SubmissionRecord]:
        return self._store.get_submissions(quiz_id)

    def get_results(self, limit: int | None = None) -> list[ResultRow]:
        """Ranked results of the active quiz."""
        quiz = self._repository.get_active_quiz()
        if quiz is None:
            return []
        records = self._store.get_submissions(quiz.id)
        with self._lock:
            participants = {p.id: p for p in self._roster.get_participants()}
            self._results.rebuild(records, participants)
            return self._results.get_ranking(limit)

    def get_score_label(self, participant_id: str) -> str:
        """Score of the participant on the active quiz as "score/total", or "-"."""
        quiz = self._repository.get_active_quiz()
        if quiz is None:
            return "-"
        record = self._store.get_submission(quiz.id, participant_id)
        return f"{record.score}/{record.total_questions}" if record else "-"

    def _handle_submission_stored(self, record: SubmissionRecord) -> None:
        self._events.notify_submission_received(record.quiz_id, record.participant_id)
