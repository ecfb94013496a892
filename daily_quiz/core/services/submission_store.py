"""In-memory persistence of submission records."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from threading import Lock

from daily_quiz.core.errors import DuplicateSubmissionError
from daily_quiz.core.models import SubmissionReceipt, SubmissionRecord


class InMemorySubmissionStore:
    """Keeps at most one record per (quiz, participant) pair."""

    def __init__(self, on_stored: Callable[[SubmissionRecord], None] | None = None) -> None:
        self._lock = Lock()
        self._records: dict[tuple[str, str], SubmissionRecord] = {}
        self._on_stored = on_stored

    def submit_quiz(self, record: SubmissionRecord) -> SubmissionReceipt:
        key = (record.quiz_id, record.participant_id)
        with self._lock:
            if key in self._records:
                raise DuplicateSubmissionError(
                    f"Participant {record.participant_id} already submitted quiz {record.quiz_id}."
                )
            self._records[key] = record
        if self._on_stored is not None:
            self._on_stored(record)
        return SubmissionReceipt(
            quiz_id=record.quiz_id,
            participant_id=record.participant_id,
            stored_at=datetime.now(timezone.utc),
        )

    def get_submission(self, quiz_id: str, participant_id: str) -> SubmissionRecord | None:
        with self._lock:
            return self._records.get((quiz_id, participant_id))

    def get_submissions(self, quiz_id: str | None = None) -> list[SubmissionRecord]:
        with self._lock:
            records = list(self._records.values())
        if quiz_id is not None:
            records = [record for record in records if record.quiz_id == quiz_id]
        return sorted(records, key=lambda record: record.submitted_at)
