"""Service ranking submitted results for the operator."""

from __future__ import annotations

from dataclasses import dataclass

from daily_quiz.core.models import Participant, SubmissionRecord


@dataclass(slots=True)
class ResultRow:
    """Immutable snapshot returned to consumers."""

    participant_id: str
    display_name: str
    score: int
    total_questions: int
    submitted_at: int

    @property
    def label(self) -> str:
        return f"{self.score}/{self.total_questions}"

    @property
    def percentage(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return round(self.score / self.total_questions * 100, 1)


class ResultsBoard:
    """Ranks submissions by score, earlier submissions first on ties."""

    def __init__(self) -> None:
        self._rows: dict[str, ResultRow] = {}

    def rebuild(self, records: list[SubmissionRecord], participants: dict[str, Participant]) -> None:
        self._rows.clear()
        for record in records:
            participant = participants.get(record.participant_id)
            self._rows[record.participant_id] = ResultRow(
                participant_id=record.participant_id,
                display_name=participant.name if participant else record.participant_id,
                score=record.score,
                total_questions=record.total_questions,
                submitted_at=record.submitted_at,
            )

    def get_ranking(self, limit: int | None = None) -> list[ResultRow]:
        ranked = sorted(self._rows.values(), key=lambda row: (-row.score, row.submitted_at))
        return ranked if limit is None else ranked[:limit]
