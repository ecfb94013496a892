"""Service for participant registration, login codes and online presence."""

from __future__ import annotations

from datetime import datetime, timezone
import string

from daily_quiz.core.errors import InvalidInputError
from daily_quiz.core.models import Participant

_CODES_PER_LETTER = 99


class Roster:
    """Issues login codes (A01..A99, B01..) and tracks who is online."""

    def __init__(self) -> None:
        self._participants: dict[str, Participant] = {}
        self._online: set[str] = set()
        self._issued: int = 0

    def register(self, name: str, age: int | str, village: str) -> Participant:
        cleaned_name = (name or "").strip()
        cleaned_village = (village or "").strip()
        if not cleaned_name or not cleaned_village or age in (None, ""):
            raise InvalidInputError("All fields are required")
        try:
            age_value = int(age)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError("Please enter a valid age") from exc
        if age_value <= 0:
            raise InvalidInputError("Please enter a valid age")

        participant = Participant(
            id=self._next_code(),
            name=cleaned_name,
            age=age_value,
            village=cleaned_village,
            registered_at=datetime.now(timezone.utc),
        )
        self._participants[participant.id] = participant
        return participant

    def login(self, code: str) -> Participant:
        participant = self._participants.get((code or "").strip().upper())
        if participant is None:
            raise InvalidInputError("Invalid login code")
        self._online.add(participant.id)
        return participant

    def logout(self, participant_id: str) -> bool:
        """Mark the participant offline; returns False if they were not online."""
        if participant_id not in self._online:
            return False
        self._online.discard(participant_id)
        return True

    def get(self, participant_id: str) -> Participant | None:
        return self._participants.get(participant_id)

    def get_participants(self) -> list[Participant]:
        return sorted(self._participants.values(), key=lambda p: p.registered_at)

    def is_online(self, participant_id: str) -> bool:
        return participant_id in self._online

    def online_count(self) -> int:
        return len(self._online)

    def _next_code(self) -> str:
        letter_index, number = divmod(self._issued, _CODES_PER_LETTER)
        if letter_index >= len(string.ascii_uppercase):
            raise InvalidInputError("No more login codes are available.")
        self._issued += 1
        return f"{string.ascii_uppercase[letter_index]}{number + 1:02d}"
