"""Exception hierarchy shared by the quiz core, the API and the console."""

from __future__ import annotations


class QuizError(Exception):
    """Base class for daily quiz errors."""


class InvalidInputError(QuizError, ValueError):
    """Raised for malformed registration, login or answer input."""


class NotReadyError(QuizError, RuntimeError):
    """Raised when an action needs a quiz or question that is not loaded yet."""


class StoreWriteError(QuizError, RuntimeError):
    """Raised when a submission record could not be persisted."""


class DuplicateSubmissionError(StoreWriteError):
    """Raised when a second record arrives for the same quiz and participant."""


class QuizImportError(QuizError, ValueError):
    """Raised when a question bank definition cannot be parsed."""


class UnknownParticipantError(QuizError, LookupError):
    """Raised when an action names a participant without a live session."""
