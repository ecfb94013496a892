"""Network configuration constants for the student API."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
PARTICIPANT_COOKIE: str = "dailyquiz_participant"
PARTICIPANT_COOKIE_MAX_AGE_SECONDS: int = 60 * 60 * 12
