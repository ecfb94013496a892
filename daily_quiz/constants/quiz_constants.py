"""Quiz-session budgets shared by the core and the surfaces."""

QUESTION_TIME_LIMIT_SECONDS: int = 60
FEEDBACK_DELAY_SECONDS: float = 1.0
TICK_INTERVAL_SECONDS: float = 1.0
QUESTIONS_PER_ATTEMPT: int = 10
DEFAULT_QUIZ_DURATION_MINUTES: int = 10
SUBMISSION_RETRY_ATTEMPTS: int = 3
DEFAULT_QUESTION_BANK_PATH: str = "question_bank.txt"
