"""Qt UI constants used across the operator console."""

WINDOW_TITLE: str = "Daily Quiz Operator Console"
STUDENT_URL_PLACEHOLDER: str = "http://<operator-ip>:8000/"
STATUS_REFRESH_INTERVAL_MS: int = 1000

BUTTON_IMPORT_BANK: str = "Import Question Bank"
BUTTON_SAVE_BANK: str = "Save Question Bank"
BUTTON_PUBLISH: str = "Publish Daily Quiz"
BUTTON_ABOUT: str = "About"
BUTTON_HELP: str = "Help"

IMPORT_DIALOG_TITLE: str = "Select question bank file"
IMPORT_FILE_FILTER: str = "Question banks (*.txt);;All files (*.*)"
EXPORT_DIALOG_TITLE: str = "Save question bank to file"
EXPORT_FILE_FILTER: str = "Question banks (*.txt);;All files (*.*)"

NO_BANK_LOADED_MESSAGE: str = "Please import a question bank first."
NO_ACTIVE_QUIZ_MESSAGE: str = "No quiz has been published yet."
ACTIVE_QUIZ_TEMPLATE: str = "Active quiz: {title} ({duration} min), published {published}, {remaining} left"
ACTIVE_QUIZ_CLOSED_TEMPLATE: str = "Active quiz: {title}, closed"
ONLINE_COUNT_TEMPLATE: str = "{count} participant(s) online"
RESULTS_EMPTY_STATE: str = "No participants have registered yet."
DEFAULT_QUIZ_TITLE: str = "Daily Quiz"
TOP_RESULTS_TEMPLATE: str = "Top results: {ranking}"
TOP_RESULTS_LIMIT: int = 3
