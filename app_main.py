"""Entry point for DailyQuiz.

One process hosts both sides of the daily quiz: the participant HTTP API runs
in a daemon thread, and the Qt operator console runs on the main thread.
Both share a single QuizManager, so sessions, timers and submissions live in
memory for as long as the console is open.
"""

from __future__ import annotations

import socket
import sys

from PySide6.QtWidgets import QApplication

from daily_quiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from daily_quiz.core.quiz_manager import QuizManager
from daily_quiz.server.api_server import start_api_server
from daily_quiz.ui.operator_main_window import OperatorMainWindow
from daily_quiz.utils.logging_config import configure_logging


def _determine_student_url(port: int) -> str:
    """Best-effort determination of the local IP for the participant-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, start the participant API, and launch the operator console."""
    logger = configure_logging()
    logger.info("Starting DailyQuiz")

    quiz_manager = QuizManager()
    start_api_server(quiz_manager=quiz_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    student_url = _determine_student_url(DEFAULT_PORT)
    logger.info("Participant page available at %s", student_url)

    app = QApplication(sys.argv)
    window = OperatorMainWindow(quiz_manager=quiz_manager, student_url=student_url)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
