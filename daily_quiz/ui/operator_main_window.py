"""Qt main window for the quiz operator."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from daily_quiz.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from daily_quiz.constants.quiz_constants import DEFAULT_QUESTION_BANK_PATH
from daily_quiz.constants.ui_constants import (
    BUTTON_ABOUT,
    BUTTON_HELP,
    BUTTON_IMPORT_BANK,
    BUTTON_PUBLISH,
    BUTTON_SAVE_BANK,
    EXPORT_DIALOG_TITLE,
    EXPORT_FILE_FILTER,
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    NO_BANK_LOADED_MESSAGE,
    STATUS_REFRESH_INTERVAL_MS,
    STUDENT_URL_PLACEHOLDER,
    WINDOW_TITLE,
)
from daily_quiz.core.errors import QuizError
from daily_quiz.core.quiz_exporter import save_question_bank
from daily_quiz.core.quiz_importer import load_question_bank
from daily_quiz.core.quiz_manager import QuizManager
from daily_quiz.styling.styles import Styles
from daily_quiz.ui.components.results_panel import ResultsPanel
from daily_quiz.ui.dialog_helpers import (
    confirm_replace_active_quiz,
    confirm_replace_bank,
    show_error,
    show_info,
    show_warning,
)
from daily_quiz.ui.publish_dialog import PublishDialog


class OperatorMainWindow(QMainWindow):
    """Main Qt window: question bank management, publishing and live results."""

    def __init__(self, quiz_manager: QuizManager, student_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.quiz_manager = quiz_manager
        self.student_url = student_url or STUDENT_URL_PLACEHOLDER
        self._last_export_path: Path | None = None

        self._build_ui()
        self._configure_refresh_timer()
        self.setStyleSheet(Styles.get_main_window_style())
        self._auto_load_default_bank()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        button_row = QHBoxLayout()
        self.import_button = QPushButton(BUTTON_IMPORT_BANK, self)
        self.import_button.clicked.connect(self._handle_import_bank)
        button_row.addWidget(self.import_button)

        self.save_button = QPushButton(BUTTON_SAVE_BANK, self)
        self.save_button.clicked.connect(self._handle_save_bank)
        button_row.addWidget(self.save_button)

        self.publish_button = QPushButton(BUTTON_PUBLISH, self)
        self.publish_button.clicked.connect(self._handle_publish)
        button_row.addWidget(self.publish_button)

        self.about_button = QPushButton(BUTTON_ABOUT, self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton(BUTTON_HELP, self)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        root_layout.addLayout(button_row)

        self.results_panel = ResultsPanel(self.quiz_manager, self.student_url, self)
        root_layout.addWidget(self.results_panel, stretch=1)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(STATUS_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self.results_panel.refresh)
        self.refresh_timer.start()

    def _handle_import_bank(self) -> None:
        if self.quiz_manager.has_question_bank() and not confirm_replace_bank(self):
            return

        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMPORT_DIALOG_TITLE,
            str(Path.home()),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            imported = load_question_bank(Path(file_path))
            self.quiz_manager.load_question_bank(imported.questions)
        except (OSError, QuizError) as exc:
            show_error(self, "Import failed", str(exc))
            return

        show_info(self, "Question bank imported", f"Imported {len(imported.questions)} questions.")

    def _handle_save_bank(self) -> None:
        if not self.quiz_manager.has_question_bank():
            show_warning(self, "No question bank", NO_BANK_LOADED_MESSAGE)
            return

        default_path = self._last_export_path or (Path.cwd() / DEFAULT_QUESTION_BANK_PATH)
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            EXPORT_DIALOG_TITLE,
            str(default_path),
            EXPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            save_question_bank(Path(file_path), self.quiz_manager.get_questions())
        except (OSError, ValueError) as exc:
            show_error(self, "Export failed", str(exc))
            return

        self._last_export_path = Path(file_path)
        show_info(self, "Question bank saved", f"Question bank exported to {file_path}.")

    def _handle_publish(self) -> None:
        if not self.quiz_manager.has_question_bank():
            show_warning(self, "No question bank", NO_BANK_LOADED_MESSAGE)
            return

        active = self.quiz_manager.get_active_quiz()
        if active is not None and not confirm_replace_active_quiz(self, active.title):
            return

        dialog = PublishDialog(self, question_count=self.quiz_manager.get_question_count())
        if not dialog.exec():
            return

        try:
            quiz = self.quiz_manager.publish_daily_quiz(dialog.get_title(), dialog.get_duration_minutes())
        except QuizError as exc:
            show_error(self, "Publishing failed", str(exc))
            return

        self.results_panel.refresh()
        show_info(self, "Quiz published", f"'{quiz.title}' is live for {quiz.duration_minutes} minutes.")

    def _auto_load_default_bank(self) -> None:
        default_path = Path(DEFAULT_QUESTION_BANK_PATH)
        if not default_path.exists():
            return
        try:
            imported = load_question_bank(default_path)
            self.quiz_manager.load_question_bank(imported.questions)
        except (OSError, QuizError) as exc:
            show_warning(self, "Question bank not loaded", f"{default_path}: {exc}")

    def _handle_about(self) -> None:
        show_info(
            self,
            f"About {APP_NAME}",
            f"{APP_NAME} v{APP_VERSION}\nLicense: {APP_LICENSE}\n\n{APP_ABOUT_TEXT}",
        )

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        self.refresh_timer.stop()
        self.quiz_manager.shutdown()
        super().closeEvent(event)
