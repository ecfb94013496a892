"""Dialog collecting the title and duration of the quiz to publish."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

from daily_quiz.constants.quiz_constants import (
    DEFAULT_QUIZ_DURATION_MINUTES,
    QUESTIONS_PER_ATTEMPT,
)
from daily_quiz.constants.ui_constants import DEFAULT_QUIZ_TITLE


class PublishDialog(QDialog):
    """Modal dialog confirming the daily quiz to publish."""

    def __init__(self, parent=None, question_count: int = 0) -> None:
        super().__init__(parent)
        self.setWindowTitle("Publish Daily Quiz")
        self.setModal(True)
        self.setMinimumWidth(400)

        self._question_count = question_count
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        quiz_group = QGroupBox("Quiz")
        quiz_layout = QVBoxLayout()
        quiz_group.setLayout(quiz_layout)

        title_row = QHBoxLayout()
        title_row.addWidget(QLabel("Title:"))
        self.title_edit = QLineEdit(DEFAULT_QUIZ_TITLE)
        title_row.addWidget(self.title_edit, stretch=1)
        quiz_layout.addLayout(title_row)

        duration_row = QHBoxLayout()
        duration_label = QLabel("Duration:")
        duration_label.setToolTip("Shared deadline counted from the moment of publishing")
        self.duration_spinbox = QSpinBox()
        self.duration_spinbox.setRange(1, 180)
        self.duration_spinbox.setValue(DEFAULT_QUIZ_DURATION_MINUTES)
        self.duration_spinbox.setSuffix(" min")
        duration_row.addWidget(duration_label)
        duration_row.addStretch()
        duration_row.addWidget(self.duration_spinbox)
        quiz_layout.addLayout(duration_row)

        attempt_size = min(self._question_count, QUESTIONS_PER_ATTEMPT)
        quiz_layout.addWidget(
            QLabel(f"Participants answer the first {attempt_size} of {self._question_count} questions.")
        )

        layout.addWidget(quiz_group)

        button_row = QHBoxLayout()
        button_row.addStretch()

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)  # type: ignore[arg-type]
        button_row.addWidget(self.cancel_button)

        self.publish_button = QPushButton("Publish")
        self.publish_button.clicked.connect(self.accept)  # type: ignore[arg-type]
        self.publish_button.setDefault(True)
        button_row.addWidget(self.publish_button)

        layout.addLayout(button_row)

    def get_title(self) -> str:
        return self.title_edit.text()

    def get_duration_minutes(self) -> int:
        return self.duration_spinbox.value()
