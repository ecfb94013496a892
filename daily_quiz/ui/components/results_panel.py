"""Component listing participants, presence and scores on the active quiz."""

from __future__ import annotations

from datetime import datetime

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QLabel,
    QListWidget,
    QListWidgetItem,
    QVBoxLayout,
    QWidget,
)

from daily_quiz.constants.ui_constants import (
    ACTIVE_QUIZ_CLOSED_TEMPLATE,
    ACTIVE_QUIZ_TEMPLATE,
    NO_ACTIVE_QUIZ_MESSAGE,
    ONLINE_COUNT_TEMPLATE,
    RESULTS_EMPTY_STATE,
    TOP_RESULTS_LIMIT,
    TOP_RESULTS_TEMPLATE,
)
from daily_quiz.core.quiz_manager import QuizManager
from daily_quiz.core.scheduler import epoch_millis
from daily_quiz.styling.styles import Styles


def _format_remaining(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes}:{secs:02d}"


class ResultsPanel(QWidget):
    """Shows the active quiz, the online count and every participant's score."""

    def __init__(self, quiz_manager: QuizManager, student_url: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.student_url = student_url
        self._snapshot: list[tuple[str, bool, str]] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.network_label = QLabel(f"Participants connect to: {self.student_url}", self)
        self.network_label.setWordWrap(True)
        self.network_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.network_label)

        self.quiz_label = QLabel(NO_ACTIVE_QUIZ_MESSAGE, self)
        self.quiz_label.setWordWrap(True)
        layout.addWidget(self.quiz_label)

        self.online_label = QLabel(ONLINE_COUNT_TEMPLATE.format(count=0), self)
        self.online_label.setStyleSheet(Styles.get_status_label_style())
        layout.addWidget(self.online_label)

        self.ranking_label = QLabel("", self)
        self.ranking_label.setWordWrap(True)
        layout.addWidget(self.ranking_label)

        self.participant_list = QListWidget(self)
        self.participant_list.setAlternatingRowColors(True)
        layout.addWidget(self.participant_list, stretch=1)

        self.empty_label = QLabel(RESULTS_EMPTY_STATE, self)
        self.empty_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.empty_label)

    def refresh(self) -> None:
        self._refresh_quiz_status()
        self.online_label.setText(ONLINE_COUNT_TEMPLATE.format(count=self.quiz_manager.get_online_count()))
        self._refresh_participants()
        self._refresh_ranking()

    def _refresh_quiz_status(self) -> None:
        quiz = self.quiz_manager.get_active_quiz()
        if quiz is None or quiz.published_at is None:
            self.quiz_label.setText(NO_ACTIVE_QUIZ_MESSAGE)
            return
        elapsed = (epoch_millis() - quiz.published_at) // 1000
        remaining = quiz.duration_seconds - elapsed
        if remaining <= 0:
            self.quiz_label.setText(ACTIVE_QUIZ_CLOSED_TEMPLATE.format(title=quiz.title))
            return
        published = datetime.fromtimestamp(quiz.published_at / 1000).strftime("%H:%M:%S")
        self.quiz_label.setText(
            ACTIVE_QUIZ_TEMPLATE.format(
                title=quiz.title,
                duration=quiz.duration_minutes,
                published=published,
                remaining=_format_remaining(remaining),
            )
        )

    def _refresh_participants(self) -> None:
        participants = self.quiz_manager.get_participants()
        snapshot = [
            (p.id, self.quiz_manager.is_online(p.id), self.quiz_manager.get_score_label(p.id))
            for p in participants
        ]
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot
        self.participant_list.clear()
        names = {p.id: p for p in participants}
        for participant_id, online, score_label in snapshot:
            participant = names[participant_id]
            presence = "online" if online else "offline"
            QListWidgetItem(
                f"{participant_id}  {participant.name} ({participant.village}) | {presence} | score {score_label}",
                self.participant_list,
            )
        self.empty_label.setVisible(not snapshot)

    def _refresh_ranking(self) -> None:
        rows = self.quiz_manager.get_results(limit=TOP_RESULTS_LIMIT)
        ranking = ", ".join(f"{row.display_name} {row.label}" for row in rows)
        self.ranking_label.setText(TOP_RESULTS_TEMPLATE.format(ranking=ranking) if rows else "")

    def update_student_url(self, url: str) -> None:
        self.student_url = url
        self.network_label.setText(f"Participants connect to: {url}")
