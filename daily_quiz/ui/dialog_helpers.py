"""Helper functions for common dialog patterns in the operator UI."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def confirm_replace_bank(parent: QWidget) -> bool:
    """Ask before an import replaces the loaded question bank."""
    reply = QMessageBox.question(
        parent,
        "Confirm Import",
        "Importing a question bank will replace the current one. Continue?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_replace_active_quiz(parent: QWidget, active_title: str) -> bool:
    """Ask before publishing over a quiz that participants may still be taking.

    Returns:
        True if the operator confirmed, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        "Replace Active Quiz",
        f"'{active_title}' is currently active. Running attempts will be submitted "
        "when the new quiz is published. Continue?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
