"""Utilities for exporting the question bank to the plain-text import format."""

from __future__ import annotations

from pathlib import Path

from daily_quiz.core.models import QuizQuestion


def save_question_bank(file_path: Path, questions: list[QuizQuestion]) -> None:
    """Persist the provided questions to disk in the text import format."""

    if not questions:
        raise ValueError("Cannot export an empty question bank.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_question_bank(questions), encoding="utf-8")


def serialize_question_bank(questions: list[QuizQuestion]) -> str:
    return "\n\n---\n\n".join(_serialize_question(q) for q in questions) + "\n"


def _serialize_question(question: QuizQuestion) -> str:
    lines = [f"ID: {question.id}"]

    prompt_lines = question.prompt.splitlines() or [question.prompt]
    lines.append(f"Q: {prompt_lines[0]}")
    lines.extend(prompt_lines[1:])

    correct_letter = None
    for index, option in enumerate(question.options):
        letter = chr(ord("A") + index)
        option_lines = option.text.splitlines() or [option.text]
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(option_lines[1:])
        if option.id == question.correct_option_id:
            correct_letter = letter

    if correct_letter is not None:
        lines.append(f"CORRECT: {correct_letter}")

    return "\n".join(lines)
