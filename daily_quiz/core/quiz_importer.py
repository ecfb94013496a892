"""Utilities for importing the question bank from a human-friendly text file.

File format (repeat blocks separated by blank lines or '---'):

    ID: optional-question-id
    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    ...            (two to six options, lettered A-F without gaps)
    CORRECT: A|B|C|D|E|F

Example:

    ID: sum-basic
    Q: What is $2 + 2$?
    A: 3
    B: 4
    C: 5
    CORRECT: B

Option letters become the lower-case option ids ("a", "b", ...). Questions
without an ID line receive one when the bank is loaded.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from daily_quiz.core.errors import QuizImportError
from daily_quiz.core.models import QuestionOption, QuizQuestion

OPTION_LETTERS = ("A", "B", "C", "D", "E", "F")


@dataclass(slots=True)
class ImportedQuestionBank:
    """Container for the imported file and its questions."""

    source_path: Path
    questions: list[QuizQuestion]


def load_question_bank(file_path: Path) -> ImportedQuestionBank:
    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise QuizImportError(f"Question bank file is not valid UTF-8: {exc}") from exc
    questions = parse_question_bank(text)
    if not questions:
        raise QuizImportError("Question bank file did not contain any questions.")
    return ImportedQuestionBank(source_path=file_path, questions=questions)


def parse_question_bank(text: str) -> list[QuizQuestion]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block) for block in blocks if block]


def _parse_block(block: str) -> QuizQuestion:
    question_id = ""
    prompt_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("ID:"):
            question_id = line[3:].strip()
            current_section = None
            continue

        if upper.startswith("Q:"):
            prompt_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            if letter in options:
                raise QuizImportError(f"Option {letter} is defined twice.")
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            prompt_lines.append(line)
        elif current_section in OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(f"Encountered text outside of a known section: '{line}'.")

    prompt = "\n".join(prompt_lines).strip()
    if not prompt:
        raise QuizImportError("Question text missing (Q: ...)")

    letters = OPTION_LETTERS[: len(options)]
    if len(options) < 2 or set(options) != set(letters):
        raise QuizImportError("Each question needs two to six options lettered A-F without gaps.")
    if any(not options[letter].strip() for letter in letters):
        raise QuizImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError("CORRECT is required for every question.")
    if correct_letter not in letters:
        raise QuizImportError(f"CORRECT must be one of {', '.join(letters)}.")

    return QuizQuestion(
        id=question_id,
        prompt=prompt,
        options=tuple(
            QuestionOption(id=letter.lower(), text=options[letter].strip()) for letter in letters
        ),
        correct_option_id=correct_letter.lower(),
    )
