"""Scoring of a finished attempt."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from daily_quiz.core.models import AnsweredPair, QuizQuestion


def score(
    questions: Sequence[QuizQuestion],
    answers: Mapping[str, str] | Iterable[AnsweredPair],
) -> int:
    """Count the questions whose recorded option matches the correct option.

    `answers` is either a question id -> option id mapping or an iterable of
    AnsweredPair. Unanswered questions earn nothing; answers for questions
    outside `questions` are ignored.
    """
    if isinstance(answers, Mapping):
        chosen = dict(answers)
    else:
        chosen = {pair.question_id: pair.option_id for pair in answers}

    total = 0
    for question in questions:
        option_id = chosen.get(question.id)
        if option_id is not None and option_id == question.correct_option_id:
            total += 1
    return total
