"""Logging setup for DailyQuiz.

Modules log through `logging.getLogger(__name__)`, so every session and
server message lands under the `daily_quiz` logger.
"""

from __future__ import annotations

import logging
from logging import Logger


def configure_logging(level: int = logging.INFO) -> Logger:
    """Install the console log format and return the `daily_quiz` logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("daily_quiz")
