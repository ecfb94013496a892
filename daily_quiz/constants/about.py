"""Static metadata describing DailyQuiz."""

APP_NAME = "DailyQuiz"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "DailyQuiz runs a timed multiple-choice quiz for many participants at once. "
    "The operator publishes the daily quiz from this console; participants log in "
    "from the web page with their code and share one deadline."
)

HELP_TEXT = (
    "Import a question bank written in the text format below, then publish the daily quiz. "
    "Each participant answers up to ten questions with one minute per question, and the whole "
    "quiz closes when its duration has elapsed since publishing.\n\n"
    "ID: radians-30\n"
    "Q: What is $30^o$ in radians?\n"
    "A: \\frac{\\pi}{2}\nB: \\frac{\\pi}{6}\nC: \\frac{\\pi}{3}\n"
    "CORRECT: B\n\n"
    "---\n\n"
    "Q: What is $45^o$ in radians?\n"
    "A: \\frac{\\pi}{3}\nB: \\frac{\\pi}{6}\nC: \\frac{\\pi}{4}\nD: \\frac{3\\pi}{4}\n"
    "CORRECT: C"
)
