"""Markdown rendering for question prompts and options.

Prompts keep their `$...$` LaTeX untouched; the student page typesets it with
MathJax after inserting the HTML.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

from daily_quiz.core.models import QuizQuestion


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single line (an option label) without a wrapping paragraph."""
        return self._markdown.renderInline(markdown_text.strip())

    def render_question(self, question: QuizQuestion) -> dict[str, object]:
        """Render a question into the payload shape used by the student page."""
        return {
            "id": question.id,
            "prompt_html": self.render_fragment(question.prompt),
            "options": [
                {"id": option.id, "html": self.render_inline(option.text)}
                for option in question.options
            ],
        }


# Shared instance; MarkdownIt renders are read-only.
renderer = MarkdownMathRenderer()
