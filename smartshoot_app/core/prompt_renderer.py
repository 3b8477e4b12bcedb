"""Markdown rendering for question prompts served to the game board.

Prompts are stored as markdown so that teachers can use emphasis, lists and
simple tables (journal entries, trial balances) without writing HTML. Raw
HTML in prompts is disabled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt

from smartshoot_app.core.models import Question


@dataclass(slots=True)
class PromptRenderer:
    """Converts question prompts into HTML fragments."""

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

    def render_question(self, question: Question) -> str:
        """Render the prompt, followed by its illustration when one is set."""

        fragment = self.render_fragment(question.prompt)
        if question.image_url:
            fragment += f'<img class="question-image" src="{escape(question.image_url, quote=True)}" alt="" />'
        return fragment


# Shared instance; MarkdownIt is safe for concurrent read-only renders.
renderer = PromptRenderer()
