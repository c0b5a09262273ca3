"""Markdown rendering for question content.

Question content is authored as markdown with inline ``$...$`` math. Views
carry both the source text and an HTML fragment; math is left untouched for a
client-side engine such as MathJax to typeset.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

_EMPTY_CONTENT_HTML = "<p><em>No content provided.</em></p>"


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
            return _EMPTY_CONTENT_HTML
        return self._markdown.render(sanitized)


renderer = MarkdownMathRenderer()
