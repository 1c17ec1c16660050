# src/rendering/html_highlighter.py — v1
"""Line-oriented HTML renderer for the preview panel.

Each line becomes ``<div class="line" data-line="N">`` so the panel can
scroll to and highlight ``scrollToLine``. No tokenization happens here.
"""

from __future__ import annotations

import html

from defview.rendering.base_highlighter import BaseHighlighter


class HtmlHighlighter(BaseHighlighter):
    """Escapes source text and wraps it in numbered line elements."""

    def __init__(self, theme: str = "default") -> None:
        super().__init__()
        self._theme = theme

    @property
    def name(self) -> str:
        return "html"

    @property
    def theme(self) -> str:
        return self._theme

    def set_theme(self, theme: str) -> None:
        """Switch theme; subscribers are asked to re-render."""
        if theme == self._theme:
            return
        self._theme = theme
        self._notify_needs_render()

    def highlight(self, source_text: str, language_id: str, first_line: int = 1) -> str:
        lines = source_text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        rows = []
        for offset, line in enumerate(lines):
            number = first_line + offset
            rows.append(
                f'<div class="line" data-line="{number}">'
                f'<span class="line-number">{number}</span>'
                f"<code>{html.escape(line)}</code></div>"
            )

        return (
            f'<pre class="code theme-{html.escape(self._theme)} '
            f'language-{html.escape(language_id)}">'
            + "".join(rows)
            + "</pre>"
        )


class PlainHighlighter(BaseHighlighter):
    """Returns the text unchanged, for terminals and tests."""

    @property
    def name(self) -> str:
        return "plain"

    def highlight(self, source_text: str, language_id: str, first_line: int = 1) -> str:
        return source_text
