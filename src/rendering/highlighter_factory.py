# src/rendering/highlighter_factory.py — v1
"""Factory for highlighter instantiation."""

from __future__ import annotations

from defview.config.settings import Settings
from defview.rendering.base_highlighter import BaseHighlighter


def create_highlighter(settings: Settings | None = None) -> BaseHighlighter:
    """Instantiate the configured highlighter.

    Args:
        settings: Application settings. Defaults to the HTML highlighter.

    Returns:
        Configured BaseHighlighter implementation.
    """
    kind = "html" if settings is None else settings.highlighter

    if kind == "html":
        from defview.rendering.html_highlighter import HtmlHighlighter
        theme = "default" if settings is None else settings.highlighter_theme
        return HtmlHighlighter(theme=theme)

    if kind == "plain":
        from defview.rendering.html_highlighter import PlainHighlighter
        return PlainHighlighter()

    raise ValueError(f"Unsupported highlighter: {kind!r}")
