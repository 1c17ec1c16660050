# tests/unit/rendering/test_unit_renderer.py — v1
"""Tests for rendering/ — Renderer, highlighters and factory."""

from __future__ import annotations

import pytest

from defview.config.settings import Settings
from defview.core.models import CandidateDefinition, JumpTarget, Span
from defview.extraction.boundary_policy import BoundaryPolicy, register_policy, unregister_policy
from defview.rendering.highlighter_factory import create_highlighter
from defview.rendering.html_highlighter import HtmlHighlighter, PlainHighlighter
from defview.rendering.renderer import Renderer


@pytest.fixture
def renderer(documents) -> Renderer:
    return Renderer(documents, PlainHighlighter())


class TestRenderer:
    @pytest.mark.asyncio
    async def test_single_definition(self, renderer, compute_definition):
        content = await renderer.render_definitions("python", [compute_definition])
        assert content.markup.startswith("# Compute the thing.\n")
        assert (content.start_line, content.end_line) == (7, 12)
        assert content.jump_target == JumpTarget(target="helpers.py", line=10)

    @pytest.mark.asyncio
    async def test_several_definitions_have_no_jump_target(self, renderer, compute_definition):
        other = CandidateDefinition(target="helpers.py", span=Span.lines(3))
        content = await renderer.render_definitions("python", [compute_definition, other])
        assert "def compute(x):" in content.markup
        assert "def unrelated():" in content.markup
        assert content.start_line == 7
        assert content.jump_target is None

    @pytest.mark.asyncio
    async def test_failed_document_dropped(self, renderer, compute_definition):
        missing = CandidateDefinition(target="missing.py", span=Span.lines(1))
        content = await renderer.render_definitions("python", [missing, compute_definition])
        assert content.start_line == 7
        assert content.jump_target == JumpTarget(target="helpers.py", line=10)

    @pytest.mark.asyncio
    async def test_nothing_rendered(self, renderer):
        missing = CandidateDefinition(target="missing.py", span=Span.lines(1))
        content = await renderer.render_definitions("python", [missing])
        assert content.is_empty
        assert content.jump_target is None

    @pytest.mark.asyncio
    async def test_whitespace_only_snippet_is_empty(self, documents, renderer):
        documents.set_text("blank.py", "\n\n\n")
        content = await renderer.render_definitions("python", [
            CandidateDefinition(target="blank.py", span=Span.lines(1)),
        ])
        assert content.is_empty

    @pytest.mark.asyncio
    async def test_language_policy_is_used(self, documents, renderer, compute_definition):
        register_policy("python", BoundaryPolicy(leading_prefixes=frozenset({"@"})))
        try:
            content = await renderer.render_definitions("python", [compute_definition])
        finally:
            unregister_policy("python")
        assert content.start_line == 9

    @pytest.mark.asyncio
    async def test_default_policy_replaced(self, renderer, compute_definition):
        renderer.set_default_policy(BoundaryPolicy(leading_prefixes=frozenset({"@"})))
        content = await renderer.render_definitions("python", [compute_definition])
        assert content.start_line == 9

    @pytest.mark.asyncio
    async def test_html_line_numbers(self, documents, compute_definition):
        renderer = Renderer(documents, HtmlHighlighter(theme="dark"))
        content = await renderer.render_definitions("python", [compute_definition])
        assert content.markup.startswith('<pre class="code theme-dark language-python">')
        assert '<div class="line" data-line="8">' in content.markup
        assert 'data-line="13"' in content.markup
        assert 'data-line="14"' not in content.markup


class TestHtmlHighlighter:
    def test_escapes(self):
        markup = HtmlHighlighter().highlight("if a < b && c:\n", "python")
        assert "a &lt; b &amp;&amp; c:" in markup
        assert markup.count('class="line"') == 1

    def test_first_line(self):
        markup = HtmlHighlighter().highlight("a\nb", "c", first_line=41)
        assert 'data-line="41"' in markup
        assert 'data-line="42"' in markup

    def test_set_theme_notifies(self):
        highlighter = HtmlHighlighter()
        calls = []
        unsubscribe = highlighter.on_needs_render(lambda: calls.append(highlighter.theme))
        highlighter.set_theme("default")
        highlighter.set_theme("dark")
        unsubscribe()
        highlighter.set_theme("light")
        assert calls == ["dark"]

    def test_failing_listener_does_not_block_others(self):
        highlighter = HtmlHighlighter()
        calls = []

        def boom():
            raise RuntimeError("boom")

        highlighter.on_needs_render(boom)
        highlighter.on_needs_render(lambda: calls.append(1))
        highlighter.set_theme("dark")
        assert calls == [1]

    def test_plain_is_identity(self):
        assert PlainHighlighter().highlight("a < b\n", "python") == "a < b\n"


class TestHighlighterFactory:
    def test_default_is_html(self):
        highlighter = create_highlighter()
        assert highlighter.name == "html"

    def test_html_theme_from_settings(self):
        highlighter = create_highlighter(Settings(_env_file=None, highlighter_theme="solarized"))
        assert highlighter.theme == "solarized"

    def test_plain(self, settings):
        assert create_highlighter(settings).name == "plain"

    def test_unknown(self, settings):
        bogus = settings.model_copy(update={"highlighter": "pygments"})
        with pytest.raises(ValueError, match="Unsupported highlighter"):
            create_highlighter(bogus)
