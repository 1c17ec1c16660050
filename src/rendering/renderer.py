# src/rendering/renderer.py — v1
"""Render pipeline: extract the snippet of each definition and highlight it.

Snippets of several candidates are joined with a blank line and highlighted
as one block. Line numbers and the scroll target refer to the first
rendered snippet.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from defview.core.models import CandidateDefinition, JumpTarget, RenderedContent, Snippet
from defview.extraction.boundary_policy import DEFAULT_POLICY, BoundaryPolicy, policy_for_language
from defview.extraction.snippet_extractor import extract

if TYPE_CHECKING:
    from defview.providers.base_document_source import BaseDocumentSource
    from defview.rendering.base_highlighter import BaseHighlighter

logger = logging.getLogger(__name__)


class Renderer:
    """Turns candidate definitions into RenderedContent.

    Args:
        documents: Source of the candidates' target documents.
        highlighter: Markup producer.
        default_policy: Boundary policy for languages without a registered one.
    """

    def __init__(
        self,
        documents: BaseDocumentSource,
        highlighter: BaseHighlighter,
        default_policy: BoundaryPolicy = DEFAULT_POLICY,
    ) -> None:
        self._documents = documents
        self._highlighter = highlighter
        self._default_policy = default_policy

    @property
    def highlighter(self) -> BaseHighlighter:
        return self._highlighter

    def set_default_policy(self, policy: BoundaryPolicy) -> None:
        self._default_policy = policy

    async def render_definitions(
        self,
        language_id: str,
        definitions: Sequence[CandidateDefinition],
    ) -> RenderedContent:
        """Render definitions; empty markup when none could be extracted.

        Args:
            language_id: Language of the document the lookup started from,
                used for highlighting.
            definitions: Candidates to render, in display order.
        """
        results = await asyncio.gather(
            *(self._extract_definition(d) for d in definitions),
            return_exceptions=True,
        )

        rendered: list[tuple[CandidateDefinition, Snippet]] = []
        for definition, result in zip(definitions, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Dropping definition in %s: %s", definition.target, result,
                )
                continue
            if result.content.strip():
                rendered.append((definition, result))

        if not rendered:
            return RenderedContent(markup="")

        first_definition, first = rendered[0]
        code = "\n".join(snippet.content for _, snippet in rendered)
        markup = self._highlighter.highlight(
            code, language_id, first_line=first.start_line + 1,
        )

        jump_target = None
        if len(rendered) == 1:
            jump_target = JumpTarget(
                target=first_definition.target,
                line=first_definition.span.start_line,
            )

        return RenderedContent(
            markup=markup,
            start_line=first.start_line,
            end_line=first.end_line,
            jump_target=jump_target,
        )

    async def _extract_definition(self, definition: CandidateDefinition) -> Snippet:
        document = await self._documents.open_document(definition.target)
        policy = policy_for_language(document.language_id, default=self._default_policy)
        return extract(document.lines, definition.span, policy)
