# src/disambiguation/disambiguator.py — v1
"""Choose one definition when a position resolves to several candidates.

Each candidate's target document is opened to build a preview window of
``context_lines`` lines around its range, with the range itself wrapped in
match markers. Candidates whose document cannot be opened are dropped. The
user then picks one item or dismisses the picker; cancelling the cycle's
LoadingToken dismisses it too.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from defview.core.models import CandidateDefinition, DocumentSnapshot, PickerItem
from defview.disambiguation.base_picker import BasePickerSurface, PickerSession

if TYPE_CHECKING:
    from defview.core.loading import LoadingToken
    from defview.core.models import EditorFocus
    from defview.providers.base_document_source import BaseDocumentSource

logger = logging.getLogger(__name__)

MATCH_OPEN = "[["
MATCH_CLOSE = "]]"
DEFAULT_CONTEXT_LINES = 3


class Disambiguator:
    """Resolves a list of candidates to a single one (or none).

    Args:
        documents: Source used to open candidate documents for previews.
        surface: Picker UI presenting the items.
        context_lines: Lines of context shown before and after each range.
        timeout_s: Dismiss the picker after this many seconds (0 = never).
    """

    def __init__(
        self,
        documents: BaseDocumentSource,
        surface: BasePickerSurface,
        context_lines: int = DEFAULT_CONTEXT_LINES,
        timeout_s: float = 0.0,
    ) -> None:
        self._documents = documents
        self._surface = surface
        self.context_lines = context_lines
        self.timeout_s = timeout_s

    async def choose(
        self,
        candidates: Sequence[CandidateDefinition],
        source: EditorFocus | None = None,
        token: LoadingToken | None = None,
    ) -> CandidateDefinition | None:
        """Return the candidate picked by the user, or None."""
        if len(candidates) <= 1:
            return candidates[0] if candidates else None

        items = await self.build_items(candidates)
        if not items:
            logger.info("No candidate document could be opened")
            return None
        if token is not None and token.cancelled:
            return None

        logger.debug(
            "Presenting %d of %d candidates for %s",
            len(items), len(candidates), source.identity if source else "<none>",
        )
        session = PickerSession(items)
        remove_callback = token.on_cancel(session.dismiss) if token is not None else None
        try:
            await self._surface.show(session)
            return await session.wait(self.timeout_s or None)
        finally:
            session.dismiss()
            if remove_callback is not None:
                remove_callback()
            await self._surface.hide(session)

    async def build_items(
        self, candidates: Sequence[CandidateDefinition]
    ) -> list[PickerItem]:
        """Open every candidate's document and build its picker item."""
        results = await asyncio.gather(
            *(self._documents.open_document(c.target) for c in candidates),
            return_exceptions=True,
        )

        items: list[PickerItem] = []
        for candidate, result in zip(candidates, results):
            if isinstance(result, BaseException):
                logger.warning("Dropping candidate %s: %s", candidate.target, result)
                continue
            items.append(self._make_item(candidate, result))
        return items

    def _make_item(self, candidate: CandidateDefinition, document: DocumentSnapshot) -> PickerItem:
        span = candidate.span
        return PickerItem(
            label=f"{PurePosixPath(candidate.target).name}:{span.start_line + 1}",
            description=candidate.target,
            preview_snippet=preview_window(document.lines, candidate, self.context_lines),
            candidate=candidate,
        )


def preview_window(
    lines: Sequence[str],
    candidate: CandidateDefinition,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> str:
    """Candidate range plus surrounding context, with the range marked."""
    if not lines:
        return ""

    last_index = len(lines) - 1
    span = candidate.span
    start_line = min(span.start_line, last_index)
    end_line = min(max(span.end_line, start_line), last_index)

    window_start = max(0, start_line - context_lines)
    window_end = min(last_index, end_line + context_lines)

    window = list(lines[window_start : window_end + 1])

    # Close first so the opening offset on the same line stays valid.
    end_row = end_line - window_start
    end_col = min(span.end_col, len(window[end_row]))
    if end_line == span.end_line:
        window[end_row] = window[end_row][:end_col] + MATCH_CLOSE + window[end_row][end_col:]
    else:
        window[end_row] = window[end_row] + MATCH_CLOSE

    start_row = start_line - window_start
    start_col = min(span.start_col, len(window[start_row])) if start_line == span.start_line else 0
    window[start_row] = window[start_row][:start_col] + MATCH_OPEN + window[start_row][start_col:]

    return "\n".join(window)
