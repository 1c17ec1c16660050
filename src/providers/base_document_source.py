# src/providers/base_document_source.py — v1
"""Abstract document source: opens documents and finds words under a cursor."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from defview.core.models import DocumentSnapshot, Position, Span

WORD_PATTERN = re.compile(r"[\w$]+")
LINE_BREAK = re.compile(r"\r?\n")


class DocumentOpenError(Exception):
    """Raised when a document cannot be opened."""

    def __init__(self, identity: str, reason: str) -> None:
        self.identity = identity
        self.reason = reason
        super().__init__(f"Cannot open '{identity}': {reason}")


class BaseDocumentSource(ABC):
    """Unified interface for document providers."""

    @abstractmethod
    async def open_document(self, identity: str) -> DocumentSnapshot:
        """Return the current snapshot of a document.

        Raises:
            DocumentOpenError: If the document does not exist or is unreadable.
        """

    @abstractmethod
    def get_word_range_at(self, identity: str, position: Position) -> Span | None:
        """Span of the word at ``position``, None on whitespace or no word."""


def find_word_range(
    line_text: str,
    position: Position,
    pattern: re.Pattern[str] = WORD_PATTERN,
) -> Span | None:
    """Locate the word touching ``position.character`` on a single line.

    A cursor placed just after the last character of a word still counts as
    being on that word.
    """
    for match in pattern.finditer(line_text):
        if match.start() <= position.character <= match.end():
            return Span(
                start_line=position.line,
                start_col=match.start(),
                end_line=position.line,
                end_col=match.end(),
            )
        if match.start() > position.character:
            break
    return None


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` and ``\\r\\n`` only; a final line break adds no line.

    Other Unicode separators (form feed, ``\\u2028`` ...) stay inside their
    line so indices match the lookup provider's line numbers.
    """
    lines = LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines
