# src/providers/memory_document_source.py — v1
"""In-memory document source, for embedding hosts and tests."""

from __future__ import annotations

from defview.core.models import DocumentSnapshot, Position, Span
from defview.providers.base_document_source import (
    BaseDocumentSource,
    DocumentOpenError,
    find_word_range,
    split_lines,
)


class MemoryDocumentSource(BaseDocumentSource):
    """Documents held in a dict keyed by identity.

    ``set_text`` bumps the version the same way an editor does on every edit.
    """

    def __init__(self) -> None:
        self._documents: dict[str, DocumentSnapshot] = {}

    def set_text(self, identity: str, text: str, language_id: str = "plaintext") -> DocumentSnapshot:
        previous = self._documents.get(identity)
        snapshot = DocumentSnapshot(
            identity=identity,
            lines=split_lines(text),
            version=0 if previous is None else previous.version + 1,
            language_id=language_id,
        )
        self._documents[identity] = snapshot
        return snapshot

    def remove(self, identity: str) -> None:
        self._documents.pop(identity, None)

    def get(self, identity: str) -> DocumentSnapshot | None:
        return self._documents.get(identity)

    async def open_document(self, identity: str) -> DocumentSnapshot:
        snapshot = self._documents.get(identity)
        if snapshot is None:
            raise DocumentOpenError(identity, "not found")
        return snapshot

    def get_word_range_at(self, identity: str, position: Position) -> Span | None:
        snapshot = self._documents.get(identity)
        if snapshot is None or position.line >= snapshot.line_count:
            return None
        return find_word_range(snapshot.lines[position.line], position)
