# src/core/cache_key.py — v1
"""Identity of the current preview target, used to skip redundant lookups.

A key is either the ``CACHE_KEY_NONE`` sentinel (no focused document) or a
``DocumentCacheKey`` built from document identity, version and the span of
the word under the cursor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Union

from defview.core.models import Span

if TYPE_CHECKING:
    from defview.core.models import EditorFocus
    from defview.providers.base_document_source import BaseDocumentSource


class NoneCacheKey:
    """Key used when no document is focused.

    Only the identical instance compares equal, so a fresh ``NoneCacheKey()``
    can serve as a "never compared" sentinel.
    """

    type: Literal["none"] = "none"

    def __repr__(self) -> str:
        return "NoneCacheKey()"


CACHE_KEY_NONE = NoneCacheKey()


@dataclass(frozen=True, eq=False)
class DocumentCacheKey:
    """Key for a focused document."""

    identity: str
    version: int
    word_span: Span | None = None
    type: Literal["document"] = "document"

    def equals(self, other: DocumentCacheKey) -> bool:
        if self.identity != other.identity:
            return False
        if self.version != other.version:
            return False
        if self.word_span is other.word_span:
            return True
        if self.word_span is None or other.word_span is None:
            return False
        return self.word_span == other.word_span


CacheKey = Union[NoneCacheKey, DocumentCacheKey]


def cache_key_equals(a: CacheKey, b: CacheKey) -> bool:
    """Compare two cache keys. Pure, reflexive and symmetric."""
    if a is b:
        return True
    if a.type != b.type:
        return False
    if isinstance(a, NoneCacheKey) or isinstance(b, NoneCacheKey):
        return False
    return a.equals(b)


def create_cache_key(
    focus: EditorFocus | None,
    documents: BaseDocumentSource,
) -> CacheKey:
    """Build the key for the current editor focus."""
    if focus is None:
        return CACHE_KEY_NONE

    return DocumentCacheKey(
        identity=focus.identity,
        version=focus.version,
        word_span=documents.get_word_range_at(focus.identity, focus.position),
    )
