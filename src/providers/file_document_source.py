# src/providers/file_document_source.py — v1
"""Document source reading plain files from the local filesystem.

Identities are filesystem paths (``file://`` URIs are accepted too). The
version of a file is its modification time in nanoseconds, so an edit on
disk produces a new cache key. Snapshots are kept per identity and read
again only when that modification time changes.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from defview.core.models import DocumentSnapshot, Position, Span
from defview.providers.base_document_source import (
    BaseDocumentSource,
    DocumentOpenError,
    find_word_range,
    split_lines,
)

logger = logging.getLogger(__name__)

_LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".py": "python",
    ".js": "javascript",
    ".ts": "typescript",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".rs": "rust",
    ".go": "go",
    ".java": "java",
    ".gd": "gdscript",
    ".md": "markdown",
}


def path_from_identity(identity: str) -> Path:
    """Resolve an identity (path or file URI) to a Path."""
    if identity.startswith("file://"):
        return Path(unquote(urlparse(identity).path))
    return Path(identity).expanduser()


def language_for_path(path: Path) -> str:
    return _LANGUAGE_BY_SUFFIX.get(path.suffix.lower(), "plaintext")


class FileDocumentSource(BaseDocumentSource):
    """Reads UTF-8 text files; undecodable bytes are replaced."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._snapshots: dict[str, DocumentSnapshot] = {}

    async def open_document(self, identity: str) -> DocumentSnapshot:
        return await asyncio.to_thread(self._read, identity)

    def get_word_range_at(self, identity: str, position: Position) -> Span | None:
        try:
            snapshot = self._read(identity)
        except DocumentOpenError as exc:
            logger.debug("No word range: %s", exc)
            return None
        if position.line >= snapshot.line_count:
            return None
        return find_word_range(snapshot.lines[position.line], position)

    def _read(self, identity: str) -> DocumentSnapshot:
        path = path_from_identity(identity)
        try:
            version = path.stat().st_mtime_ns
            cached = self._snapshots.get(identity)
            if cached is not None and cached.version == version:
                return cached
            # Bytes keep "\r\n" intact; split_lines handles both endings.
            text = path.read_bytes().decode(self._encoding, errors="replace")
        except OSError as exc:
            self._snapshots.pop(identity, None)
            raise DocumentOpenError(identity, exc.strerror or str(exc)) from exc

        snapshot = DocumentSnapshot(
            identity=identity,
            lines=split_lines(text),
            version=version,
            language_id=language_for_path(path),
        )
        self._snapshots[identity] = snapshot
        return snapshot
