# src/rendering/base_highlighter.py — v1
"""Abstract syntax highlighter with a "needs re-render" notification."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class BaseHighlighter(ABC):
    """Turns source text into display markup.

    Subclasses call ``_notify_needs_render()`` when previously produced
    markup became outdated (theme change, grammar loaded, ...).
    """

    def __init__(self) -> None:
        self._listeners: list[Callable[[], object]] = []

    @abstractmethod
    def highlight(self, source_text: str, language_id: str, first_line: int = 1) -> str:
        """Render ``source_text``; lines are numbered from ``first_line``."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Highlighter identifier."""

    def on_needs_render(self, callback: Callable[[], object]) -> Callable[[], None]:
        """Subscribe to re-render notifications. Returns an unsubscribe function."""
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    def _notify_needs_render(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as exc:
                logger.warning("needs-render listener failed: %s", exc)
