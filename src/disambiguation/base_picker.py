# src/disambiguation/base_picker.py — v1
"""Picker surface interface and the session tying it to one choice.

A ``PickerSession`` completes exactly once: the first ``accept`` or
``dismiss`` wins and every later call is ignored.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from defview.core.models import CandidateDefinition, PickerItem

logger = logging.getLogger(__name__)


class PickerSession:
    """One disambiguation interaction over a fixed set of items."""

    def __init__(self, items: list[PickerItem]) -> None:
        self.items = items
        self._future: asyncio.Future[CandidateDefinition | None] = (
            asyncio.get_running_loop().create_future()
        )

    @property
    def done(self) -> bool:
        return self._future.done()

    def accept(self, item: PickerItem) -> bool:
        """Resolve with ``item``'s candidate. False if already completed."""
        if self._future.done():
            logger.debug("Ignoring pick after completion: %s", item.label)
            return False
        if item not in self.items:
            raise ValueError(f"Item {item.label!r} is not part of this session")
        self._future.set_result(item.candidate)
        return True

    def accept_index(self, index: int) -> bool:
        return self.accept(self.items[index])

    def dismiss(self) -> bool:
        """Resolve with None. False if already completed."""
        if self._future.done():
            return False
        self._future.set_result(None)
        return True

    async def wait(self, timeout: float | None = None) -> CandidateDefinition | None:
        """Wait for completion; a timeout dismisses the session."""
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout)
        except asyncio.TimeoutError:
            logger.info("Picker timed out after %.1fs", timeout)
            self.dismiss()
            return self._future.result()


class BasePickerSurface(ABC):
    """Secondary selection UI (quick pick, popup menu, ...)."""

    @abstractmethod
    async def show(self, session: PickerSession) -> None:
        """Present ``session.items``; call ``session.accept``/``dismiss`` later."""

    @abstractmethod
    async def hide(self, session: PickerSession) -> None:
        """Remove the presentation once the session has completed."""
