# src/core/loading.py — v1
"""LoadingToken: generation marker for one resolve cycle.

A token is created when a cycle starts and is either cancelled (a newer
cycle superseded it, the panel was pinned or disposed) or settled (the cycle
finished). Both transitions release ``wait_done()`` waiters, which lets the
loading indicator and the resolve branch be scheduled independently over the
same token.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from defview.core.cache_key import CacheKey

logger = logging.getLogger(__name__)


class LoadingToken:
    """Cancellation flag plus generation number for a resolve cycle."""

    def __init__(self, generation: int, cache_key: CacheKey) -> None:
        self.generation = generation
        self.cache_key = cache_key
        self._cancelled = False
        self._settled = False
        self._done = asyncio.Event()
        self._callbacks: list[Callable[[], object]] = []

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "settled" if self._settled else "live"
        return f"LoadingToken(generation={self.generation}, {state})"

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def settled(self) -> bool:
        return self._settled

    @property
    def done(self) -> bool:
        return self._cancelled or self._settled

    def cancel(self) -> None:
        """Request cancellation. Callbacks run once, in registration order."""
        if self._cancelled:
            return
        self._cancelled = True
        self._done.set()

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as exc:
                logger.warning(
                    "Cancel callback failed for generation %d: %s",
                    self.generation, exc,
                )

    def settle(self) -> None:
        """Mark the cycle as finished. Pending cancel callbacks are dropped."""
        self._settled = True
        self._callbacks.clear()
        self._done.set()

    def on_cancel(self, callback: Callable[[], object]) -> Callable[[], None]:
        """Register a cancel callback; runs immediately if already cancelled.

        Returns a function removing the callback again.
        """
        if self._cancelled:
            callback()
            return lambda: None

        self._callbacks.append(callback)

        def _remove() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _remove

    async def wait_done(self) -> None:
        """Suspend until the token is cancelled or settled."""
        await self._done.wait()
