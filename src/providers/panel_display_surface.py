# src/providers/panel_display_surface.py — v1
"""In-memory panel applying display events the way the webview does.

An ``update`` replaces the body and highlights ``scrollToLine``. A
``noContent`` replaces the body only in live mode or before anything was
shown, so sticky mode keeps the previous definition on screen.
"""

from __future__ import annotations

import html
import logging
from typing import Any

from defview.core.models import (
    DisplayEvent,
    EndLoadingEvent,
    NoContentEvent,
    StartLoadingEvent,
    UpdateEvent,
)
from defview.providers.base_display_surface import BaseDisplaySurface

logger = logging.getLogger(__name__)


class PanelDisplaySurface(BaseDisplaySurface):
    """Keeps the rendered panel state and a log of received messages."""

    def __init__(self) -> None:
        self.body: str = ""
        self.highlighted_line: int | None = None
        self.loading = False
        self.description: str | None = None
        self.messages: list[dict[str, Any]] = []
        self._has_updated = False

    @property
    def has_updated(self) -> bool:
        return self._has_updated

    async def post_message(self, event: DisplayEvent) -> None:
        self.messages.append(event.to_message())

        if isinstance(event, UpdateEvent):
            self.body = event.body
            self.highlighted_line = event.scroll_to_line or None
            self._has_updated = True
        elif isinstance(event, NoContentEvent):
            if not self._has_updated or event.update_mode == "live":
                self.body = f'<p class="no-content">{html.escape(event.body)}</p>'
                self.highlighted_line = None
            self._has_updated = True
        elif isinstance(event, StartLoadingEvent):
            self.loading = True
        elif isinstance(event, EndLoadingEvent):
            self.loading = False
        else:
            logger.warning("Ignoring unknown display event: %r", event)

    def set_description(self, description: str | None) -> None:
        self.description = description
