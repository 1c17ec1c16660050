# src/providers/base_display_surface.py — v1
"""Abstract display surface receiving preview events."""

from __future__ import annotations

from abc import ABC, abstractmethod

from defview.core.models import DisplayEvent


class BaseDisplaySurface(ABC):
    """Side panel (webview or equivalent) rendering published content."""

    @abstractmethod
    async def post_message(self, event: DisplayEvent) -> None:
        """Deliver one event to the surface."""

    def set_description(self, description: str | None) -> None:
        """Update the panel title description (e.g. "(pinned)")."""
