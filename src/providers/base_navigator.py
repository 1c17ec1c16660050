# src/providers/base_navigator.py — v1
"""Abstract host navigation: open a document at a line, report errors."""

from __future__ import annotations

from abc import ABC, abstractmethod

from defview.core.models import JumpTarget


class BaseNavigator(ABC):
    """Host-side actions triggered from the preview panel."""

    @abstractmethod
    async def navigate(self, target: JumpTarget) -> None:
        """Open ``target.target`` and reveal ``target.line``."""

    @abstractmethod
    async def show_error(self, message: str) -> None:
        """Show a non-fatal error message to the user."""
