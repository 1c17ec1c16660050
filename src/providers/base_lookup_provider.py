# src/providers/base_lookup_provider.py — v1
"""Abstract definition lookup provider (language intelligence)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from defview.core.models import CandidateDefinition, Position


class DefinitionLookupError(Exception):
    """Wraps any failure raised by a lookup provider."""

    def __init__(self, identity: str, cause: Exception) -> None:
        self.identity = identity
        self.cause = cause
        super().__init__(f"Definition lookup failed for '{identity}': {cause}")


class BaseLookupProvider(ABC):
    """Resolves the definitions of the symbol at a position."""

    @abstractmethod
    async def resolve_definitions(
        self, identity: str, position: Position
    ) -> list[CandidateDefinition]:
        """Return candidate definitions; an empty list when nothing is found."""
