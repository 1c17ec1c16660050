# src/logging/context.py — v1
"""Contextual logging support: attach document, cycle and stage to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per resolve cycle.
_document: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document", default=None
)
_cycle: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "cycle", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    document: str | None = None
    cycle: int | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        document=_document.get(),
        cycle=_cycle.get(),
        stage=_stage.get(),
    )


def set_cycle_context(cycle: int, document: str | None) -> None:
    """Set cycle-level context (called once per resolve cycle).

    Each cycle runs in its own asyncio task, so values do not leak between
    concurrent cycles.
    """
    _cycle.set(cycle)
    _document.set(document)


def set_stage_context(stage: str | None) -> None:
    """Set the pipeline stage (lookup, disambiguate, render, publish)."""
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _document.set(None)
    _cycle.set(None)
    _stage.set(None)
