# tests/conftest.py — v1
"""Shared test fixtures for all unit tests.

Provides in-memory collaborators (lookup provider, picker surface,
navigator), a sample document set and test settings. No filesystem or host
editor is involved; all I/O is faked.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import pytest

from defview.config.settings import Settings
from defview.core.models import (
    CandidateDefinition,
    EditorFocus,
    JumpTarget,
    Position,
    Span,
)
from defview.disambiguation.base_picker import BasePickerSurface, PickerSession
from defview.providers.base_lookup_provider import BaseLookupProvider
from defview.providers.base_navigator import BaseNavigator
from defview.providers.memory_document_source import MemoryDocumentSource
from defview.providers.panel_display_surface import PanelDisplaySurface


# === FAKE COLLABORATORS ===


@dataclass
class _ScriptedResponse:
    candidates: list[CandidateDefinition] | None = None
    gate: asyncio.Event | None = None
    error: Exception | None = None


class FakeLookupProvider(BaseLookupProvider):
    """Returns scripted responses in call order, then ``default``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Position]] = []
        self.default: list[CandidateDefinition] = []
        self._script: list[_ScriptedResponse] = []

    def script(
        self,
        candidates: list[CandidateDefinition] | None = None,
        gate: asyncio.Event | None = None,
        error: Exception | None = None,
    ) -> None:
        self._script.append(_ScriptedResponse(candidates, gate, error))

    async def resolve_definitions(self, identity, position):
        self.calls.append((identity, position))
        response = self._script.pop(0) if self._script else _ScriptedResponse(self.default)
        if response.gate is not None:
            await response.gate.wait()
        if response.error is not None:
            raise response.error
        return list(response.candidates or [])


class RecordingPickerSurface(BasePickerSurface):
    """Records sessions; optionally picks or dismisses automatically."""

    def __init__(self) -> None:
        self.sessions: list[PickerSession] = []
        self.hidden: list[PickerSession] = []
        self.shown = asyncio.Event()
        self.auto_pick: int | None = None
        self.auto_dismiss = False

    async def show(self, session: PickerSession) -> None:
        self.sessions.append(session)
        self.shown.set()
        if self.auto_pick is not None:
            session.accept_index(self.auto_pick)
        elif self.auto_dismiss:
            session.dismiss()

    async def hide(self, session: PickerSession) -> None:
        self.hidden.append(session)


@dataclass
class RecordingNavigator(BaseNavigator):
    fail_with: Exception | None = None
    targets: list[JumpTarget] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    async def navigate(self, target: JumpTarget) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.targets.append(target)

    async def show_error(self, message: str) -> None:
        self.errors.append(message)


# === SAMPLE DATA ===


SAMPLE_SOURCE = """\
import helpers


def main():
    value = helpers.compute(3)
    return value
"""

SAMPLE_HELPERS = """\
# helpers module


def unrelated():
    pass


# Compute the thing.
# Twice, actually.
@cached
def compute(x):
    doubled = x * 2
    return doubled


def after():
    pass
"""


# === FIXTURES ===


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any .env file, plain highlighter."""
    return Settings(_env_file=None, highlighter="plain")


@pytest.fixture
def documents() -> MemoryDocumentSource:
    source = MemoryDocumentSource()
    source.set_text("main.py", SAMPLE_SOURCE, language_id="python")
    source.set_text("helpers.py", SAMPLE_HELPERS, language_id="python")
    return source


@pytest.fixture
def lookup() -> FakeLookupProvider:
    return FakeLookupProvider()


@pytest.fixture
def display() -> PanelDisplaySurface:
    return PanelDisplaySurface()


@pytest.fixture
def picker() -> RecordingPickerSurface:
    return RecordingPickerSurface()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def focus_on_compute() -> EditorFocus:
    """Cursor on ``compute`` in main.py line 4."""
    return EditorFocus(
        identity="main.py",
        version=0,
        position=Position(line=4, character=20),
        language_id="python",
    )


@pytest.fixture
def compute_definition() -> CandidateDefinition:
    """Raw range reported for ``compute`` (signature line only)."""
    return CandidateDefinition(target="helpers.py", span=Span(start_line=10, start_col=4, end_line=10, end_col=11))


@pytest.fixture
def helpers_lines() -> list[str]:
    return SAMPLE_HELPERS.splitlines()
