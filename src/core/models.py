# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
Lines and columns are 0-based everywhere except the display wire format
(``scrollToLine``), which is 1-based.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

UpdateMode = Literal["live", "sticky"]


# === POSITIONS ===


class Position(BaseModel):
    """Cursor position inside a document."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    character: int = Field(default=0, ge=0)


class Span(BaseModel):
    """Source range; start and end lines are inclusive."""

    model_config = ConfigDict(frozen=True)

    start_line: int = Field(ge=0)
    start_col: int = Field(default=0, ge=0)
    end_line: int = Field(ge=0)
    end_col: int = Field(default=0, ge=0)

    @classmethod
    def lines(cls, start_line: int, end_line: int | None = None) -> Span:
        """Span covering whole lines (columns zero)."""
        return cls(
            start_line=start_line,
            end_line=start_line if end_line is None else end_line,
        )


# === DOCUMENTS ===


class DocumentSnapshot(BaseModel):
    """Text of a document at a given version."""

    identity: str
    lines: list[str]
    version: int = 0
    language_id: str = "plaintext"

    @property
    def line_count(self) -> int:
        return len(self.lines)


class EditorFocus(BaseModel):
    """Active editor state delivered with every trigger."""

    model_config = ConfigDict(frozen=True)

    identity: str
    version: int
    position: Position
    language_id: str = "plaintext"


# === DEFINITIONS ===


class CandidateDefinition(BaseModel):
    """One possible definition location returned by the lookup provider."""

    model_config = ConfigDict(frozen=True)

    target: str
    span: Span


class Snippet(BaseModel):
    """Widened source excerpt produced by the boundary extractor."""

    content: str
    start_line: int
    end_line: int


class JumpTarget(BaseModel):
    """Navigation target for double-click to jump."""

    model_config = ConfigDict(frozen=True)

    target: str
    line: int


class RenderedContent(BaseModel):
    """Highlighted markup ready to be published to the display surface."""

    markup: str
    start_line: int = 0
    end_line: int = 0
    jump_target: JumpTarget | None = None

    @property
    def is_empty(self) -> bool:
        return not self.markup


class PickerItem(BaseModel):
    """Entry presented while disambiguating between several candidates."""

    label: str
    description: str
    preview_snippet: str
    candidate: CandidateDefinition


# === DISPLAY EVENTS ===


class _DisplayEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_message(self) -> dict[str, Any]:
        """Serialize to the wire dict understood by the display surface."""
        return self.model_dump(by_alias=True, exclude_none=True)


class UpdateEvent(_DisplayEvent):
    type: Literal["update"] = "update"
    body: str
    scroll_to_line: int = Field(alias="scrollToLine")
    update_mode: UpdateMode = Field(default="live", alias="updateMode")


class NoContentEvent(_DisplayEvent):
    type: Literal["noContent"] = "noContent"
    body: str
    update_mode: UpdateMode = Field(default="live", alias="updateMode")


class StartLoadingEvent(_DisplayEvent):
    type: Literal["startLoading"] = "startLoading"


class EndLoadingEvent(_DisplayEvent):
    type: Literal["endLoading"] = "endLoading"


DisplayEvent = UpdateEvent | NoContentEvent | StartLoadingEvent | EndLoadingEvent
