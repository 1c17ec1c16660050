# src/controller/state.py — v1
"""Mutable preview session state, owned by the UpdateController.

Only the controller's entry points mutate this struct; everything runs on
one event loop, so no locking is involved.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from defview.core.cache_key import CACHE_KEY_NONE, CacheKey

if TYPE_CHECKING:
    from defview.core.loading import LoadingToken
    from defview.core.models import JumpTarget, RenderedContent


class ControllerPhase(str, Enum):
    """Outcome of a trigger / current controller phase."""

    IDLE = "idle"
    KEY_UNCHANGED = "key_unchanged"
    LOADING = "loading"
    PUBLISHED = "published"


@dataclass
class PreviewState:
    """Everything the controller remembers between triggers."""

    cache_key: CacheKey = CACHE_KEY_NONE
    live_token: LoadingToken | None = None
    generation: int = 0
    last_content: RenderedContent | None = None
    jump_target: JumpTarget | None = None
    has_published: bool = False
    indicator_visible: bool = False
    pinned: bool = False
    visible: bool = True
    phase: ControllerPhase = ControllerPhase.IDLE
