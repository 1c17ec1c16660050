# src/controller/update_controller.py — v1
"""Update controller: one resolve-and-render cycle per relevant trigger.

Flow for each trigger:
  1. Skip when the panel is hidden or pinned.
  2. Skip when the CacheKey (document, version, word under cursor) equals
     the key of the cycle already in flight, or the stored key. In the
     latter case a cycle still in flight for another key is cancelled.
  3. Cancel the live LoadingToken and start a new cycle with a fresh token.
  4. Run two tasks over the token:
       - resolve: lookup -> disambiguate (if several) -> extract/highlight
         -> publish ``update`` or ``noContent``
       - indicator: post ``startLoading`` once the delay elapses while the
         token is still live; a fast cycle never shows it.

A cycle publishes only if ``state.live_token is token`` when it finishes,
so a superseded cycle can never reach the display, whatever order cycles
complete in. Every cycle ends with the controller Published or Idle.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from defview.config.settings import Settings
from defview.controller.state import ControllerPhase, PreviewState
from defview.core.cache_key import cache_key_equals, create_cache_key
from defview.core.loading import LoadingToken
from defview.core.models import (
    EndLoadingEvent,
    NoContentEvent,
    StartLoadingEvent,
    UpdateEvent,
)
from defview.logging.context import set_cycle_context, set_stage_context
from defview.providers.base_lookup_provider import DefinitionLookupError

if TYPE_CHECKING:
    from defview.core.models import EditorFocus, RenderedContent
    from defview.disambiguation.disambiguator import Disambiguator
    from defview.providers.base_display_surface import BaseDisplaySurface
    from defview.providers.base_document_source import BaseDocumentSource
    from defview.providers.base_lookup_provider import BaseLookupProvider
    from defview.providers.base_navigator import BaseNavigator
    from defview.rendering.renderer import Renderer

logger = logging.getLogger(__name__)

PINNED_DESCRIPTION = "(pinned)"
JUMP_MESSAGE_TYPES = frozenset({"jumpRequested", "lineDoubleClick", "areaDoubleClick"})


class UpdateController:
    """Owns the preview session and drives resolve cycles.

    Args:
        lookup: Language-intelligence provider.
        documents: Document source (word ranges, snapshot access).
        display: Surface receiving published events.
        renderer: Extraction + highlighting pipeline.
        disambiguator: Picker used when a lookup yields several candidates.
            None renders every candidate.
        navigator: Host navigation for jump requests.
        settings: Application settings. Loaded from .env if None.
        visible: Whether the display surface starts out visible.
    """

    def __init__(
        self,
        lookup: BaseLookupProvider,
        documents: BaseDocumentSource,
        display: BaseDisplaySurface,
        renderer: Renderer,
        disambiguator: Disambiguator | None = None,
        navigator: BaseNavigator | None = None,
        settings: Settings | None = None,
        visible: bool = True,
    ) -> None:
        self._lookup = lookup
        self._documents = documents
        self._display = display
        self._renderer = renderer
        self._disambiguator = disambiguator
        self._navigator = navigator
        self._settings = settings or Settings()
        self._state = PreviewState(visible=visible)
        self._focus: EditorFocus | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._unsubscribe = renderer.highlighter.on_needs_render(self._on_needs_render)

    # --- Read-only views ---

    @property
    def state(self) -> PreviewState:
        return self._state

    @property
    def phase(self) -> ControllerPhase:
        return self._state.phase

    @property
    def focus(self) -> EditorFocus | None:
        return self._focus

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def title_description(self) -> str | None:
        return PINNED_DESCRIPTION if self._state.pinned else None

    # --- Host triggers (sync, schedule work on the running loop) ---

    def on_focus_changed(self, focus: EditorFocus | None) -> asyncio.Task[ControllerPhase]:
        """Active editor, selection or document content changed."""
        self._focus = focus
        return self.schedule_update()

    def on_diagnostics_changed(self) -> asyncio.Task[ControllerPhase]:
        return self.schedule_update()

    def schedule_update(self, force: bool = False) -> asyncio.Task[ControllerPhase]:
        task = asyncio.get_running_loop().create_task(self.update(force=force))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _on_needs_render(self) -> None:
        try:
            self.schedule_update(force=True)
        except RuntimeError:
            logger.debug("needs-render outside an event loop, ignored")

    # --- Main entry point ---

    async def update(self, force: bool = False) -> ControllerPhase:
        """Handle one trigger.

        Args:
            force: Run a cycle even if the CacheKey is unchanged.

        Returns:
            IDLE (hidden, pinned or superseded), KEY_UNCHANGED, or PUBLISHED.
        """
        self._refresh_description()

        if not self._state.visible or self._state.pinned:
            return ControllerPhase.IDLE

        new_key = create_cache_key(self._focus, self._documents)
        if not force:
            live = self._state.live_token
            if live is not None and cache_key_equals(live.cache_key, new_key):
                return ControllerPhase.KEY_UNCHANGED
            if cache_key_equals(self._state.cache_key, new_key):
                if live is not None:
                    # Back on the displayed key: the in-flight cycle is for
                    # a word no longer under the cursor.
                    await self._abandon_live_cycle()
                return ControllerPhase.KEY_UNCHANGED

        self._cancel_live_token()
        self._state.generation += 1
        token = LoadingToken(self._state.generation, new_key)
        self._state.live_token = token
        self._state.phase = ControllerPhase.LOADING
        logger.debug("Cycle %d started (force=%s)", token.generation, force)

        focus = self._focus
        published, _ = await asyncio.gather(
            self._run_cycle(token, focus),
            self._run_indicator(token),
        )
        return ControllerPhase.PUBLISHED if published else ControllerPhase.IDLE

    # --- Resolve branch ---

    async def _run_cycle(self, token: LoadingToken, focus: EditorFocus | None) -> bool:
        set_cycle_context(token.generation, focus.identity if focus else None)

        content: RenderedContent | None = None
        completed = False
        try:
            content = await self._resolve(token, focus)
            completed = True
        except DefinitionLookupError as exc:
            logger.warning("%s", exc)
        except Exception:
            logger.exception("Cycle %d failed", token.generation)
        finally:
            is_live = self._is_live(token)
            token.settle()

        if not is_live:
            logger.debug("Discarding result of superseded cycle %d", token.generation)
            return False

        self._state.live_token = None
        if completed:
            self._state.cache_key = token.cache_key

        set_stage_context("publish")
        await self._publish(content)
        await self._end_indicator()
        return True

    async def _resolve(
        self, token: LoadingToken, focus: EditorFocus | None
    ) -> RenderedContent | None:
        """Content for ``focus``, or None for "no content"."""
        if focus is None:
            return None

        set_stage_context("lookup")
        try:
            candidates = await self._lookup.resolve_definitions(
                focus.identity, focus.position
            )
        except Exception as exc:
            raise DefinitionLookupError(focus.identity, exc) from exc

        if token.cancelled or not candidates:
            return None
        logger.debug("Lookup returned %d candidate(s)", len(candidates))

        if (
            len(candidates) > 1
            and self._settings.disambiguate
            and self._disambiguator is not None
        ):
            set_stage_context("disambiguate")
            chosen = await self._disambiguator.choose(candidates, focus, token=token)
            if chosen is None or token.cancelled:
                return None
            candidates = [chosen]

        set_stage_context("render")
        rendered = await self._renderer.render_definitions(focus.language_id, candidates)
        if token.cancelled or rendered.is_empty:
            return None
        return rendered

    async def _publish(self, content: RenderedContent | None) -> None:
        mode = self._settings.update_mode

        if content is None:
            if mode == "sticky" and self._state.has_published:
                logger.debug("Sticky mode: keeping previous content")
            else:
                self._state.last_content = None
                self._state.jump_target = None
                await self._display.post_message(
                    NoContentEvent(body=self._settings.no_content_message, update_mode=mode)
                )
        else:
            self._state.last_content = content
            self._state.jump_target = content.jump_target
            await self._display.post_message(self._update_event(content))
            logger.info(
                "Published lines %d-%d", content.start_line, content.end_line,
            )

        self._state.has_published = True
        self._state.phase = ControllerPhase.PUBLISHED

    def _update_event(self, content: RenderedContent) -> UpdateEvent:
        return UpdateEvent(
            body=content.markup,
            scroll_to_line=content.start_line + 1,
            update_mode=self._settings.update_mode,
        )

    # --- Indicator branch ---

    async def _run_indicator(self, token: LoadingToken) -> None:
        try:
            await asyncio.wait_for(
                token.wait_done(), timeout=self._settings.loading_indicator_delay_s
            )
            return
        except asyncio.TimeoutError:
            pass

        # A superseding cycle inherits an indicator that is already shown.
        if not self._is_live(token) or self._state.indicator_visible:
            return
        self._state.indicator_visible = True
        await self._display.post_message(StartLoadingEvent())

    async def _end_indicator(self) -> None:
        if self._state.indicator_visible:
            self._state.indicator_visible = False
            await self._display.post_message(EndLoadingEvent())

    # --- Tokens ---

    def _is_live(self, token: LoadingToken) -> bool:
        return self._state.live_token is token and not token.cancelled

    def _cancel_live_token(self) -> None:
        token = self._state.live_token
        if token is None:
            return
        logger.debug("Cancelling cycle %d", token.generation)
        token.cancel()
        self._state.live_token = None

    async def _abandon_live_cycle(self) -> None:
        """Cancel the in-flight cycle; the displayed content stays."""
        if self._state.live_token is not None:
            self._cancel_live_token()
            self._state.phase = (
                ControllerPhase.PUBLISHED if self._state.has_published else ControllerPhase.IDLE
            )
        await self._end_indicator()

    # --- Visibility / pinning ---

    async def set_visible(self, visible: bool) -> None:
        """Display surface was shown or hidden."""
        was_visible = self._state.visible
        self._state.visible = visible
        if not visible or was_visible:
            return

        self._refresh_description()
        if self._state.last_content is not None:
            await self._display.post_message(self._update_event(self._state.last_content))
        elif self._state.has_published:
            await self._display.post_message(
                NoContentEvent(
                    body=self._settings.no_content_message,
                    update_mode=self._settings.update_mode,
                )
            )
        else:
            await self.update(force=True)
            return

        await self.update()

    async def pin(self) -> None:
        await self._set_pinned(True)

    async def unpin(self) -> None:
        await self._set_pinned(False)

    async def _set_pinned(self, value: bool) -> None:
        if self._state.pinned == value:
            return
        self._state.pinned = value
        logger.info("Preview %s", "pinned" if value else "unpinned")

        if value:
            await self._abandon_live_cycle()
            self._state.phase = ControllerPhase.IDLE
            self._refresh_description()
        else:
            await self.update()

    def _refresh_description(self) -> None:
        self._display.set_description(self.title_description)

    # --- Display messages ---

    async def handle_message(self, message: Mapping[str, Any]) -> None:
        """Consume an interaction event raised by the display surface."""
        kind = message.get("type")
        if kind in JUMP_MESSAGE_TYPES:
            await self.jump_to_definition()
        elif kind == "log":
            logger.debug("Display: %s", message.get("message"))
        else:
            logger.warning("Unknown display message type: %r", kind)

    async def jump_to_definition(self) -> bool:
        """Navigate to the jump target of the displayed definition."""
        if self._navigator is None:
            logger.warning("Jump requested but no navigator is configured")
            return False

        target = self._state.jump_target
        if target is None:
            await self._navigator.show_error(
                "Failed to open file: No definition URI available"
            )
            return False

        try:
            await self._navigator.navigate(target)
        except Exception as exc:
            logger.warning("Navigation to %s:%d failed: %s", target.target, target.line, exc)
            await self._navigator.show_error(f"Failed to open file: {exc}")
            return False
        return True

    # --- Configuration / lifecycle ---

    def update_configuration(self, settings: Settings) -> None:
        """Apply new settings; takes effect from the next cycle."""
        self._settings = settings
        self._renderer.set_default_policy(settings.boundary_policy())
        if self._disambiguator is not None:
            self._disambiguator.context_lines = settings.picker_context_lines
            self._disambiguator.timeout_s = settings.picker_timeout_s
        logger.info("Configuration updated: update_mode=%s", settings.update_mode)

    async def dispose(self) -> None:
        """Cancel the live cycle and scheduled triggers."""
        self._unsubscribe()
        self._cancel_live_token()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._state.phase = ControllerPhase.IDLE
