# src/controller/controller_factory.py — v1
"""Factory wiring an UpdateController from settings and host collaborators."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from defview.config.settings import Settings
from defview.controller.update_controller import UpdateController
from defview.disambiguation.disambiguator import Disambiguator
from defview.rendering.highlighter_factory import create_highlighter
from defview.rendering.renderer import Renderer

if TYPE_CHECKING:
    from defview.disambiguation.base_picker import BasePickerSurface
    from defview.providers.base_display_surface import BaseDisplaySurface
    from defview.providers.base_document_source import BaseDocumentSource
    from defview.providers.base_lookup_provider import BaseLookupProvider
    from defview.providers.base_navigator import BaseNavigator
    from defview.rendering.base_highlighter import BaseHighlighter

logger = logging.getLogger(__name__)


def create_controller(
    lookup: BaseLookupProvider,
    documents: BaseDocumentSource,
    display: BaseDisplaySurface,
    picker: BasePickerSurface | None = None,
    navigator: BaseNavigator | None = None,
    settings: Settings | None = None,
    highlighter: BaseHighlighter | None = None,
    visible: bool = True,
) -> UpdateController:
    """Build a controller with its renderer and disambiguator.

    Args:
        lookup: Definition lookup provider.
        documents: Document source shared by cache keys, picker and renderer.
        display: Panel receiving events.
        picker: Picker surface. None disables disambiguation (every
            candidate is rendered).
        navigator: Host navigation for jump requests.
        settings: Application settings. Loaded from .env if None.
        highlighter: Explicit highlighter, overriding ``settings.highlighter``.
        visible: Initial panel visibility.
    """
    settings = settings or Settings()
    highlighter = highlighter or create_highlighter(settings)
    renderer = Renderer(documents, highlighter, default_policy=settings.boundary_policy())

    disambiguator = None
    if picker is not None:
        disambiguator = Disambiguator(
            documents,
            picker,
            context_lines=settings.picker_context_lines,
            timeout_s=settings.picker_timeout_s,
        )
    elif settings.disambiguate:
        logger.info("No picker surface configured, rendering all candidates")

    return UpdateController(
        lookup=lookup,
        documents=documents,
        display=display,
        renderer=renderer,
        disambiguator=disambiguator,
        navigator=navigator,
        settings=settings,
        visible=visible,
    )
