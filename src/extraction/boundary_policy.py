# src/extraction/boundary_policy.py — v1
"""Punctuation tables driving the snippet boundary heuristic.

The tables are best-effort and language-agnostic: they cover C-family
braces, Python colons, attributes/annotations and comment lines, with no
grammar behind them. Languages that need different tables register their
own policy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundaryPolicy:
    """First/last character tables used by the backward and forward scans."""

    # Backward scan: attached metadata lines (comments, attributes, decorators).
    leading_prefixes: frozenset[str] = frozenset({"@", "/", "#", "[", ";", "-"})
    # Start line ending in one of these has no body (declarations, C# stubs).
    bodyless_terminators: frozenset[str] = frozenset({";"})
    # Same-indent lines absorbed while inside a block.
    block_open_first: frozenset[str] = frozenset({"{"})
    continuation_first: frozenset[str] = frozenset({")"})
    block_close_first: frozenset[str] = frozenset({"}"})
    # Last characters signalling that a block has been entered.
    block_last_chars: frozenset[str] = frozenset({":", "{", ";", "}"})

    def with_overrides(
        self,
        leading_prefixes: list[str] | None = None,
        block_last_chars: list[str] | None = None,
    ) -> BoundaryPolicy:
        """Return a copy with the given tables replaced."""
        changes: dict[str, frozenset[str]] = {}
        if leading_prefixes is not None:
            changes["leading_prefixes"] = frozenset(leading_prefixes)
        if block_last_chars is not None:
            changes["block_last_chars"] = frozenset(block_last_chars)
        return replace(self, **changes)


DEFAULT_POLICY = BoundaryPolicy()

_POLICIES: dict[str, BoundaryPolicy] = {}


def register_policy(language_id: str, policy: BoundaryPolicy) -> None:
    """Register a policy for a language id, replacing any previous one."""
    if language_id in _POLICIES:
        logger.debug("Replacing boundary policy for '%s'", language_id)
    _POLICIES[language_id] = policy


def unregister_policy(language_id: str) -> None:
    _POLICIES.pop(language_id, None)


def policy_for_language(
    language_id: str | None,
    default: BoundaryPolicy = DEFAULT_POLICY,
) -> BoundaryPolicy:
    """Policy registered for ``language_id``, else ``default``."""
    if language_id is None:
        return default
    return _POLICIES.get(language_id, default)
