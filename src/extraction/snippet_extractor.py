# src/extraction/snippet_extractor.py — v1
"""Snippet boundary extraction: widen a raw definition range to its block.

Given the lines of a document and the range reported by the lookup
provider, pulls in attached metadata above (comments, attributes,
decorators) and the remainder of the block below, using only indentation
and punctuation. The result is approximate by nature.

Indent values are raw character counts (a tab counts as one column), so
comparisons are ordinal only. The excerpt is dedented by the smallest indent
of its non-blank lines, capped at the indent of the start line.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from defview.core.models import Snippet, Span
from defview.extraction.boundary_policy import DEFAULT_POLICY, BoundaryPolicy

logger = logging.getLogger(__name__)


def extract(
    lines: Sequence[str],
    span: Span,
    policy: BoundaryPolicy = DEFAULT_POLICY,
) -> Snippet:
    """Compute the excerpt to display for a definition range.

    Args:
        lines: Document lines without line terminators.
        span: Raw definition range (inclusive lines).
        policy: Punctuation tables for the heuristic.

    Returns:
        Snippet with dedented content and the widened inclusive line range.
        The content always covers at least ``span`` and ends with a newline.
    """
    if not lines:
        return Snippet(content="\n", start_line=0, end_line=0)

    last_index = len(lines) - 1
    start = _clamp(span.start_line, 0, last_index)
    end = _clamp(max(span.end_line, start), 0, last_index)

    indent = _indent_of(lines[start])
    if indent is None:
        indent = 0

    first_line = _scan_backward(lines, start, indent, policy)
    last_line = _scan_forward(lines, start, end, indent, policy)

    block = lines[first_line : last_line + 1]
    dedent = min([indent] + [i for i in map(_indent_of, block) if i is not None])
    excerpt = [line[dedent:] for line in block]
    logger.debug(
        "Widened %d-%d to %d-%d (dedent %d)",
        span.start_line, span.end_line, first_line, last_line, dedent,
    )
    return Snippet(
        content="\n".join(excerpt) + "\n",
        start_line=first_line,
        end_line=last_line,
    )


def _scan_backward(
    lines: Sequence[str],
    start: int,
    indent: int,
    policy: BoundaryPolicy,
) -> int:
    """Topmost line of the metadata block directly above ``start``."""
    first_line = start
    for n in range(start - 1, -1, -1):
        line_indent = _indent_of(lines[n])
        if line_indent is None or line_indent < indent:
            break
        if lines[n].strip()[0] not in policy.leading_prefixes:
            break
        first_line = n
    return first_line


def _scan_forward(
    lines: Sequence[str],
    start: int,
    end: int,
    indent: int,
    policy: BoundaryPolicy,
) -> int:
    """Last line belonging to the block that starts at ``start``."""
    last_line = end
    inside_block = _ends_with(lines[start].strip(), policy.bodyless_terminators)

    for n in range(start, len(lines)):
        line_indent = _indent_of(lines[n])
        if line_indent is None:
            continue

        trimmed = lines[n].strip()
        first_char = trimmed[0]
        last_char = trimmed[-1]

        if line_indent < indent:
            break

        if inside_block and line_indent == indent:
            # Brace on its own line, or closing paren of a wrapped signature.
            if first_char in policy.block_open_first or first_char in policy.continuation_first:
                last_line = max(last_line, n)
                continue
            if first_char in policy.block_close_first:
                last_line = max(last_line, n)
            # Otherwise the next sibling definition starts here.
            break

        if (
            line_indent > indent
            or first_char in policy.block_open_first
            or last_char in policy.block_last_chars
        ):
            inside_block = True

        last_line = max(last_line, n)

    return last_line


def _indent_of(line: str) -> int | None:
    """Index of the first non-whitespace character, None for blank lines."""
    stripped = line.lstrip()
    if not stripped:
        return None
    return len(line) - len(stripped)


def _ends_with(text: str, chars: frozenset[str]) -> bool:
    return bool(text) and text[-1] in chars


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))
