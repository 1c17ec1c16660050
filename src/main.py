# src/main.py — v1
"""CLI entry point: extract and context commands.

Usage:
    defview extract <file> --line N [--end-line M] [--html] [--theme T]
    defview context <file> --line N [--end-line M] [--context-lines K]

Lines are 1-based on the command line.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from defview.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="defview",
        description=f"defview v{__version__} - definition preview snippets",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- extract ---
    p_extract = subparsers.add_parser(
        "extract", help="Print the widened snippet for a definition range",
    )
    _add_range_arguments(p_extract)
    p_extract.add_argument(
        "--html", action="store_true",
        help="Render as HTML instead of plain text",
    )
    p_extract.add_argument(
        "--theme", default=None,
        help="HTML theme name (default: from settings)",
    )
    p_extract.set_defaults(func=_cmd_extract)

    # --- context ---
    p_context = subparsers.add_parser(
        "context", help="Print the picker preview window for a range",
    )
    _add_range_arguments(p_context)
    p_context.add_argument(
        "--context-lines", type=int, default=None,
        help="Lines of context around the range (default: from settings)",
    )
    p_context.set_defaults(func=_cmd_context)

    return parser


def _add_range_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", type=Path, help="Path to source file")
    parser.add_argument(
        "-l", "--line", type=int, required=True,
        help="First line of the definition (1-based)",
    )
    parser.add_argument(
        "-e", "--end-line", type=int, default=None,
        help="Last line of the definition (default: --line)",
    )


async def _cmd_extract(args: argparse.Namespace) -> int:
    """Extract and print a snippet."""
    from defview.config.settings import Settings
    from defview.extraction.boundary_policy import policy_for_language
    from defview.extraction.snippet_extractor import extract
    from defview.rendering.html_highlighter import HtmlHighlighter

    loaded = await _load(args)
    if loaded is None:
        return 1
    document, candidate = loaded

    settings = Settings()
    policy = policy_for_language(document.language_id, default=settings.boundary_policy())
    snippet = extract(document.lines, candidate.span, policy)
    logger.info(
        "Snippet spans lines %d-%d", snippet.start_line + 1, snippet.end_line + 1,
    )

    if args.html:
        highlighter = HtmlHighlighter(theme=args.theme or settings.highlighter_theme)
        sys.stdout.write(
            highlighter.highlight(
                snippet.content, document.language_id, first_line=snippet.start_line + 1,
            )
            + "\n"
        )
    else:
        sys.stdout.write(snippet.content)
    return 0


async def _cmd_context(args: argparse.Namespace) -> int:
    """Print the preview window the picker would show."""
    from defview.config.settings import Settings
    from defview.disambiguation.disambiguator import preview_window

    loaded = await _load(args)
    if loaded is None:
        return 1
    document, candidate = loaded

    context_lines = args.context_lines
    if context_lines is None:
        context_lines = Settings().picker_context_lines
    sys.stdout.write(preview_window(document.lines, candidate, context_lines) + "\n")
    return 0


async def _load(args: argparse.Namespace):
    """Open the file and build a whole-line candidate from the CLI range."""
    from defview.core.models import CandidateDefinition, Span
    from defview.providers.base_document_source import DocumentOpenError
    from defview.providers.file_document_source import FileDocumentSource

    end_line = args.end_line if args.end_line is not None else args.line
    if args.line < 1 or end_line < args.line:
        logger.error("Invalid line range: %s-%s", args.line, end_line)
        return None

    try:
        document = await FileDocumentSource().open_document(str(args.file))
    except DocumentOpenError as exc:
        logger.error("%s", exc)
        return None

    if args.line > document.line_count:
        logger.error("Line %d is past the end of %s (%d lines)",
                     args.line, args.file, document.line_count)
        return None

    last = min(end_line, document.line_count) - 1
    candidate = CandidateDefinition(
        target=str(args.file),
        span=Span(
            start_line=args.line - 1,
            end_line=last,
            end_col=len(document.lines[last]),
        ),
    )
    return document, candidate


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage; LOG_FILE and rotation come from settings."""
    from defview.config.settings import Settings
    from defview.logging.logger import setup_logging_from_settings

    setup_logging_from_settings(
        Settings(), level="DEBUG" if verbose else "WARNING", log_format="text"
    )


if __name__ == "__main__":
    sys.exit(main())
