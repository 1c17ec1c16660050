# src/logging/logger.py — v1
"""Logging setup for defview: JSON lines or plain text on stderr.

Every handler installed by ``setup_logging`` carries a ``CycleContextFilter``
that copies the active cycle context (document, cycle number, stage) onto
the record when it is emitted. The formatters read the context from the
record, so a message logged inside a resolve cycle names that cycle.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from defview.logging.context import get_context

if TYPE_CHECKING:
    from defview.config.settings import Settings

ROOT_LOGGER = "defview"
LOG_FORMATS = ("json", "text")

_CONTEXT_ATTR = "defview_context"


class CycleContextFilter(logging.Filter):
    """Stamp each record with the cycle context active when it was logged."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, _CONTEXT_ATTR):
            setattr(record, _CONTEXT_ATTR, get_context().as_dict())
        return True


def _context_of(record: logging.LogRecord) -> dict[str, Any]:
    stamped = getattr(record, _CONTEXT_ATTR, None)
    return get_context().as_dict() if stamped is None else stamped


def _created(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    ``context``, ``data`` (from ``extra={"data": ...}``) and ``exception``
    keys appear only when there is something to put in them.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _created(record).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = _context_of(record)
        if context:
            entry["context"] = context
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger [cycle N document] (stage) - message``."""

    def format(self, record: logging.LogRecord) -> str:
        context = _context_of(record)
        line = f"{_created(record):%H:%M:%S} {record.levelname:<7} {record.name}"

        if "cycle" in context:
            document = context.get("document")
            line += f" [cycle {context['cycle']}{' ' + document if document else ''}]"
        if "stage" in context:
            line += f" ({context['stage']})"
        line += f" - {record.getMessage()}"

        if record.exc_info and record.exc_info[1] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def get_logger(name: str) -> logging.Logger:
    """Logger below the ``defview`` root, e.g. ``defview.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> logging.Logger:
    """(Re)configure the ``defview`` logger.

    Previous handlers are closed and replaced, so calling this twice never
    duplicates output. stdout stays free for CLI output.

    Args:
        level: DEBUG, INFO, WARNING or ERROR.
        log_format: "json" or "text".
        log_file: Optional rotating log file in addition to stderr.
        rotation: Size that triggers rotation, e.g. "10MB".
        retention: Rotated files kept.

    Raises:
        ValueError: Unknown ``log_format``.
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unsupported log format: {log_format!r}")
    formatter: logging.Formatter = JsonFormatter() if log_format == "json" else TextFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from defview.logging.handlers import create_rotating_handler

        handlers.append(create_rotating_handler(log_file, rotation=rotation, retention=retention))

    root = logging.getLogger(ROOT_LOGGER)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    context_filter = CycleContextFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)
    return root


def setup_logging_from_settings(
    settings: Settings,
    level: str | None = None,
    log_format: str | None = None,
) -> logging.Logger:
    """``setup_logging`` driven by the LOG_* settings; arguments override them."""
    return setup_logging(
        level=level or settings.log_level,
        log_format=log_format or settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
