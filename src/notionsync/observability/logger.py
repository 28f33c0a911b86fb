"""Structured JSON logger for notionsync.

Every record is emitted as one JSON object per line so CI logs can be
grepped or shipped to an aggregator without extra parsing::

    {"ts": "2026-10-17T12:00:00.123456+00:00", "level": "INFO",
     "logger": "notionsync.engine", "message": "Appending batch",
     "op": "append_markdown", "block_id": "abc123", "batch": 1, "batches": 2}

Usage::

    from notionsync.observability import get_logger

    log = get_logger("notionsync.engine")
    log.info("cleared", extra={"extra_fields": {"block_id": "abc"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys: ``ts``, ``level``, ``logger``, ``message``.  Fields
    passed via ``extra={"extra_fields": {...}}`` are merged into the top
    level, and ``exception`` / ``stack_info`` are added when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


# One handler per configured logger name so ``get_logger`` is idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "notionsync",
    *,
    level: int | str = logging.DEBUG,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Only the root ``"notionsync"`` logger receives a handler; child loggers
    such as ``"notionsync.engine"`` propagate to it, so the level set on the
    root (e.g. by the CLI's ``--log-level``) governs the whole package.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"notionsync"``.
    level:
        Initial level for the root logger, as an ``int`` or a
        case-insensitive name.  Ignored for child loggers.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.
    """
    root = logging.getLogger("notionsync")

    if "notionsync" not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        root.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)

        # Keep messages out of the root logger's handlers.
        root.propagate = False

        _configured_loggers.add("notionsync")

    if name == "notionsync":
        return root
    return logging.getLogger(name)
