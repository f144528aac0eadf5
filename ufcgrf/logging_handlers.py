"""Structured (JSON lines) logging for pipeline runs.

Pipeline operations log with ``extra={"step": ..., "operation": ...,
"entries": ...}``; the formatter below lifts those fields into the JSON
record so a run can be replayed step by step from its log.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any

# LogRecord attributes that are never treated as user-supplied extras
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
    }
)


class StructuredFormatter(logging.Formatter):
    """JSON formatter with contextual metadata for machine-readable logs."""

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with metadata."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Pipeline context
        for attr in ("step", "operation", "entries", "curve_name"):
            if hasattr(record, attr):
                log_data[attr] = getattr(record, attr)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            for key, value in record.__dict__.items():
                if key not in _RESERVED_ATTRS and key not in log_data:
                    log_data[key] = value

        return json.dumps(log_data, default=str)


def attach_structured_handler(
    logger_name: str = "ufcgrf",
    stream: IO[str] | None = None,
    level: int = logging.INFO,
) -> logging.Handler:
    """Attach a JSON-lines stream handler to the package logger.

    Intended for application entry points; library modules never call it.

    Args:
        logger_name: Logger to attach to (defaults to the package root).
        stream: Output stream, ``sys.stderr`` when omitted.
        level: Handler level.

    Returns:
        The attached handler, so callers can detach it again.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter())
    logging.getLogger(logger_name).addHandler(handler)
    return handler
