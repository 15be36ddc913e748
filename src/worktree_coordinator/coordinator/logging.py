"""Structured diagnostic logging.

Uses standard library logging with a JSON formatter. Records go to stderr:
stdout belongs to the hook output envelope and must carry nothing else.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

_RESERVED_LOG_RECORD_ATTRS: set[str] = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}

# Lifted out of "extra" to the top level of each line.
CORRELATION_FIELDS: tuple[str, ...] = ("signal", "workflow", "command")

DEFAULT_LEVEL = logging.WARNING


class JsonFormatter(logging.Formatter):
    """JSON formatter with the signal/workflow being handled at top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
        }
        for key in CORRELATION_FIELDS:
            if key in extra:
                payload[key] = extra.pop(key)
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def resolve_level(level: str) -> int | None:
    """Map a level name such as 'debug' to its number; None if unknown."""

    return logging.getLevelNamesMapping().get(level.strip().upper())


def configure_logging(level: str) -> None:
    """Configure root logging with structured JSON output on stderr.

    An unknown level name falls back to WARNING: diagnostics must never stop
    a dispatch cycle from running.
    """

    root = logging.getLogger()

    # Hooks may be invoked repeatedly in one interpreter (tests); avoid duplicate handlers.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    resolved = resolve_level(level)
    root.setLevel(DEFAULT_LEVEL if resolved is None else resolved)
    if resolved is None:
        logging.getLogger(__name__).warning(
            "Unknown log level; using WARNING", extra={"requested_level": level}
        )
