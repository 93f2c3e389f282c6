"""Structured logging configuration.

Board sync runs mostly inside GitHub Actions, where each log line should say which
project and item it concerns. The JSON formatter lifts that context to top-level
keys; the text formatter is meant for local runs.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, Literal

from github_board_sync.errors import ProjectSyncError

LogFormat = Literal["json", "text"]

# Context keys passed via `extra=` that are promoted to top-level JSON keys.
SYNC_CONTEXT_KEYS: tuple[str, ...] = (
    "project_id",
    "item_id",
    "project_item_id",
    "status",
    "kind",
)

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_STANDARD_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the `extra=` values attached to a record."""

    return {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with project/item context at the top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = record_context(record)
        for key in SYNC_CONTEXT_KEYS:
            if key in context:
                payload[key] = context.pop(key)
        if context:
            payload["extra"] = context

        if record.exc_info:
            error = record.exc_info[1]
            if isinstance(error, ProjectSyncError):
                payload.setdefault("kind", error.kind.value)
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Plain text lines with the sync context appended as `key=value` pairs."""

    def __init__(self) -> None:
        super().__init__(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        line = super().format(record)
        context = record_context(record)
        pairs = [f"{key}={context[key]}" for key in SYNC_CONTEXT_KEYS if key in context]
        if pairs:
            first, sep, rest = line.partition("\n")
            line = f"{first} [{' '.join(pairs)}]{sep}{rest}"
        return line


def configure_logging(level: str, fmt: LogFormat = "json") -> None:
    """Configure root logging on stderr, so stdout carries only command output."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter() if fmt == "json" else TextFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in ("github", "urllib3"):
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
