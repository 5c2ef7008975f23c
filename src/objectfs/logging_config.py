"""Logging for objectfs.

Client and readiness code log through ``with_context`` so every record
carries the provider and bucket it concerns; the formatters below render
those fields after the message (text) or under ``context`` (JSON).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has; anything else came in through ``extra``.
_STANDARD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class _ObjectFsFormatter(logging.Formatter):
    def __init__(self, service: str) -> None:
        super().__init__()
        self.service = service

    @staticmethod
    def context(record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: value
            for key, value in sorted(record.__dict__.items())
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }

    @staticmethod
    def timestamp(record: logging.LogRecord) -> datetime:
        return datetime.fromtimestamp(record.created, timezone.utc)


class JsonFormatter(_ObjectFsFormatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.timestamp(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service,
            "message": record.getMessage(),
        }
        context = self.context(record)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class TextFormatter(_ObjectFsFormatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [
            self.timestamp(record).strftime("%Y-%m-%dT%H:%M:%S%z"),
            record.levelname,
            record.name,
            f"service={self.service}",
            f"message={record.getMessage()}",
        ]
        parts.extend(f"{key}={value!r}" for key, value in self.context(record).items())
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str | None = None, service: str = "objectfs") -> None:
    """Install a single stderr handler on the root logger.

    Level comes from ``level`` or ``OBJECTFS_LOG_LEVEL``/``LOG_LEVEL``.
    ``OBJECTFS_LOG_JSON`` switches to one JSON object per line.
    """
    level_name = level or os.getenv("OBJECTFS_LOG_LEVEL") or os.getenv("LOG_LEVEL", "WARNING")
    formatter_class = JsonFormatter if parse_bool(os.getenv("OBJECTFS_LOG_JSON"), default=False) else TextFormatter

    # stdout carries the diagnostics report
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(formatter_class(service=service))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level_name.upper(), logging.WARNING))
    logging.captureWarnings(True)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def with_context(logger: logging.Logger, **context: Any) -> logging.LoggerAdapter:
    """Adapter that attaches ``context`` to every record, e.g. provider and bucket."""
    return logging.LoggerAdapter(logger, extra=context)
