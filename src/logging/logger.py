# src/logging/logger.py — v3
"""Logger factory with JSON and text formatters.

A RequestContextFilter on every handler stamps each record with the
request context (request_id, feature, provider) current when the record
was created, so lines logged from queued provider attempts keep the
identity of the call that queued them. JSON lines also carry any
``extra={"data": {...}}`` payload.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from lexassist.logging.context import LogContext, get_context

_ROOT_LOGGER = "lexassist"

# Vendor SDK and HTTP client loggers are chatty at INFO (one line per request).
_NOISY_LOGGERS = ("openai", "anthropic", "httpx", "httpcore")


def _record_context(record: logging.LogRecord) -> LogContext:
    ctx = getattr(record, "request_context", None)
    return ctx if isinstance(ctx, LogContext) else get_context()


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class RequestContextFilter(logging.Filter):
    """Attach the current LogContext to each record as ``request_context``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_context"):
            record.request_context = get_context()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = _record_context(record).as_dict()
        if context:
            entry["context"] = context

        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable line: ``time [LEVEL] logger <rid> [feature] (provider) - msg``."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = _record_context(record)
        markers = [
            f"<{ctx.request_id}>" if ctx.request_id else "",
            f"[{ctx.feature}]" if ctx.feature else "",
            f"({ctx.provider})" if ctx.provider else "",
        ]
        head = " ".join([
            _record_time(record).strftime("%Y-%m-%d %H:%M:%S"),
            f"[{record.levelname:8s}]",
            record.name,
            *(m for m in markers if m),
        ])
        line = f"{head} - {record.getMessage()}"
        if record.exc_info and record.exc_info[1] is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str) -> logging.Logger:
    """Logger under the lexassist namespace. Configured by setup_logging()."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> None:
    """Configure the lexassist logger; safe to call more than once.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: "json" or "text".
        log_file: Optional rotating log file in addition to stdout.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.
    """
    root = logging.getLogger(_ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    formatter: logging.Formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        from lexassist.logging.handlers import create_rotating_handler

        handlers.append(create_rotating_handler(log_file, rotation=rotation, retention=retention))

    context_filter = RequestContextFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)

    if root.level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
