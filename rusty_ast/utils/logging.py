"""
Structured logging for rusty-ast.

Every record is emitted as one JSON object. Render context (source unit,
output format, language, pipeline phase) is attached through a LoggerAdapter
and promoted to top-level keys; anything else passed via ``extra`` lands under
``context``.

Logs go to stderr so they never interleave with rendered output on stdout.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from logging import LogRecord
from typing import Any, Dict, MutableMapping, Optional, TextIO, Tuple


CONTEXT_FIELDS = ("source", "format", "language", "phase")

# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "taskName"}


def _error_details(exc_info) -> Dict[str, Any]:
    exc_type, exc_value, _ = exc_info
    return {
        "type": exc_type.__name__ if exc_type else None,
        "message": str(exc_value) if exc_value else None,
        "stack_trace": "".join(traceback.format_exception(*exc_info)),
    }


class JSONFormatter(logging.Formatter):
    """
    Render log records as single-line JSON.

    Keys: timestamp (UTC, ISO 8601), level, logger, message, any of the
    CONTEXT_FIELDS that are set, ``context`` for the remaining extras,
    ``error`` when exception info is attached, and ``location``.
    """

    def format(self, record: LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
        }
        for key in CONTEXT_FIELDS:
            if key in extras:
                entry[key] = extras.pop(key)
        if extras:
            entry["context"] = extras

        if record.exc_info:
            entry["error"] = _error_details(record.exc_info)

        entry["location"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }
        return json.dumps(entry, default=str)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter whose context merges with, and yields to, per-call extras."""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> Tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextLoggerAdapter":
        """Return a sibling adapter carrying this adapter's context plus ``context``."""
        return ContextLoggerAdapter(self.logger, {**self.extra, **context})


def setup_logging(log_level: str = "WARNING", stream: Optional[TextIO] = None) -> None:
    """
    Install a JSON handler on the root logger, replacing existing handlers.

    Args:
        log_level: Level name such as DEBUG or WARNING
        stream: Destination stream, stderr by default

    Raises:
        ValueError: If the level name is unknown
    """
    level = log_level.upper()
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter())
    handler.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Module logger with optional initial context.

    Example:
        logger = get_logger(__name__, language="rust")
    """
    return ContextLoggerAdapter(logging.getLogger(name), context)


def log_render_completed(
    logger: logging.LoggerAdapter,
    source: str,
    output_format: str,
    node_count: int,
    duration_ms: Optional[float] = None,
) -> None:
    """
    Record one finished render at debug level.

    Args:
        logger: Logger to use
        source: Source unit name
        output_format: 'text' or 'json'
        node_count: Nodes in the rendered tree
        duration_ms: Wall time of the render, rounded to 2 places
    """
    extra: Dict[str, Any] = {"source": source, "format": output_format, "node_count": node_count}
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
    logger.debug(f"Rendered {source} as {output_format}", extra=extra)


def log_parse_failure(
    logger: logging.LoggerAdapter,
    source: str,
    message: str,
    line: Optional[int] = None,
    column: Optional[int] = None,
) -> None:
    """Warn about a source unit that failed to parse, with its location when known."""
    extra: Dict[str, Any] = {"source": source, "phase": "parse"}
    if line is not None:
        extra["line"] = line
    if column is not None:
        extra["column"] = column
    logger.warning(f"Parse failed for {source}: {message}", extra=extra)


def log_error_with_context(
    logger: logging.LoggerAdapter,
    message: str,
    error: Exception,
    **context: Any
) -> None:
    """Log an unexpected error with its traceback and any extra context."""
    logger.error(message, extra=context, exc_info=error)
