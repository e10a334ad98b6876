"""Structured logging helpers.

Every module gets its logger through ``get_logger(__name__)``. The returned
adapter accepts an ``extra_data`` keyword so call sites can attach context:

    logger.debug(f"Rejected {name}", extra_data={"reason": "duplicate"})

``setup_logging`` configures the root handler once, optionally as JSON lines.
A request id stored in a context variable is stamped on every record so the
lines belonging to one generation call can be grouped.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_configured = False


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter that moves ``extra_data`` into the record."""

    def process(self, msg, kwargs):
        extra_data = kwargs.pop("extra_data", None)
        extra = kwargs.setdefault("extra", {})
        extra["extra_data"] = extra_data or {}
        extra["request_id"] = get_request_id()
        return msg, kwargs


class JsonFormatter(logging.Formatter):
    """Format records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        data = getattr(record, "extra_data", None)
        if data:
            payload["data"] = data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter that appends structured data when present."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s", "%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        request_id = getattr(record, "request_id", None)
        if request_id:
            line = f"{line} [req={request_id}]"
        data = getattr(record, "extra_data", None)
        if data:
            line = f"{line} {json.dumps(data, default=str)}"
        return line


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for a module.

    Args:
        name: Logger name, normally ``__name__``.

    Returns:
        Logger adapter supporting the ``extra_data`` keyword.
    """
    return StructuredLogger(logging.getLogger(name), {})


def setup_logging(level: str = "INFO", json_format: bool = False, force: bool = False) -> None:
    """Configure the root logger.

    Args:
        level: Log level name.
        json_format: Emit JSON lines instead of plain text.
        force: Reconfigure even if logging was already set up.
    """
    global _configured
    if _configured and not force:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else TextFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _configured = True


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set the correlation id for the current context.

    Args:
        request_id: Explicit id; a short random id is generated when omitted.

    Returns:
        The id now in effect.
    """
    value = request_id or uuid.uuid4().hex[:12]
    _request_id.set(value)
    return value


def get_request_id() -> Optional[str]:
    """Get the correlation id for the current context, if any."""
    return _request_id.get()


def log_generation(
    logger: StructuredLogger,
    path: str,
    requested: int,
    produced: int,
    duration_ms: int,
    success: bool,
    error: Optional[str] = None,
) -> None:
    """Log a one-line summary of a generation call.

    Args:
        logger: Logger to write to.
        path: Generation path taken (template, fusion, fallback).
        requested: Number of names requested.
        produced: Number of names returned.
        duration_ms: Wall time of the call.
        success: Whether the primary path produced the output.
        error: Error description for unsuccessful calls.
    """
    data = {
        "path": path,
        "requested": requested,
        "produced": produced,
        "duration_ms": duration_ms,
        "success": success,
    }
    if error:
        data["error"] = error

    if success:
        logger.info(f"Generated {produced}/{requested} names via {path} in {duration_ms}ms", extra_data=data)
    else:
        logger.warning(f"Generation via {path} degraded: {error}", extra_data=data)
