"""JSON logging for the MyCloset app, with location details kept out of the logs."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import time
import uuid
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterator

CORRELATION_ID = contextvars.ContextVar("correlation_id", default=None)
_RECORD_ATTRIBUTES = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "taskName"}
# Fields that would reveal where the user is or is travelling to.
_LOCATION_KEYS = {
    "location_name",
    "latitude",
    "longitude",
    "query",
    "display_name",
}


class JsonFormatter(logging.Formatter):
    """One JSON object per record: event name, correlation id and the extra fields."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        if message != payload["event"]:
            payload["message"] = message
        extras = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES and key not in payload}
        payload.update(redact_for_log(extras))
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Send JSON records to stderr at ``level`` or ``$LOG_LEVEL``."""

    desired_level = level or os.getenv("LOG_LEVEL", "INFO")
    logging.root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=desired_level, handlers=[handler])


def redact_for_log(payload: Any) -> Any:
    """Make ``payload`` JSON friendly and mask location fields at any depth."""

    if isinstance(payload, Enum):
        return payload.value
    if payload is None or isinstance(payload, (str, int, float, bool)):
        return payload
    if isinstance(payload, date):
        return payload.isoformat()
    if isinstance(payload, (list, tuple, set)):
        return [redact_for_log(item) for item in payload]
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in _LOCATION_KEYS and value is not None else redact_for_log(value)
            for key, value in payload.items()
        }
    return str(payload)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Return the current correlation id, adopting ``correlation_id`` or minting one."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    new_id = uuid.uuid4().hex
    CORRELATION_ID.set(new_id)
    return new_id


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, correlation_id: str | None = None) -> Iterator[str]:
    """Run one user operation under its own correlation id and log how it ended.

    The previous correlation id is restored on exit, and the finishing record
    carries the duration and ``ok`` or ``failed``.
    """

    token = CORRELATION_ID.set(correlation_id or uuid.uuid4().hex)
    start = time.perf_counter()
    status = "ok"
    try:
        yield CORRELATION_ID.get()
    except Exception:
        status = "failed"
        raise
    finally:
        log_event(
            logging.getLogger(__name__),
            logging.DEBUG,
            "operation_finished",
            operation=name,
            status=status,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        CORRELATION_ID.reset(token)


__all__ = [
    "configure_logging",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "redact_for_log",
    "operation_context",
]
