from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from themekit.logging_context import get_request_id

DEFAULT_REDACT_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "csrf_token",
        "session",
        "session_secret_key",
        "file_url_secret_key",
        "authorization",
        "cookie",
        "token",
    }
)
REDACTED = "[REDACTED]"

# Attributes present on every LogRecord; anything else came in through `extra`.
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.makeLogRecord({})).keys() | {"message", "asctime"}
)
_DROPPED_FIELDS = frozenset({"color_message"})


def parse_redact_fields(raw_value: str) -> frozenset[str]:
    extra = {part.strip().lower() for part in raw_value.split(",") if part.strip()}
    return DEFAULT_REDACT_FIELDS | frozenset(extra)


def _redact(value: Any, redact_fields: frozenset[str]) -> Any:
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in redact_fields else _redact(item, redact_fields)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(item, redact_fields) for item in value]
    return value


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_RECORD_ATTRS and key not in _DROPPED_FIELDS
    }


class JsonLogFormatter(logging.Formatter):
    def __init__(self, *, redact_fields: frozenset[str] = DEFAULT_REDACT_FIELDS) -> None:
        super().__init__()
        self._redact_fields = redact_fields

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": timestamp.strftime("%Y-%m-%d %H:%M:%SZ"),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        request_id = get_request_id()
        if request_id is not None:
            payload["request_id"] = request_id
        payload.update(_redact(_record_extras(record), self._redact_fields))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ConsoleLogFormatter(logging.Formatter):
    def __init__(self, *, redact_fields: frozenset[str] = DEFAULT_REDACT_FIELDS) -> None:
        super().__init__(fmt="%(asctime)s %(levelname)s %(name)s %(message)s")
        self._redact_fields = redact_fields

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _redact(_record_extras(record), self._redact_fields)
        extras.pop("event", None)
        if extras:
            rendered = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
            line = f"{line} {rendered}"
        return line


def configure_logging(
    *,
    level: str = "INFO",
    log_format: str = "console",
    redact_fields: frozenset[str] = DEFAULT_REDACT_FIELDS,
    include_uvicorn_access: bool = False,
) -> None:
    handler = logging.StreamHandler(sys.stdout)
    if log_format.strip().lower() == "json":
        handler.setFormatter(JsonLogFormatter(redact_fields=redact_fields))
    else:
        handler.setFormatter(ConsoleLogFormatter(redact_fields=redact_fields))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in ("uvicorn", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    access_logger = logging.getLogger("uvicorn.access")
    access_logger.handlers.clear()
    access_logger.propagate = include_uvicorn_access
    access_logger.disabled = not include_uvicorn_access
