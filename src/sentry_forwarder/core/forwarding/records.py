# src/sentry_forwarder/core/forwarding/records.py
"""
Host log records: the immutable unit the forwarder consumes.

`HostLogRecord.from_logging` converts a stdlib `logging.LogRecord` the way the
host logger would have produced it: the payload is either an exception, a
structured value, or the formatted message text.
"""

from __future__ import annotations

import logging
import pprint
import traceback
from dataclasses import dataclass
from typing import Any

from .levels import HostLogLevel

# Category prefix of records describing HTTP errors ("http-exception:404").
HTTP_EXCEPTION_CATEGORY = "http-exception"


def http_exception_category(code: int) -> str:
    return f"{HTTP_EXCEPTION_CATEGORY}:{code}"


def http_status_of(error: BaseException) -> int | None:
    """Integer `status_code` of HTTP-style exceptions (Starlette/FastAPI HTTPException, ...)."""
    status = getattr(error, "status_code", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    return None


def render_message(payload: Any) -> str:
    """
    Render a record payload to display text.

    Strings pass through, exceptions render as "ExceptionType: message" and any
    other value is dumped with pprint so dicts/lists stay readable.
    """
    if isinstance(payload, str):
        return payload
    if isinstance(payload, BaseException):
        return "".join(traceback.format_exception_only(type(payload), payload)).strip()
    return pprint.pformat(payload)


@dataclass(frozen=True)
class HostLogRecord:
    payload: Any
    level: HostLogLevel | int
    category: str = ""
    timestamp: float = 0.0
    trace: str | None = None

    @property
    def is_exception(self) -> bool:
        return isinstance(self.payload, BaseException)

    @property
    def message(self) -> str:
        return render_message(self.payload)

    @classmethod
    def from_logging(cls, record: logging.LogRecord) -> "HostLogRecord":
        payload: Any
        if isinstance(record.msg, BaseException):
            payload = record.msg
        elif record.exc_info and record.exc_info[1] is not None:
            payload = record.exc_info[1]
        elif not isinstance(record.msg, str) and not record.args:
            payload = record.msg
        else:
            payload = record.getMessage()

        category = record.name
        if isinstance(payload, BaseException):
            status = http_status_of(payload)
            if status is not None:
                category = http_exception_category(status)

        return cls(
            payload=payload,
            level=HostLogLevel.from_logging(record),
            category=category,
            timestamp=record.created,
            trace=record.stack_info or f"{record.pathname}:{record.lineno}",
        )


__all__ = [
    "HTTP_EXCEPTION_CATEGORY",
    "HostLogRecord",
    "http_exception_category",
    "http_status_of",
    "render_message",
]
