# src/sentry_forwarder/core/logging/handlers.py
"""
Handler factories for logging.dictConfig, and the Sentry forwarding handler.

The get_*_handler() functions are pure: they take the validated Settings and
return a handler configuration dict for the builder (builder.py). SentryHandler
is the bridge between stdlib logging and the LogForwarder.
"""

from __future__ import annotations

import itertools
import logging
from logging.handlers import BufferingHandler
from pathlib import Path
from typing import Any, Iterator, Sequence

from sentry_forwarder.config.settings import Settings
from sentry_forwarder.core.forwarding.context import StaticIdentityProvider
from sentry_forwarder.core.forwarding.forwarder import ForwardResult, LogForwarder
from sentry_forwarder.core.forwarding.records import HostLogRecord

from .filters import IDENTITY_ATTR, REQUEST_CONTEXT_ATTR

# Marks a record that never went through SentryContextFilter.
_UNSTAMPED = object()


def get_console_handler(settings: Settings) -> dict:
    """
    Console/stream handler. Writes to sys.stderr; the formatter is "json" or
    "standard" according to settings.LOG_FORMAT.
    """
    return {
        "class": "logging.StreamHandler",
        "formatter": "json" if settings.LOG_FORMAT == "json" else "standard",
        "level": settings.LOG_LEVEL,
        "filters": ["request_id", "redact"],
    }

def get_file_handler(settings: Settings) -> dict:
    file_path = str(Path(settings.LOG_DIR) / "app.log")
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json" if settings.LOG_FORMAT == "json" else "standard",
        "level": settings.LOG_LEVEL,
        "filename": file_path,
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": ["request_id", "redact"],
    }

# Error-specific rotating file to separate errors (useful for alerting/archival).
def get_error_file_handler(settings: Settings) -> dict:
    error_file_path = str(Path(settings.LOG_DIR) / "errors.log")
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "level": "ERROR",
        "filename": error_file_path,
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": ["request_id", "redact"],
    }

def get_error_console_handler(settings: Settings) -> dict:
    return {
        "class": "logging.StreamHandler",
        "formatter": "json",
        "level": "ERROR",
        "filters": ["request_id", "redact"],
    }

def get_sentry_handler(settings: Settings, forwarder: LogForwarder) -> dict:
    """
    Sentry handler config. The handler level is WARNING because nothing below
    a warning is ever forwarded; buffering and flush level come from settings.
    """
    return {
        "()": SentryHandler,
        "forwarder": forwarder,
        "capacity": settings.SENTRY_BUFFER_SIZE,
        "flush_level": settings.SENTRY_FLUSH_LEVEL,
        "level": "WARNING",
        "filters": ["sentry_context"],
    }


class SentryHandler(BufferingHandler):
    """
    Buffer log records and forward them in batches through a LogForwarder.

    The buffer is flushed when it reaches `capacity`, when a record at or above
    `flush_level` arrives, and when the handler is closed. Consecutive records
    stamped with the same request context and identity (see SentryContextFilter)
    are forwarded together; unstamped records use whatever context is current
    at flush time.

    The handler also satisfies the LogSource protocol through batches().
    """

    def __init__(self, forwarder: LogForwarder, capacity: int = 1000, flush_level: Any = logging.ERROR):
        super().__init__(capacity)
        self.forwarder = forwarder
        self.flush_level = flush_level if isinstance(flush_level, int) else logging.getLevelName(str(flush_level).upper())
        self.last_result: ForwardResult | None = None

    def shouldFlush(self, record: logging.LogRecord) -> bool:
        return len(self.buffer) >= self.capacity or record.levelno >= self.flush_level

    def _drain(self) -> list[logging.LogRecord]:
        self.acquire()
        try:
            records, self.buffer = self.buffer, []
        finally:
            self.release()
        return records

    def _groups(self, records: Sequence[logging.LogRecord]) -> Iterator[tuple[Any, Any, list[HostLogRecord]]]:
        def key(record: logging.LogRecord):
            return (
                getattr(record, REQUEST_CONTEXT_ATTR, None),
                getattr(record, IDENTITY_ATTR, _UNSTAMPED),
            )

        for (request, identity), group in itertools.groupby(records, key=key):
            batch = [host for host in map(self._convert, group) if host is not None]
            if batch:
                yield request, identity, batch

    def _convert(self, record: logging.LogRecord) -> HostLogRecord | None:
        try:
            return HostLogRecord.from_logging(record)
        except Exception:
            # e.g. a message whose %-args do not match
            self.handleError(record)
            return None

    def batches(self) -> Iterator[list[HostLogRecord]]:
        for _, _, batch in self._groups(self._drain()):
            yield batch

    def flush(self) -> None:
        # The buffer is swapped out first: records logged by the forwarder
        # itself land in the fresh buffer.
        records = self._drain()
        if not records or not self.forwarder.ready:
            return

        result = ForwardResult()
        for request, identity, batch in self._groups(records):
            provider = None if identity is _UNSTAMPED else StaticIdentityProvider(identity)
            try:
                result += self.forwarder.forward(batch, request, provider)
            except Exception:
                self.handleError(records[-1])
        self.last_result = result
