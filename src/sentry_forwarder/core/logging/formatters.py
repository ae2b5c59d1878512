# src/sentry_forwarder/core/logging/formatters.py

"""
Formatters for the local log output (the Sentry handler does not format).

  - JsonFormatter: structured JSON lines for log collectors. Includes service,
    env, version and request_id, plus any `extra` fields, stringifying values
    that are not JSON-serializable.

  - ColorFormatter: ANSI-colored, aligned lines for development consoles.

The builder (builder.py) picks one per handler from settings.LOG_FORMAT.
"""

import json
import logging
from typing import Any
from logging import LogRecord
from sentry_forwarder.utils.project import get_project_version
from .filters import IDENTITY_ATTR, REQUEST_CONTEXT_ATTR

PROJECT_VERSION = get_project_version()

# Record attributes that never end up in the JSON payload: logging internals and
# the objects stamped for the Sentry handler.
_SKIPPED_ATTRS = frozenset({"args", "msg", "levelname", "name", REQUEST_CONTEXT_ATTR, IDENTITY_ATTR})


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Construction:
      - env: environment name (e.g., "development" | "production"); optional.
      - service: logical service name to include in logs.
      - datefmt: optional date format passed to logging.Formatter (used by formatTime).

    format() never raises on odd extras: values that json cannot encode are
    replaced by their str().
    """

    def __init__(self, *, env: str | None = None, service: str = "sentry-forwarder", datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "request_id": getattr(record, "request_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": PROJECT_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        extras = {
            k: v
            for k, v in record.__dict__.items()
            if k not in log_record and not k.startswith("_") and k not in _SKIPPED_ATTRS
        }

        for k, v in extras.items():
            try:
                json.dumps(v)
                log_record[k] = v
            except (TypeError, ValueError):
                log_record[k] = str(v)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """
    Development-friendly colored formatter:

        TIMESTAMP | LEVEL | LOGGER_NAME | REQUEST_ID | MESSAGE

    Only the level is colored. ANSI codes may show up raw on consoles without
    ANSI support.
    """

    COLOR_CODES = {
        "DEBUG": "\033[1;36;47m",   # bold cyan on white
        "INFO": "\033[32m",         # green
        "WARNING": "\033[33m",      # yellow
        "ERROR": "\033[31m",        # red
        "CRITICAL": "\033[1;41m",   # bold on red background
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        reset = self.COLOR_CODES["RESET"]
        timestamp = self.formatTime(record, self.datefmt)

        base = (
            f"{timestamp} | {color}{record.levelname:<10}{reset} | "
            f"{record.name:<30} | "
            f"{getattr(record, 'request_id', '-'):<10} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            base = base + "\n" + self.formatException(record.exc_info)

        return base
