# src/sentry_forwarder/core/logging/builder.py
"""
Logging builder: create and apply the dictConfig logging configuration, with the
Sentry forwarding handler wired in when the forwarder is ready.

 - make_dict_config(settings, forwarder) builds the dictConfig mapping
 - setup_logging(settings) builds the forwarder from settings and applies it
 - shutdown_logging() flushes buffered records and pending Sentry events; call
   it from the application's shutdown hook.
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config
from typing import Any, Optional

import sentry_sdk

from sentry_forwarder.config.settings import Settings
from sentry_forwarder.core.forwarding.forwarder import LogForwarder, build_forwarder
from sentry_forwarder.utils.project import get_project_name

from .formatters import JsonFormatter, ColorFormatter
from .filters import RequestIdFilter, RedactFilter, SentryContextFilter
from .handlers import (
    SentryHandler,
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
    get_sentry_handler,
)

logger = logging.getLogger(__name__)


def make_dict_config(settings: Settings, forwarder: LogForwarder | None = None) -> dict:
    """
    Build the dictConfig mapping using the provided settings.

    The returned mapping includes:
      - formatters: "standard" (color/dev or normal) and "json"
      - filters: "request_id", "redact", "sentry_context"
      - handlers: console, (file/error_file) OR error_console depending on LOG_TO_STDOUT,
        plus "sentry" when `forwarder` is ready
      - loggers: root, uvicorn.error, uvicorn.access
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
        "sentry_context": {"()": SentryContextFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if (not settings.LOG_TO_STDOUT) and (settings.LOG_DIR):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    if forwarder is not None and forwarder.ready:
        handlers["sentry"] = get_sentry_handler(settings, forwarder)

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "uvicorn.error": {
                "level": settings.LOG_LEVEL,
                "handlers": list(handlers.keys()),
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    return config


def setup_logging(settings: Settings, forwarder: LogForwarder | None = None, engine: Any = None) -> LogForwarder:
    """
    Initialize logging using settings.

    Steps:
      1. Ensure LOG_DIR exists when writing files.
      2. Build the LogForwarder from settings unless one is given (this
         initializes sentry_sdk when SENTRY_DSN is set). `engine` is an optional
         SQLAlchemy engine reported in the "Database Driver" extra.
      3. Apply dictConfig(make_dict_config(settings, forwarder)).
      4. Register a RequestIdFilter on the root logger as a safety net.

    Returns:
        The forwarder; `forwarder.ready` tells whether records reach Sentry.
    """
    if (not settings.LOG_TO_STDOUT) and (settings.LOG_DIR):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    if forwarder is None:
        forwarder = build_forwarder(settings, engine=engine)

    logging.config.dictConfig(make_dict_config(settings, forwarder))
    logging.getLogger().addFilter(RequestIdFilter())

    if not forwarder.ready:
        logger.info("Sentry forwarding inactive: %s", forwarder.disabled_reason)

    return forwarder


def get_sentry_handlers() -> list[SentryHandler]:
    return [h for h in logging.getLogger().handlers if isinstance(h, SentryHandler)]


def shutdown_logging(timeout: Optional[float] = 5.0) -> None:
    """
    Forward whatever the Sentry handlers still buffer and wait up to `timeout`
    seconds for sentry_sdk to deliver pending events.
    """
    for handler in get_sentry_handlers():
        try:
            handler.flush()
        except Exception:
            logger.exception("Failed to flush Sentry handler cleanly")

    client = sentry_sdk.get_client()
    if client.is_active():
        sentry_sdk.flush(timeout=timeout)
