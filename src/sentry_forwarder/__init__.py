"""Forward warning and error log records to Sentry with request, user and environment context."""

from sentry_forwarder.core.forwarding import (
    ForwarderConfig,
    ForwardResult,
    HostLogLevel,
    HostLogRecord,
    Identity,
    LogForwarder,
    SentrySink,
    Severity,
    build_forwarder,
    set_identity,
    severity_of,
)
from sentry_forwarder.core.logging import RequestContextMiddleware, SentryHandler, setup_logging, shutdown_logging

__all__ = [
    "ForwarderConfig",
    "ForwardResult",
    "HostLogLevel",
    "HostLogRecord",
    "Identity",
    "LogForwarder",
    "SentrySink",
    "Severity",
    "build_forwarder",
    "set_identity",
    "severity_of",
    "RequestContextMiddleware",
    "SentryHandler",
    "setup_logging",
    "shutdown_logging",
]
