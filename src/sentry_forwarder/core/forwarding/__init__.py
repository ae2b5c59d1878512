# src/sentry_forwarder/core/forwarding/
# ├─ __init__.py            # public API
# ├─ levels.py              # HostLogLevel, Severity, severity_of()
# ├─ records.py             # HostLogRecord (+ conversion from logging.LogRecord)
# ├─ config.py              # ForwarderConfig (pydantic, frozen)
# ├─ filtering.py           # category / status-code / pattern suppression rules
# ├─ interfaces.py          # collaborator protocols (RequestContext, EventSink, ...)
# ├─ context.py             # contextvar-bound request context and identity
# ├─ probe.py               # SettingsEnvironmentProbe
# ├─ extras.py              # build_extras(), build_user_context()
# ├─ events.py              # EventScope, EnrichedEvent, UserContext
# ├─ sink.py                # SentrySink (sentry_sdk)
# └─ forwarder.py           # LogForwarder: filter-and-dispatch loop

from .config import ForwarderConfig
from .context import (
    ConsoleRequestContext,
    ContextIdentityProvider,
    StarletteRequestContext,
    get_request_context,
    set_identity,
    set_request_context,
)
from .events import EnrichedEvent, EventScope, UserContext
from .extras import build_extras, build_user_context
from .forwarder import ForwardResult, LogForwarder, build_forwarder
from .interfaces import EnvironmentProbe, EventSink, Identity, IdentityProvider, LogSource, RequestContext
from .levels import HostLogLevel, Severity, severity_of
from .probe import SettingsEnvironmentProbe
from .records import HostLogRecord, render_message
from .sink import SentrySink

__all__ = [
    "ForwarderConfig",
    "ConsoleRequestContext",
    "ContextIdentityProvider",
    "StarletteRequestContext",
    "get_request_context",
    "set_identity",
    "set_request_context",
    "EnrichedEvent",
    "EventScope",
    "UserContext",
    "build_extras",
    "build_user_context",
    "ForwardResult",
    "LogForwarder",
    "build_forwarder",
    "EnvironmentProbe",
    "EventSink",
    "Identity",
    "IdentityProvider",
    "LogSource",
    "RequestContext",
    "HostLogLevel",
    "Severity",
    "severity_of",
    "SettingsEnvironmentProbe",
    "HostLogRecord",
    "render_message",
    "SentrySink",
]
