# src/sentry_forwarder/core/logging/filters.py
"""
Logging filters

Filters run in the producing context (the request's task or thread), which is
the only place where contextvars still hold the request's values. They never
drop records; their job is to annotate them.

- RequestIdFilter: guarantees `record.request_id` (the id set by the
  middleware, an explicit `extra={"request_id": ...}`, or "-").
- RedactFilter: masks sensitive attributes passed through `extra`.
- SentryContextFilter: stamps the current request context and identity on the
  record, so a buffered record is forwarded with the context it was logged in,
  even when the buffer is flushed later from another request.

Registered in dictConfig (see builder.py) as:
     "filters": {
         "request_id": {"()": RequestIdFilter},
         "redact": {"()": RedactFilter},
         "sentry_context": {"()": SentryContextFilter},
     }
"""

import logging
from logging import LogRecord
import contextvars

from sentry_forwarder.core.forwarding.context import get_identity, get_request_context

# contextvar for request id (used by RequestIdFilter and the HTTP middleware).
# Default is None to indicate "no request id set".
_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

# Attribute names stamped by SentryContextFilter.
REQUEST_CONTEXT_ATTR = "sentry_request_context"
IDENTITY_ATTR = "sentry_identity"


def set_request_id(request_id: str | None):
    """
    Set the request id in the current context and return the token to allow reset.

    Returns:
        token: contextvar.Token which can be passed to reset_request_id(token)
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token):
    """
    Reset the contextvar to the previously saved token returned by set_request_id().
    """
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    """
    Retrieve the current context's request id, or None if no id has been set.
    """
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Logging filter that guarantees every LogRecord has a `request_id` attribute.

    An id passed explicitly through `extra` wins over the contextvar; "-" is the
    fallback so format strings referencing %(request_id)s never KeyError.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


# Redact sensitive information
class RedactFilter(logging.Filter):
    SENSITIVE = {"password","secret","token","access_token","refresh_token","ssn","authorization","dsn"}
    def filter(self, record: LogRecord) -> bool:
        # mask attributes on record that match SENSITIVE
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = "***REDACTED***"
        return True


class SentryContextFilter(logging.Filter):
    """
    Stamp the request context and identity of the producing context on the record.

    Values already present on the record are kept.
    """

    def filter(self, record: LogRecord) -> bool:
        if not hasattr(record, REQUEST_CONTEXT_ATTR):
            setattr(record, REQUEST_CONTEXT_ATTR, get_request_context())
        if not hasattr(record, IDENTITY_ATTR):
            setattr(record, IDENTITY_ATTR, get_identity())
        return True
