# src/sentry_forwarder/core/forwarding/context.py
"""
Request and identity context for forwarded events.

Both are stored in `contextvars` so they follow the logical flow of a request
across awaits, just like the request id in `core/logging/filters.py`:

- `RequestContextMiddleware` binds a `StarletteRequestContext` for every HTTP
  request with `set_request_context()`.
- Authentication code calls `set_identity()` once the user is known.
- Outside a request (CLI scripts, workers) `get_request_context()` falls back
  to a `ConsoleRequestContext` built from `sys.argv`.
"""

from __future__ import annotations

import contextvars
import sys
from typing import Sequence

from starlette.requests import Request

from .interfaces import Identity, RequestContext

_request_context_ctx: contextvars.ContextVar[RequestContext | None] = contextvars.ContextVar(
    "sentry_request_context", default=None
)
_identity_ctx: contextvars.ContextVar[Identity | None] = contextvars.ContextVar(
    "sentry_identity", default=None
)


class ConsoleRequestContext:
    """Command-line invocation: script path plus its arguments."""

    def __init__(self, argv: Sequence[str] | None = None):
        argv = list(sys.argv if argv is None else argv)
        self._script = argv[0] if argv else ""
        self._params = argv[1:]

    def is_console_request(self) -> bool:
        return True

    def is_ajax(self) -> bool:
        return False

    def remote_ip(self) -> str | None:
        return None

    def url(self) -> str:
        return ""

    def script_path(self) -> str:
        return self._script

    def params(self) -> Sequence[str]:
        return list(self._params)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConsoleRequestContext):
            return NotImplemented
        return (self._script, self._params) == (other._script, other._params)

    def __hash__(self) -> int:
        return hash((self._script, tuple(self._params)))


class StarletteRequestContext:
    """Web request backed by a Starlette/FastAPI `Request`."""

    def __init__(self, request: Request):
        self._request = request

    def is_console_request(self) -> bool:
        return False

    def is_ajax(self) -> bool:
        return self._request.headers.get("X-Requested-With", "").lower() == "xmlhttprequest"

    def remote_ip(self) -> str | None:
        client = self._request.client
        return client.host if client else None

    def url(self) -> str:
        url = self._request.url
        return f"{url.path}?{url.query}" if url.query else url.path

    def script_path(self) -> str:
        return ""

    def params(self) -> Sequence[str]:
        return []


def set_request_context(context: RequestContext | None):
    """
    Bind the request context for the current execution context.

    Returns:
        token: contextvar.Token which can be passed to reset_request_context(token)
    """
    return _request_context_ctx.set(context)


def reset_request_context(token) -> None:
    _request_context_ctx.reset(token)


def get_request_context() -> RequestContext:
    """The bound request context, or a console context for the running process."""
    return _request_context_ctx.get() or ConsoleRequestContext()


def set_identity(identity: Identity | None):
    return _identity_ctx.set(identity)


def reset_identity(token) -> None:
    _identity_ctx.reset(token)


def get_identity() -> Identity | None:
    return _identity_ctx.get()


class ContextIdentityProvider:
    """IdentityProvider reading the identity bound with set_identity()."""

    def get_identity(self) -> Identity | None:
        return get_identity()


class StaticIdentityProvider:
    """IdentityProvider returning a fixed identity (captured when a record was emitted)."""

    def __init__(self, identity: Identity | None):
        self._identity = identity

    def get_identity(self) -> Identity | None:
        return self._identity


__all__ = [
    "ConsoleRequestContext",
    "StarletteRequestContext",
    "ContextIdentityProvider",
    "StaticIdentityProvider",
    "set_request_context",
    "reset_request_context",
    "get_request_context",
    "set_identity",
    "reset_identity",
    "get_identity",
]
