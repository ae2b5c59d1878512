# src/sentry_forwarder/core/logging/middleware.py
"""
Request context middleware for FastAPI / Starlette.

For every HTTP request this middleware:
  1. takes the incoming `X-Request-ID` header, or generates a UUID4;
  2. stores it with `set_request_id()` (read by RequestIdFilter);
  3. binds a StarletteRequestContext with `set_request_context()`, so records
     logged during the request are forwarded to Sentry with its URL, client IP
     and request type;
  4. echoes the id in the `X-Request-ID` response header;
  5. resets both contextvars once the request is done.

Register it early, before routers that may log:
    app.add_middleware(RequestContextMiddleware)
"""

import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from sentry_forwarder.core.forwarding.context import (
    StarletteRequestContext,
    reset_request_context,
    set_request_context,
)
from .filters import set_request_id, reset_request_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        id_token = set_request_id(rid)
        context_token = set_request_context(StarletteRequestContext(request))

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            reset_request_context(context_token)
            reset_request_id(id_token)
