# sentry_forwarder/api/v1/error_handlers.py
"""
FastAPI exception handlers that log failures the way the forwarder expects them.

How to use:
    app = FastAPI()
    register_error_handlers(app)

- HTTP exceptions (404, 403, ...) are logged at WARNING with the exception as
  the message, so the forwarded record gets the "http-exception:<code>" category
  and SENTRY_EXCEPT_CODES can silence them.
- Anything else is logged at ERROR with its traceback and answered with a
  generic 500 body.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from sentry_forwarder.core.forwarding.context import (
    StarletteRequestContext,
    reset_request_context,
    set_request_context,
)

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Payload: {"detail": exc.detail}, status exc.status_code.
    """
    logger.warning(exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    500 Internal Server Error. The exception (with traceback) goes to the logs
    and to Sentry; the client only sees a generic message.
    """
    # Runs outside the middleware stack, after RequestContextMiddleware has
    # already unbound the request context.
    token = set_request_context(StarletteRequestContext(request))
    try:
        logger.error(exc, exc_info=exc)
    finally:
        reset_request_context(token)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
