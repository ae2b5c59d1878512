# src/sentry_forwarder/core/logging/
# ├─ __init__.py            # public API: setup_logging, set_request_id, RequestContextMiddleware
# ├─ builder.py             # make_dict_config(settings) + setup_logging(settings) + shutdown_logging()
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # RequestIdFilter, RedactFilter, SentryContextFilter (+ contextvar helpers)
# ├─ handlers.py            # handler config factories + SentryHandler
# └─ middleware.py          # FastAPI/Starlette middleware binding request id and request context


from .builder import setup_logging, make_dict_config, shutdown_logging
from .filters import set_request_id, get_request_id, RequestIdFilter, SentryContextFilter
from .handlers import SentryHandler
from .middleware import RequestContextMiddleware

__all__ = [
    "setup_logging",
    "make_dict_config",
    "shutdown_logging",
    "set_request_id",
    "get_request_id",
    "RequestIdFilter",
    "SentryContextFilter",
    "SentryHandler",
    "RequestContextMiddleware",
]
