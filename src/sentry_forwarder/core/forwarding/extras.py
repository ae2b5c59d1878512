# src/sentry_forwarder/core/forwarding/extras.py
"""
Context attached to every forwarded event.

`build_extras` is diagnostic code running inside a logging call, so it must not
raise: core keys are always present (None when unreadable) and optional probes
are dropped when they fail.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, TypeVar

from .events import UserContext
from .interfaces import EnvironmentProbe, Identity, RequestContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _read(accessor: Callable[[], T], default: T | None = None) -> T | None:
    """Call `accessor`, returning `default` if it raises."""
    try:
        return accessor()
    except Exception:
        logger.debug("Context accessor %r failed", accessor, exc_info=True)
        return default


def _yes_no(flag: bool | None) -> str | None:
    if flag is None:
        return None
    return "Yes" if flag else "No"


def request_type(request: RequestContext) -> str:
    if request.is_console_request():
        return "Console"
    return "Ajax" if request.is_ajax() else "Web"


def request_script(request: RequestContext) -> str:
    """Script path followed by its parameters ("manage.py queue/run --verbose")."""
    script = request.script_path()
    parts = [str(script)] if script else []
    parts.extend(str(p) for p in request.params() or ())
    return " ".join(parts)


def build_extras(request: RequestContext, probe: EnvironmentProbe) -> dict[str, str | None]:
    extras: dict[str, str | None] = {
        "App Name": _read(probe.app_name),
        "App Edition": _read(probe.edition),
        "App Schema": _read(probe.schema_version),
        "App Version": _read(probe.version),
        "Dev Mode": _yes_no(_read(probe.dev_mode)),
        "Environment": _read(probe.environment),
        "Python Version": _read(probe.runtime_version),
        "Request Type": _read(lambda: request_type(request)),
    }
    versions = _read(probe.framework_versions)
    if isinstance(versions, Mapping):
        extras.update(versions)

    if _read(request.is_console_request, default=True):
        extras["Request Script"] = _read(lambda: request_script(request))
    else:
        extras["Request Route"] = _read(request.url)

    database = _read(probe.database_driver)
    if database:
        extras["Database Driver"] = database

    image = _read(probe.image_driver)
    if image:
        extras["Image Driver"] = image

    return extras


def build_user_context(
    identity: Identity | None,
    request: RequestContext,
    anonymize: bool,
) -> UserContext | None:
    if identity is None or anonymize:
        return None

    groups = [str(group) for group in identity.groups or ()]
    return UserContext(
        id=identity.id,
        email=identity.email,
        username=identity.username,
        ip_address=_read(request.remote_ip),
        admin="Yes" if identity.is_admin else "No",
        groups=", ".join(groups) if groups else None,
    )


__all__ = ["build_extras", "build_user_context", "request_type", "request_script"]
