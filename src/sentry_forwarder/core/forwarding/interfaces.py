# src/sentry_forwarder/core/forwarding/interfaces.py
"""
Collaborators of the forwarder.

The forwarder never reaches for globals: everything it knows about the current
request, user and runtime comes through these protocols. Host adapters live in
`context.py`, `probe.py` and `sink.py`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from .events import EventScope
    from .levels import Severity
    from .records import HostLogRecord


@dataclass(frozen=True)
class Identity:
    """Authenticated user as seen by the host application."""

    id: Any
    email: str | None = None
    username: str | None = None
    is_admin: bool = False
    groups: Sequence[str] = field(default_factory=tuple)


@runtime_checkable
class LogSource(Protocol):
    def batches(self) -> Iterable[Sequence["HostLogRecord"]]: ...


@runtime_checkable
class RequestContext(Protocol):
    def is_console_request(self) -> bool: ...

    def is_ajax(self) -> bool: ...

    def remote_ip(self) -> str | None: ...

    def url(self) -> str: ...

    def script_path(self) -> str: ...

    def params(self) -> Sequence[str]: ...


@runtime_checkable
class IdentityProvider(Protocol):
    def get_identity(self) -> Identity | None: ...


@runtime_checkable
class EnvironmentProbe(Protocol):
    """
    Runtime facts reported with every event.

    The core accessors are expected to succeed; `database_driver` and
    `image_driver` return None when there is nothing to report and may raise.
    """

    def app_name(self) -> str | None: ...

    def edition(self) -> str | None: ...

    def version(self) -> str | None: ...

    def schema_version(self) -> str | None: ...

    def dev_mode(self) -> bool: ...

    def environment(self) -> str | None: ...

    def runtime_version(self) -> str: ...

    def framework_versions(self) -> dict[str, str | None]: ...

    def database_driver(self) -> str | None: ...

    def image_driver(self) -> str | None: ...


@runtime_checkable
class EventSink(Protocol):
    def capture_exception(self, error: BaseException, scope: "EventScope") -> None: ...

    def capture_message(self, text: str, severity: "Severity", scope: "EventScope") -> None: ...


__all__ = [
    "Identity",
    "LogSource",
    "RequestContext",
    "IdentityProvider",
    "EnvironmentProbe",
    "EventSink",
]
