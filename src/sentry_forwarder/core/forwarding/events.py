# src/sentry_forwarder/core/forwarding/events.py
"""
Outbound event model.

The key names produced here (tags "app.name"/"category", the user keys and the
extras labels) are what dashboards downstream filter on; keep them stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .levels import Severity

APP_NAME_TAG = "app.name"
CATEGORY_TAG = "category"


@dataclass(frozen=True)
class UserContext:
    id: Any
    email: str | None
    username: str | None
    ip_address: str | None
    admin: str
    groups: str | None

    def as_sentry_user(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "id": self.id,
            "ip_address": self.ip_address,
            "username": self.username,
            "Admin": self.admin,
            "Groups": self.groups,
        }


@dataclass
class EventScope:
    """Per-event tags, user and extras. A new scope is built for every record."""

    tags: dict[str, str] = field(default_factory=dict)
    user: UserContext | None = None
    extras: dict[str, str | None] = field(default_factory=dict)


@dataclass
class EnrichedEvent:
    body: str | BaseException
    scope: EventScope
    # None for exceptions: the level is implied by the exception itself
    severity: Severity | None = None

    @property
    def is_exception(self) -> bool:
        return isinstance(self.body, BaseException)

    @property
    def tags(self) -> dict[str, str]:
        return self.scope.tags

    @property
    def user(self) -> UserContext | None:
        return self.scope.user

    @property
    def extras(self) -> dict[str, str | None]:
        return self.scope.extras


__all__ = ["APP_NAME_TAG", "CATEGORY_TAG", "UserContext", "EventScope", "EnrichedEvent"]
