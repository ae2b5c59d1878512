# src/sentry_forwarder/core/forwarding/sink.py
"""
Sentry implementation of the EventSink protocol.

Every capture runs inside `sentry_sdk.new_scope()`, so the tags, user and extras
of one record are gone before the next record is sent. Transport, batching and
retries are sentry_sdk's business.
"""

from __future__ import annotations

import logging
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from .config import ForwarderConfig
from .events import EventScope
from .levels import Severity

logger = logging.getLogger(__name__)

# Options owned by the forwarder; user supplied options cannot override them.
PROTECTED_OPTIONS = frozenset(
    {"dsn", "release", "environment", "send_default_pii", "default_integrations", "integrations"}
)


def build_sentry_options(config: ForwarderConfig) -> dict[str, Any]:
    """
    Keyword arguments for sentry_sdk.init().

    sentry_sdk's own LoggingIntegration keeps recording breadcrumbs but must not
    create events: the forwarder is the only path from logging to Sentry.
    """
    options: dict[str, Any] = {
        "dsn": config.dsn or None,
        "release": config.release or None,
        "environment": config.environment or None,
        "send_default_pii": not config.anonymous,
        "default_integrations": True,
        "integrations": [LoggingIntegration(level=logging.INFO, event_level=None)],
    }
    if config.http_proxy:
        options["http_proxy"] = config.http_proxy

    extra = {key: value for key, value in config.options.items() if key not in PROTECTED_OPTIONS}
    ignored = sorted(set(config.options) & PROTECTED_OPTIONS)
    if ignored:
        logger.debug("Ignoring protected Sentry options: %s", ", ".join(ignored))

    options.update(extra)
    return options


def apply_scope(scope: "sentry_sdk.Scope", event_scope: EventScope) -> None:
    for key, value in event_scope.tags.items():
        scope.set_tag(key, value)
    if event_scope.user is not None:
        scope.set_user(event_scope.user.as_sentry_user())
    for key, value in event_scope.extras.items():
        scope.set_extra(key, value)


class SentrySink:
    """EventSink sending to Sentry through sentry_sdk."""

    def capture_exception(self, error: BaseException, scope: EventScope) -> None:
        with sentry_sdk.new_scope() as sentry_scope:
            apply_scope(sentry_scope, scope)
            sentry_sdk.capture_exception(error)

    def capture_message(self, text: str, severity: Severity, scope: EventScope) -> None:
        with sentry_sdk.new_scope() as sentry_scope:
            apply_scope(sentry_scope, scope)
            sentry_sdk.capture_message(text, level=Severity(severity).value)

    def flush(self, timeout: float | None = None) -> None:
        sentry_sdk.flush(timeout=timeout)

    @classmethod
    def from_config(cls, config: ForwarderConfig) -> "SentrySink":
        """Initialize sentry_sdk with the forwarder options and return a sink."""
        sentry_sdk.init(**build_sentry_options(config))
        return cls()


__all__ = ["PROTECTED_OPTIONS", "build_sentry_options", "apply_scope", "SentrySink"]
