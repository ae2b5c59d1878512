# src/sentry_forwarder/core/forwarding/forwarder.py
"""
LogForwarder: filter, enrich and dispatch host log records to an EventSink.

Life cycle:
    forwarder = LogForwarder.initialize(ForwarderConfig.from_settings(settings))
    forwarder.forward(records)            # any number of batches
    forwarder.drain(source)               # or pull batches from a LogSource

The forwarder is diagnostic infrastructure: nothing in here may crash the host
application. Misconfiguration leaves it disabled, per-record failures are
logged and reported in the ForwardResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from sentry_forwarder.config.settings import Settings, get_settings
from sentry_forwarder.exceptions import ConfigError

from .config import ForwarderConfig
from .context import ContextIdentityProvider, get_request_context
from .events import APP_NAME_TAG, CATEGORY_TAG, EnrichedEvent, EventScope
from .extras import build_extras, build_user_context
from .filtering import build_except_categories, filter_records, matching_pattern
from .interfaces import EnvironmentProbe, EventSink, IdentityProvider, LogSource, RequestContext
from .levels import HostLogLevel, severity_of
from .probe import SettingsEnvironmentProbe
from .records import HostLogRecord, render_message
from .sink import SentrySink

logger = logging.getLogger(__name__)


@dataclass
class ForwardResult:
    dispatched: int = 0
    suppressed: int = 0
    failed: list[Exception] = field(default_factory=list)

    def __iadd__(self, other: "ForwardResult") -> "ForwardResult":
        self.dispatched += other.dispatched
        self.suppressed += other.suppressed
        self.failed.extend(other.failed)
        return self


class LogForwarder:
    """Use LogForwarder.initialize() rather than the constructor."""

    def __init__(
        self,
        config: ForwarderConfig,
        *,
        sink: EventSink | None = None,
        identity_provider: IdentityProvider | None = None,
        environment_probe: EnvironmentProbe | None = None,
        disabled_reason: str | None = None,
    ):
        self.config = config
        self.sink = sink
        self.identity_provider = identity_provider or ContextIdentityProvider()
        self.environment_probe = environment_probe
        self.disabled_reason = disabled_reason
        self.levels: frozenset[HostLogLevel] = config.host_levels
        self.except_categories = build_except_categories(config.except_categories, config.except_codes)

    @property
    def ready(self) -> bool:
        return self.disabled_reason is None

    @staticmethod
    def check_config(config: ForwarderConfig) -> None:
        """
        Raises:
            ConfigError: when forwarding is disabled or not minimally configured.
        """
        if not config.enabled:
            raise ConfigError("Forwarding is disabled")
        if not config.dsn:
            raise ConfigError("No Sentry DSN configured")
        if not config.levels:
            raise ConfigError("No forwardable log level configured")

    @classmethod
    def initialize(
        cls,
        config: ForwarderConfig,
        sink: EventSink | None = None,
        *,
        identity_provider: IdentityProvider | None = None,
        environment_probe: EnvironmentProbe | None = None,
    ) -> "LogForwarder":
        """
        Build a forwarder for `config`.

        Never raises for configuration problems: the returned forwarder is then
        disabled (`ready` is False, `disabled_reason` says why) and forward() is a
        no-op. When no sink is given, sentry_sdk is initialized from the config.
        """
        try:
            cls.check_config(config)
        except ConfigError as exc:
            logger.debug("Sentry forwarding disabled: %s", exc.message)
            return cls(
                config,
                identity_provider=identity_provider,
                environment_probe=environment_probe,
                disabled_reason=exc.message,
            )

        if environment_probe is None:
            environment_probe = SettingsEnvironmentProbe(get_settings())

        if sink is None:
            sink = SentrySink.from_config(config)

        return cls(
            config,
            sink=sink,
            identity_provider=identity_provider,
            environment_probe=environment_probe,
        )

    # ------------------------------------------------------------------
    # Event building
    # ------------------------------------------------------------------
    def build_event(
        self,
        record: HostLogRecord,
        request: RequestContext,
        identity_provider: IdentityProvider | None = None,
    ) -> EnrichedEvent:
        """
        Enrich one record. Raises UnsupportedLevelError for message records whose
        level has no severity.
        """
        scope = EventScope()
        scope.tags[APP_NAME_TAG] = self._app_name() or ""
        if record.category:
            scope.tags[CATEGORY_TAG] = record.category

        identity = self._identity(identity_provider or self.identity_provider)
        scope.user = build_user_context(identity, request, self.config.anonymous)
        scope.extras = build_extras(request, self.environment_probe)

        if record.is_exception:
            return EnrichedEvent(body=record.payload, scope=scope)
        return EnrichedEvent(
            body=render_message(record.payload),
            scope=scope,
            severity=severity_of(record.level),
        )

    def dispatch(self, event: EnrichedEvent) -> None:
        if event.is_exception:
            self.sink.capture_exception(event.body, event.scope)
        else:
            self.sink.capture_message(event.body, event.severity, event.scope)

    # ------------------------------------------------------------------
    # Filter and dispatch loop
    # ------------------------------------------------------------------
    def forward(
        self,
        records: Iterable[HostLogRecord],
        request: RequestContext | None = None,
        identity_provider: IdentityProvider | None = None,
    ) -> ForwardResult:
        """
        Forward a batch of records, in order.

        Args:
            records: the batch.
            request: request context of the batch; defaults to the context bound
                for the current request (or the running console command).
            identity_provider: overrides the forwarder's identity provider for
                this batch.
        """
        result = ForwardResult()
        if not self.ready:
            return result

        records = list(records)
        request = request or get_request_context()
        eligible = list(
            filter_records(records, self.levels, self.config.categories, self.except_categories)
        )
        result.suppressed = len(records) - len(eligible)

        for record in eligible:
            try:
                # rendering runs arbitrary __repr__ code
                pattern = matching_pattern(record.message, self.config.except_patterns)
                if pattern is not None:
                    logger.debug("Record suppressed by pattern %r", pattern)
                    result.suppressed += 1
                    continue
                self.dispatch(self.build_event(record, request, identity_provider))
            except Exception as exc:
                logger.warning("Could not forward record (category %r) to Sentry: %s", record.category, exc)
                result.failed.append(exc)
                continue
            result.dispatched += 1

        return result

    def drain(self, source: LogSource, request: RequestContext | None = None) -> ForwardResult:
        """Forward every batch produced by `source`."""
        result = ForwardResult()
        for batch in source.batches():
            result += self.forward(batch, request)
        return result

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _app_name(self) -> str | None:
        try:
            return self.environment_probe.app_name()
        except Exception:
            logger.debug("App name probe failed", exc_info=True)
            return None

    @staticmethod
    def _identity(provider: IdentityProvider):
        try:
            return provider.get_identity()
        except Exception:
            logger.debug("Identity lookup failed", exc_info=True)
            return None


def build_forwarder(settings: Settings, sink: EventSink | None = None, engine=None) -> LogForwarder:
    """LogForwarder for the application settings (probe bound to `engine` when given)."""
    return LogForwarder.initialize(
        ForwarderConfig.from_settings(settings),
        sink,
        environment_probe=SettingsEnvironmentProbe(settings, engine=engine),
    )


__all__ = ["ForwardResult", "LogForwarder", "build_forwarder"]
