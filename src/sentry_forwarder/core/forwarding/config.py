# src/sentry_forwarder/core/forwarding/config.py
"""
Forwarder configuration.

`ForwarderConfig` is the immutable snapshot the forwarder works from. It is
usually derived from the application Settings with `ForwarderConfig.from_settings`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sentry_forwarder.config.settings import Settings
from sentry_forwarder.validators.config_validators import to_lowercase_list

from .levels import FORWARDABLE_LEVELS, HostLogLevel

FORWARDABLE_LEVEL_NAMES = frozenset(level.label for level in FORWARDABLE_LEVELS)


class ForwarderConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    dsn: str | None = None
    release: str | None = None
    environment: str | None = None
    anonymous: bool = False
    levels: tuple[str, ...] = ("error", "warning")
    categories: tuple[str, ...] = ()
    except_categories: frozenset[str] = frozenset()
    except_codes: tuple[Any, ...] = (403, 404)
    except_patterns: tuple[str, ...] = ()
    options: dict[str, Any] = Field(default_factory=dict)
    http_proxy: str | None = None

    @field_validator("levels", mode="before")
    def restrict_levels(cls, v: Any) -> Any:
        """
        Only warnings and errors are ever escalated to Sentry; any other
        requested level is dropped without complaint.
        """
        v = to_lowercase_list(v)
        if not isinstance(v, list):
            return v
        kept: list[str] = []
        for level in v:
            if level in FORWARDABLE_LEVEL_NAMES and level not in kept:
                kept.append(level)
        return tuple(kept)

    @property
    def host_levels(self) -> frozenset[HostLogLevel]:
        return frozenset(HostLogLevel.from_name(level) for level in self.levels)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ForwarderConfig":
        return cls(
            enabled=settings.SENTRY_ENABLED,
            dsn=settings.SENTRY_DSN,
            release=settings.SENTRY_RELEASE,
            environment=settings.sentry_environment,
            anonymous=settings.SENTRY_ANONYMOUS,
            levels=settings.SENTRY_LEVELS,
            categories=settings.SENTRY_CATEGORIES,
            except_categories=frozenset(settings.SENTRY_EXCEPT),
            except_codes=settings.SENTRY_EXCEPT_CODES,
            except_patterns=settings.SENTRY_EXCEPT_PATTERNS,
            options=settings.SENTRY_OPTIONS,
            http_proxy=settings.HTTP_PROXY,
        )


__all__ = ["ForwarderConfig", "FORWARDABLE_LEVEL_NAMES"]
