# src/sentry_forwarder/core/forwarding/levels.py
"""
Host log levels and their translation to Sentry severities.

The host levels keep the bit values of the framework logger the forwarder was
designed for (error=0x01 ... profile_end=0x60); stdlib `logging` records are
mapped onto them with `HostLogLevel.from_logging`.
"""

import enum
import logging
from typing import Any

from sentry_forwarder.exceptions import UnsupportedLevelError


class HostLogLevel(enum.IntEnum):
    ERROR = 0x01
    WARNING = 0x02
    INFO = 0x04
    TRACE = 0x08
    PROFILE = 0x40
    PROFILE_BEGIN = 0x50
    PROFILE_END = 0x60

    @property
    def label(self) -> str:
        """Lowercase name used in configuration ("error", "profile_begin", ...)."""
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> "HostLogLevel":
        """
        Parse a configuration level name. Dashes are accepted for underscores.

        Raises:
            UnsupportedLevelError: for unknown names.
        """
        try:
            return cls[str(name).strip().upper().replace("-", "_")]
        except KeyError:
            raise UnsupportedLevelError(name) from None

    @classmethod
    def from_logging(cls, record: logging.LogRecord) -> "HostLogLevel":
        """
        Map a stdlib LogRecord onto a host level.

        CRITICAL folds into ERROR. Records below INFO are TRACE unless they were
        logged with extra={"profile": "begin" | "end" | True}.
        """
        levelno = record.levelno
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO

        profile = getattr(record, "profile", None)
        if profile == "begin":
            return cls.PROFILE_BEGIN
        if profile == "end":
            return cls.PROFILE_END
        if profile:
            return cls.PROFILE
        return cls.TRACE


class Severity(str, enum.Enum):
    """Sentry event levels; the values are the strings sentry_sdk expects."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# Levels that may ever leave the process. Anything else is dropped at configuration time.
FORWARDABLE_LEVELS = frozenset({HostLogLevel.ERROR, HostLogLevel.WARNING})

_SEVERITIES = {
    HostLogLevel.PROFILE_END: Severity.DEBUG,
    HostLogLevel.PROFILE_BEGIN: Severity.DEBUG,
    HostLogLevel.PROFILE: Severity.DEBUG,
    HostLogLevel.TRACE: Severity.DEBUG,
    HostLogLevel.INFO: Severity.INFO,
    HostLogLevel.WARNING: Severity.WARNING,
    HostLogLevel.ERROR: Severity.ERROR,
}


def severity_of(level: Any) -> Severity:
    """
    Translate a host log level into a Sentry severity.

    Accepts HostLogLevel members or their raw integer values.

    Raises:
        UnsupportedLevelError: for any value outside the known host levels.
    """
    if isinstance(level, bool) or not isinstance(level, int):
        raise UnsupportedLevelError(level)
    try:
        return _SEVERITIES[HostLogLevel(level)]
    except ValueError:
        raise UnsupportedLevelError(level) from None


__all__ = ["HostLogLevel", "Severity", "FORWARDABLE_LEVELS", "severity_of"]
