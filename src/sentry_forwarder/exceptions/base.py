"""
Custom exceptions for the log forwarder.
"""

from typing import Any

# canonical forwarder-level exception

class ForwarderError(Exception):
    """
    Base exception for forwarder errors.

    - message: human-friendly message (safe to log)
    - error_code: canonical short code (e.g., 'config', 'unsupported_level')
    """

    def __init__(self, message: str, *, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"{self.message} (code: {self.error_code})"
        return self.message


class ConfigError(ForwarderError):
    """
    The forwarder is not (minimally) configured.

    Raised and caught inside LogForwarder.initialize(); the forwarder is left
    disabled instead of failing the host application.
    """

    def __init__(self, message: str):
        super().__init__(message, error_code="config")


class UnsupportedLevelError(ForwarderError):
    """Raised when a log level has no Sentry severity."""

    def __init__(self, level: Any):
        super().__init__(f'An unsupported log level "{level}" given.', error_code="unsupported_level")
        self.level = level


__all__ = [
    "ForwarderError",
    "ConfigError",
    "UnsupportedLevelError",
]
