from .base import ForwarderError, ConfigError, UnsupportedLevelError

__all__ = ["ForwarderError", "ConfigError", "UnsupportedLevelError"]
