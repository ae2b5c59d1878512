# src/sentry_forwarder/core/forwarding/probe.py
"""
Environment probe backed by the application Settings.

Reports application metadata, the Python runtime, framework versions and, on a
best-effort basis, the database server behind an optional SQLAlchemy engine and
the installed imaging library.
"""

from __future__ import annotations

import platform
from typing import Any

import pydantic
import starlette
from sqlalchemy.engine import Engine

from sentry_forwarder.config.settings import Settings
from sentry_forwarder.utils.project import get_distribution_version

DIALECT_LABELS = {
    "mysql": "MySQL",
    "mariadb": "MariaDB",
    "postgresql": "PostgreSQL",
    "sqlite": "SQLite",
    "mssql": "SQL Server",
    "oracle": "Oracle",
}

# Checked in order; the first installed distribution is reported.
IMAGE_DRIVERS = (("Pillow", "Pillow"), ("Wand", "Wand"))


def normalize_version(info: Any) -> str:
    """(16, 2) -> "16.2"; strings are stripped of anything after the first space."""
    if isinstance(info, (tuple, list)):
        return ".".join(str(part) for part in info if isinstance(part, int))
    return str(info).split(" ", 1)[0]


class SettingsEnvironmentProbe:
    """
    EnvironmentProbe reading from `Settings`.

    Args:
        settings: application settings.
        engine: optional SQLAlchemy Engine or AsyncEngine used for the database probe.
    """

    def __init__(self, settings: Settings, engine: Engine | Any = None):
        self.settings = settings
        self.engine = engine

    def app_name(self) -> str | None:
        return self.settings.APP_NAME

    def edition(self) -> str | None:
        return self.settings.APP_EDITION

    def version(self) -> str | None:
        return self.settings.APP_VERSION

    def schema_version(self) -> str | None:
        return self.settings.APP_SCHEMA_VERSION

    def dev_mode(self) -> bool:
        return self.settings.ENV == "development"

    def environment(self) -> str | None:
        return self.settings.sentry_environment

    def runtime_version(self) -> str:
        return platform.python_version()

    def framework_versions(self) -> dict[str, str | None]:
        return {
            "Starlette Version": starlette.__version__,
            "Pydantic Version": pydantic.VERSION,
        }

    def database_driver(self) -> str | None:
        """
        "<Dialect> <server version>" of the configured engine.

        The server version is only known once the engine has connected; before
        that (or without an engine) there is nothing to report.
        """
        if self.engine is None:
            return None
        # AsyncEngine wraps a regular Engine
        engine: Engine = getattr(self.engine, "sync_engine", self.engine)
        dialect = engine.dialect
        if dialect.server_version_info is None:
            return None
        label = DIALECT_LABELS.get(dialect.name, dialect.name.title())
        return f"{label} {normalize_version(dialect.server_version_info)}"

    def image_driver(self) -> str | None:
        for distribution, label in IMAGE_DRIVERS:
            version = get_distribution_version(distribution)
            if version:
                return f"{label} {version}"
        return None


__all__ = ["SettingsEnvironmentProbe", "normalize_version"]
