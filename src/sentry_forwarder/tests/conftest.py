"""
Core pytest configuration for the entire test suite.

Domain-specific fixtures live in tests/test_fixtures/ and are imported below so
every test module can use them without importing them itself:
- tests/test_fixtures/forwarding_fixtures.py (RecordingSink, FakeRequest, FakeProbe, ...)

No test talks to a real Sentry server: forwarders are built around an
in-memory sink, and settings never carry a DSN unless a test sets one.
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import logging
import sys
from pathlib import Path

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Keep this block above the project imports so third-party loggers are quiet
# during collection.
NOISY_LOGGERS = (
    "sentry_sdk",
    "sentry_sdk.errors",
    "httpx",
    "urllib3",
    "asyncio",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# -------------------------------
# PATH PATCHING
# -------------------------------
# Ensure 'src' and this folder are on sys.path when running without an install.
SRC = Path(__file__).resolve().parents[2]
TESTS = Path(__file__).resolve().parent
for _path in (SRC, TESTS):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from pytest import FixtureRequest

from sentry_forwarder.core.forwarding.context import set_identity, set_request_context
from sentry_forwarder.core.logging.builder import setup_logging
from sentry_forwarder.core.logging.filters import set_request_id

from test_fixtures.forwarding_fixtures import (  # noqa: F401 - re-exported fixtures
    console_request,
    editor_identity,
    fake_probe,
    make_forwarder,
    build_settings,
    make_settings,
    recording_sink,
    web_request,
)

logger = logging.getLogger(__name__)


# -------------------------------
# Logging: install application logging early
# -------------------------------
@pytest.fixture(scope="session", autouse=True)
def configure_logging(request: FixtureRequest):
    """
    Install the application's dictConfig logging for the whole session.

    The settings carry no DSN, so the forwarder is inactive and no Sentry
    handler is attached to the root logger; tests that need one build their own.
    """
    forwarder = setup_logging(build_settings())
    assert not forwarder.ready

    yield


@pytest.fixture(autouse=True)
def clean_context():
    """Each test starts without request id, request context or identity."""
    tokens = (set_request_id(None), set_request_context(None), set_identity(None))
    yield
    for token in reversed(tokens):
        token.var.reset(token)


@pytest.fixture()
def restore_logging():
    """Re-install the session logging configuration after a test that replaced it."""
    yield
    setup_logging(build_settings())
