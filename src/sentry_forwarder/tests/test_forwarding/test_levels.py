# src/sentry_forwarder/tests/test_forwarding/test_levels.py
import logging

import pytest

from sentry_forwarder.core.forwarding.levels import HostLogLevel, Severity, severity_of
from sentry_forwarder.exceptions import UnsupportedLevelError


@pytest.mark.parametrize(
    "level, expected",
    [
        (HostLogLevel.PROFILE_END, Severity.DEBUG),
        (HostLogLevel.PROFILE_BEGIN, Severity.DEBUG),
        (HostLogLevel.PROFILE, Severity.DEBUG),
        (HostLogLevel.TRACE, Severity.DEBUG),
        (HostLogLevel.INFO, Severity.INFO),
        (HostLogLevel.WARNING, Severity.WARNING),
        (HostLogLevel.ERROR, Severity.ERROR),
    ],
)
def test_severity_of_known_levels(level, expected):
    assert severity_of(level) is expected


def test_severity_of_accepts_raw_values():
    assert severity_of(0x01) is Severity.ERROR
    assert severity_of(0x60) is Severity.DEBUG


@pytest.mark.parametrize("level", [0, 3, 0x10, 0x80, -1, "error", None, True, 1.0])
def test_severity_of_unknown_level_raises(level):
    with pytest.raises(UnsupportedLevelError) as excinfo:
        severity_of(level)
    assert excinfo.value.level == level
    assert f'An unsupported log level "{level}" given.' == excinfo.value.message


def test_severity_values_are_sentry_levels():
    assert [s.value for s in Severity] == ["debug", "info", "warning", "error"]


def test_from_name():
    assert HostLogLevel.from_name("Warning") is HostLogLevel.WARNING
    assert HostLogLevel.from_name("profile-begin") is HostLogLevel.PROFILE_BEGIN
    with pytest.raises(UnsupportedLevelError):
        HostLogLevel.from_name("fatal")


def _record(levelno, **extra):
    record = logging.LogRecord("app", levelno, __file__, 1, "msg", None, None)
    record.__dict__.update(extra)
    return record


@pytest.mark.parametrize(
    "levelno, extra, expected",
    [
        (logging.CRITICAL, {}, HostLogLevel.ERROR),
        (logging.ERROR, {}, HostLogLevel.ERROR),
        (logging.WARNING, {}, HostLogLevel.WARNING),
        (logging.INFO, {}, HostLogLevel.INFO),
        (logging.DEBUG, {}, HostLogLevel.TRACE),
        (logging.DEBUG, {"profile": "begin"}, HostLogLevel.PROFILE_BEGIN),
        (logging.DEBUG, {"profile": "end"}, HostLogLevel.PROFILE_END),
        (logging.DEBUG, {"profile": True}, HostLogLevel.PROFILE),
    ],
)
def test_from_logging(levelno, extra, expected):
    assert HostLogLevel.from_logging(_record(levelno, **extra)) is expected
