# src/sentry_forwarder/tests/test_logging/test_filters.py
import logging

from sentry_forwarder.core.forwarding.context import ConsoleRequestContext, set_identity, set_request_context
from sentry_forwarder.core.logging.filters import (
    IDENTITY_ATTR,
    REQUEST_CONTEXT_ATTR,
    RedactFilter,
    RequestIdFilter,
    SentryContextFilter,
    get_request_id,
    set_request_id,
)


def make_record():
    # name, level, pathname, lineno, msg, args, exc_info
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello %s", ("world",), None)


def test_request_id_filter_defaults_to_dash():
    rec = make_record()
    # ensure no request id set in context
    set_request_id(None)
    f = RequestIdFilter()
    assert f.filter(rec) is True
    assert hasattr(rec, "request_id")
    assert rec.request_id == "-"  # fallback sentinel


def test_request_id_filter_uses_contextvar():
    rec = make_record()
    set_request_id("abc-123")
    f = RequestIdFilter()
    f.filter(rec)
    assert rec.request_id == "abc-123"
    assert get_request_id() == "abc-123"


def test_request_id_filter_respects_record_extra():
    rec = make_record()
    rec.request_id = "explicit"
    set_request_id("context-id")
    f = RequestIdFilter()
    f.filter(rec)
    # record.request_id should keep explicit value (respect extra)
    assert rec.request_id == "explicit"


def test_redact_filter_masks_sensitive_extras():
    rec = make_record()
    rec.password = "hunter2"
    rec.dsn = "https://secret@sentry.example.com/1"
    rec.order_id = 12
    assert RedactFilter().filter(rec) is True
    assert rec.password == "***REDACTED***"
    assert rec.dsn == "***REDACTED***"
    assert rec.order_id == 12


def test_sentry_context_filter_stamps_current_context(editor_identity):
    context = ConsoleRequestContext(["worker.py"])
    set_request_context(context)
    set_identity(editor_identity)

    rec = make_record()
    assert SentryContextFilter().filter(rec) is True
    assert getattr(rec, REQUEST_CONTEXT_ATTR) is context
    assert getattr(rec, IDENTITY_ATTR) is editor_identity


def test_sentry_context_filter_keeps_existing_stamp():
    rec = make_record()
    setattr(rec, IDENTITY_ATTR, None)
    set_identity(object())
    SentryContextFilter().filter(rec)
    assert getattr(rec, IDENTITY_ATTR) is None
    assert getattr(rec, REQUEST_CONTEXT_ATTR).is_console_request()
