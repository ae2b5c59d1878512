# src/sentry_forwarder/tests/test_forwarding/test_forwarder.py
import logging

import pytest

from test_fixtures.forwarding_fixtures import FakeProbe, RecordingSink

from sentry_forwarder.core.forwarding.config import ForwarderConfig
from sentry_forwarder.core.forwarding.context import (
    ConsoleRequestContext,
    StaticIdentityProvider,
    set_identity,
    set_request_context,
)
from sentry_forwarder.core.forwarding.forwarder import ForwardResult, LogForwarder, build_forwarder
from sentry_forwarder.core.forwarding.levels import HostLogLevel, Severity
from sentry_forwarder.core.forwarding.records import HostLogRecord
from sentry_forwarder.exceptions import UnsupportedLevelError


def rec(payload, level=HostLogLevel.ERROR, category=""):
    return HostLogRecord(payload=payload, level=level, category=category)


class ListSource:
    def __init__(self, *batches):
        self._batches = batches

    def batches(self):
        return iter(self._batches)


# ------------------------------------------------------------------------------------------------
# Initialization
# ------------------------------------------------------------------------------------------------


@pytest.mark.parametrize(
    "config, reason",
    [
        (ForwarderConfig(enabled=False, dsn="https://k@sentry.example.com/1"), "Forwarding is disabled"),
        (ForwarderConfig(dsn=None), "No Sentry DSN configured"),
        (ForwarderConfig(dsn=""), "No Sentry DSN configured"),
        (ForwarderConfig(dsn="https://k@sentry.example.com/1", levels=["info"]), "No forwardable log level configured"),
    ],
)
def test_initialize_leaves_forwarder_disabled(config, reason, recording_sink, fake_probe):
    forwarder = LogForwarder.initialize(config, recording_sink, environment_probe=fake_probe)
    assert not forwarder.ready
    assert forwarder.disabled_reason == reason

    result = forwarder.forward([rec("DB timeout")])
    assert result == ForwardResult()
    assert recording_sink.events == []


def test_initialize_ready(make_forwarder):
    forwarder = make_forwarder()
    assert forwarder.ready
    assert forwarder.disabled_reason is None


def test_build_forwarder_without_dsn(make_settings, recording_sink):
    forwarder = build_forwarder(make_settings(), recording_sink)
    assert not forwarder.ready


# ------------------------------------------------------------------------------------------------
# Forwarding
# ------------------------------------------------------------------------------------------------


def test_error_message_is_dispatched_without_category_tag(make_forwarder, recording_sink, web_request):
    result = make_forwarder().forward([rec("DB timeout")], web_request)

    assert result.dispatched == 1
    [event] = recording_sink.events
    assert event.kind == "message"
    assert event.body == "DB timeout"
    assert event.severity is Severity.ERROR
    assert event.scope.tags == {"app.name": "Acme Site"}


def test_category_tag(make_forwarder, recording_sink, web_request):
    make_forwarder().forward([rec("slow", HostLogLevel.WARNING, "app.orders")], web_request)
    [event] = recording_sink.events
    assert event.severity is Severity.WARNING
    assert event.scope.tags["category"] == "app.orders"


def test_pattern_suppression(make_forwarder, recording_sink, web_request):
    forwarder = make_forwarder(except_patterns=["^Deprecated:"])
    result = forwarder.forward([rec("Deprecated: foo()", HostLogLevel.WARNING)], web_request)

    assert recording_sink.events == []
    assert result.dispatched == 0
    assert result.suppressed == 1


def test_info_and_trace_are_never_dispatched(make_forwarder, recording_sink, web_request):
    forwarder = make_forwarder(levels=["error", "warning", "info", "trace"])
    result = forwarder.forward(
        [rec("hello", HostLogLevel.INFO), rec("step", HostLogLevel.TRACE), rec("x", HostLogLevel.PROFILE_END)],
        web_request,
    )
    assert recording_sink.events == []
    assert result.suppressed == 3


def test_level_allow_list(make_forwarder, recording_sink, web_request):
    make_forwarder(levels=["error"]).forward([rec("w", HostLogLevel.WARNING), rec("e")], web_request)
    assert [e.body for e in recording_sink.events] == ["e"]


def test_exception_goes_to_capture_exception(make_forwarder, recording_sink, web_request):
    error = ConnectionError("db down")
    make_forwarder().forward([rec(error)], web_request)

    [event] = recording_sink.events
    assert event.kind == "exception"
    assert event.body is error
    assert event.severity is None


def test_except_codes_suppress_http_exceptions(make_forwarder, recording_sink, web_request):
    forwarder = make_forwarder(except_codes=[404, 999])
    forwarder.forward(
        [
            rec("missing", HostLogLevel.WARNING, "http-exception:404"),
            rec("teapot", HostLogLevel.WARNING, "http-exception:418"),
        ],
        web_request,
    )
    assert [e.body for e in recording_sink.events] == ["teapot"]


def test_internal_categories_are_never_forwarded(make_forwarder, recording_sink, web_request):
    result = make_forwarder().forward(
        [
            rec("missing translation", HostLogLevel.WARNING, "i18n.message_source:site"),
            rec("transport failed", HostLogLevel.ERROR, "sentry_sdk.errors"),
        ],
        web_request,
    )
    assert recording_sink.events == []
    assert result.suppressed == 2


def test_order_is_preserved(make_forwarder, recording_sink, web_request):
    make_forwarder().forward([rec("one"), rec("two", HostLogLevel.WARNING), rec("three")], web_request)
    assert [e.body for e in recording_sink.events] == ["one", "two", "three"]


def test_each_event_gets_its_own_scope(make_forwarder, recording_sink, web_request):
    make_forwarder().forward([rec("a", category="first"), rec("b")], web_request)
    first, second = recording_sink.events
    assert first.scope is not second.scope
    assert "category" not in second.scope.tags
    assert first.scope.extras is not second.scope.extras


def test_user_context_attached(make_forwarder, recording_sink, web_request, editor_identity):
    make_forwarder(identity=editor_identity).forward([rec("boom")], web_request)
    user = recording_sink.events[0].scope.user
    assert user.as_sentry_user()["Admin"] == "Yes"
    assert user.groups == "Editors"


def test_anonymous_forwarder_sends_no_user(make_forwarder, recording_sink, web_request, editor_identity):
    make_forwarder(identity=editor_identity, anonymous=True).forward([rec("boom")], web_request)
    assert recording_sink.events[0].scope.user is None


def test_identity_provider_override(make_forwarder, recording_sink, web_request, editor_identity):
    make_forwarder().forward([rec("boom")], web_request, StaticIdentityProvider(editor_identity))
    assert recording_sink.events[0].scope.user.id == 7


def test_unsupported_level_does_not_abort_the_batch(make_forwarder, recording_sink, web_request, caplog):
    forwarder = make_forwarder()
    # the allow-list is keyed by int value, so an unknown level can get past it
    forwarder.levels = frozenset(forwarder.levels | {0x101})
    bogus = rec("odd", level=0x101)

    with caplog.at_level(logging.WARNING, logger="sentry_forwarder.core.forwarding.forwarder"):
        result = forwarder.forward([bogus, rec("after")], web_request)

    assert result.dispatched == 1
    assert len(result.failed) == 1
    assert isinstance(result.failed[0], UnsupportedLevelError)
    assert [e.body for e in recording_sink.events] == ["after"]
    assert "Could not forward record" in caplog.text


def test_sink_failure_is_contained(fake_probe, web_request):
    class BrokenSink(RecordingSink):
        def capture_message(self, text, severity, scope):
            if text == "bad":
                raise RuntimeError("transport down")
            super().capture_message(text, severity, scope)

    sink = BrokenSink()
    forwarder = LogForwarder.initialize(
        ForwarderConfig(dsn="https://k@sentry.example.com/1"), sink, environment_probe=fake_probe
    )
    result = forwarder.forward([rec("bad"), rec("good")], web_request)
    assert result.dispatched == 1
    assert [str(e) for e in result.failed] == ["transport down"]
    assert [e.body for e in sink.events] == ["good"]


def test_failing_app_name_probe_sends_empty_tag(recording_sink, web_request):
    forwarder = LogForwarder.initialize(
        ForwarderConfig(dsn="https://k@sentry.example.com/1"),
        recording_sink,
        environment_probe=FakeProbe(app_name=RuntimeError("nope")),
    )
    forwarder.forward([rec("x")], web_request)
    event = recording_sink.events[0]
    assert event.scope.tags["app.name"] == ""
    assert event.scope.extras["App Name"] is None


def test_bound_request_context_and_identity_are_used(recording_sink, editor_identity, fake_probe):
    forwarder = LogForwarder.initialize(
        ForwarderConfig(dsn="https://k@sentry.example.com/1"), recording_sink, environment_probe=fake_probe
    )
    set_request_context(ConsoleRequestContext(["bin/worker", "--once"]))
    set_identity(editor_identity)

    forwarder.forward([rec("job failed")])

    scope = recording_sink.events[0].scope
    assert scope.extras["Request Type"] == "Console"
    assert scope.extras["Request Script"] == "bin/worker --once"
    assert scope.user.email == "a@b.com"


def test_drain(make_forwarder, recording_sink, web_request):
    source = ListSource([rec("a"), rec("b", HostLogLevel.INFO)], [], [rec("c", HostLogLevel.WARNING)])
    result = make_forwarder().drain(source, web_request)
    assert result.dispatched == 2
    assert result.suppressed == 1
    assert [e.body for e in recording_sink.events] == ["a", "c"]


def test_unrenderable_payload_does_not_abort_the_batch(make_forwarder, recording_sink, web_request):
    class BrokenRepr:
        def __repr__(self):
            raise RuntimeError("repr exploded")

    forwarder = make_forwarder(except_patterns=["^Deprecated:"])
    result = forwarder.forward([rec(BrokenRepr()), rec("after")], web_request)

    assert [e.body for e in recording_sink.events] == ["after"]
    assert result.dispatched == 1
    assert [str(e) for e in result.failed] == ["repr exploded"]


def test_non_numeric_level_is_skipped(make_forwarder, recording_sink, web_request):
    result = make_forwarder().forward(
        [rec("odd", level="warning"), rec("none", level=None), rec("after")],
        web_request,
    )
    assert [e.body for e in recording_sink.events] == ["after"]
    assert result.suppressed == 2
    assert result.failed == []


def test_malformed_pattern_before_matching_one(make_forwarder, recording_sink, web_request):
    forwarder = make_forwarder(except_patterns=["([unclosed", "^Deprecated:"])
    result = forwarder.forward(
        [rec("Deprecated: foo()", HostLogLevel.WARNING), rec("DB timeout")],
        web_request,
    )
    assert [e.body for e in recording_sink.events] == ["DB timeout"]
    assert result.suppressed == 1
    assert result.dispatched == 1
