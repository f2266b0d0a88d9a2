from contextlib import contextmanager

from core import reporting
from core.reporting import (
    DebugLogReporter,
    DiagnosticContext,
    SentryReporter,
    reporter_from_env,
)

CONTEXT = DiagnosticContext(
    current_artist="A",
    current_title="T",
    current_state="PLAYING",
    current_playlist="P",
    current_playlist_type="USER",
    current_position=3,
    details="T",
    state="A",
)


class FakeScope:
    def __init__(self):
        self.extras = {}

    def set_extra(self, key, value):
        self.extras[key] = value


class FakeSentry:
    def __init__(self, monkeypatch):
        self.inits = []
        self.scopes = []
        self.captured = []
        monkeypatch.setattr(reporting.sentry_sdk, "init", self.init)
        monkeypatch.setattr(reporting.sentry_sdk, "new_scope", self.new_scope)
        monkeypatch.setattr(reporting.sentry_sdk, "capture_exception", self.capture_exception)

    def init(self, **kwargs):
        self.inits.append(kwargs)

    @contextmanager
    def new_scope(self):
        scope = FakeScope()
        self.scopes.append(scope)
        yield scope

    def capture_exception(self, error):
        # Extras must already be on the scope when the event is captured.
        self.captured.append((error, dict(self.scopes[-1].extras)))
        return "event-1"


def test_sentry_reporter_initializes_client(monkeypatch):
    sentry = FakeSentry(monkeypatch)
    SentryReporter("https://key@sentry.example/1", release="1.0.0")

    assert sentry.inits[0]["dsn"] == "https://key@sentry.example/1"
    assert sentry.inits[0]["release"] == "1.0.0"


def test_sentry_reporter_attaches_context_as_extras(monkeypatch):
    sentry = FakeSentry(monkeypatch)
    error = RuntimeError("pipe closed")

    SentryReporter("https://key@sentry.example/1").report(error, CONTEXT)

    assert sentry.captured == [(error, CONTEXT.as_dict())]


def test_sentry_reporter_uses_a_fresh_scope_per_report(monkeypatch):
    sentry = FakeSentry(monkeypatch)
    reporter = SentryReporter("https://key@sentry.example/1")

    reporter.report(RuntimeError("one"), CONTEXT)
    reporter.report(RuntimeError("two"), CONTEXT)

    assert len(sentry.scopes) == 2
    assert sentry.scopes[0] is not sentry.scopes[1]


def test_debug_log_reporter_writes_context(monkeypatch):
    lines = []
    monkeypatch.setattr(reporting, "debug_log", lines.append)

    DebugLogReporter().report(RuntimeError("boom"), CONTEXT)

    assert lines[0].startswith("RuntimeError: boom")
    assert "current_title='T'" in lines[0]


def test_reporter_from_env(monkeypatch):
    sentry = FakeSentry(monkeypatch)

    monkeypatch.delenv("IRP_SENTRY_DSN", raising=False)
    assert isinstance(reporter_from_env(), DebugLogReporter)
    assert sentry.inits == []

    monkeypatch.setenv("IRP_SENTRY_DSN", "https://key@sentry.example/1")
    monkeypatch.setenv("IRP_ENVIRONMENT", "test")
    assert isinstance(reporter_from_env(), SentryReporter)
    assert sentry.inits[0]["environment"] == "test"
