# core/reporting.py
import os
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass

import sentry_sdk

from .debug import debug_log


@dataclass(frozen=True)
class DiagnosticContext:
    """What the bridge was trying to show when a push failed."""
    current_artist: str
    current_title: str
    current_state: str
    current_playlist: str
    current_playlist_type: str
    current_position: int
    details: str
    state: str

    def as_dict(self) -> dict:
        return asdict(self)


class ErrorReporter(ABC):
    @abstractmethod
    def report(self, error: BaseException, context: DiagnosticContext) -> None:
        ...


class DebugLogReporter(ErrorReporter):
    def report(self, error: BaseException, context: DiagnosticContext) -> None:
        extra = ", ".join(f"{k}={v!r}" for k, v in context.as_dict().items())
        debug_log(f"{type(error).__name__}: {error} [{extra}]")


class SentryReporter(ErrorReporter):
    """
    Sends errors to Sentry with the diagnostic context as event extras.
    The SDK queues events for its background worker, so report() returns
    without waiting on the network.
    """

    def __init__(self, dsn: str, release: str = None, environment: str = None):
        sentry_sdk.init(
            dsn=dsn,
            release=release,
            environment=environment,
            default_integrations=False,
        )

    def report(self, error: BaseException, context: DiagnosticContext) -> None:
        with sentry_sdk.new_scope() as scope:
            for key, value in context.as_dict().items():
                scope.set_extra(key, value)
            event_id = sentry_sdk.capture_exception(error)
        debug_log(f"Reported {type(error).__name__} to Sentry ({event_id})")


def reporter_from_env() -> ErrorReporter:
    dsn = os.getenv("IRP_SENTRY_DSN", "").strip()
    if dsn:
        return SentryReporter(
            dsn,
            release=os.getenv("IRP_RELEASE") or None,
            environment=os.getenv("IRP_ENVIRONMENT") or None,
        )
    return DebugLogReporter()
