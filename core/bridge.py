# core/bridge.py
import time
from enum import Enum
from typing import Callable, Optional

from .debug import debug_log
from .discord_rpc import APP_CLIENT_ID, PresenceSink
from .models import (
    EMPTY_SNAPSHOT,
    NO_TRACK,
    PlaybackSnapshot,
    RenderedPresence,
    has_changed,
)
from .player import PlayerSource, capture
from .reporting import DiagnosticContext, ErrorReporter
from .settings import PresenceSettings, SettingsSource
from .template import playlist_type_label, render
from .truncate import truncate

POLL_SECONDS = 15


class BridgeState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


class TickOutcome(Enum):
    CLEARED = "cleared"
    UNCHANGED = "unchanged"
    UPDATED = "updated"
    FAILED = "failed"
    STOPPED = "stopped"


def render_presence(
    snapshot: PlaybackSnapshot,
    settings: PresenceSettings,
    now: int,
) -> RenderedPresence:
    playlist_type = playlist_type_label(snapshot.playlist)
    top, bottom = settings.templates_for(snapshot.playing)

    start = end = None
    if snapshot.playing and settings.display_playback_duration:
        start = now - snapshot.position
        end = now + (snapshot.duration - snapshot.position)

    return RenderedPresence(
        top_line=truncate(render(top, snapshot, playlist_type)),
        bottom_line=truncate(render(bottom, snapshot, playlist_type)),
        start=start,
        end=end,
    )


class PresenceBridge:
    """
    Mirrors the player's state to a presence sink.

    The bridge owns no timer: whoever schedules it calls on_tick() once per
    poll, never concurrently, and stops calling before shutdown().
    """

    def __init__(
        self,
        player: PlayerSource,
        sink: PresenceSink,
        settings: SettingsSource,
        reporter: ErrorReporter,
        application_id: str = APP_CLIENT_ID,
        clock: Callable[[], float] = time.time,
    ):
        self.player = player
        self.sink = sink
        self.settings = settings
        self.reporter = reporter
        self.application_id = application_id
        self.clock = clock

        self.state = BridgeState.IDLE
        self.previous = EMPTY_SNAPSHOT
        self.last_presence: Optional[RenderedPresence] = None
        self._shut_down = False

    def connect(self) -> None:
        self.sink.initialize(self.application_id)

    def on_tick(self) -> TickOutcome:
        if self._shut_down:
            return TickOutcome.STOPPED

        current = capture(self.player)

        if current is NO_TRACK:
            self.sink.clear_presence()
            self.state = BridgeState.IDLE
            self.last_presence = None
            return TickOutcome.CLEARED

        if self.state is BridgeState.ACTIVE and not has_changed(self.previous, current):
            return TickOutcome.UNCHANGED

        self.previous = current
        self.state = BridgeState.ACTIVE

        presence = render_presence(current, self.settings(), int(self.clock()))
        self.last_presence = presence

        try:
            self.sink.update_presence(presence)
        except Exception as e:
            self.reporter.report(e, self.diagnostics(current, presence))
            debug_log(f"Presence update failed: {e}")
            return TickOutcome.FAILED

        return TickOutcome.UPDATED

    def diagnostics(self, snapshot: PlaybackSnapshot, presence: RenderedPresence) -> DiagnosticContext:
        return DiagnosticContext(
            current_artist=snapshot.artist,
            current_title=snapshot.title,
            current_state=snapshot.player_state.name,
            current_playlist=snapshot.playlist_name,
            current_playlist_type=snapshot.playlist_kind.name,
            current_position=snapshot.position,
            details=presence.top_line,
            state=presence.bottom_line,
        )

    def shutdown(self) -> None:
        if self._shut_down:
            return
        self._shut_down = True
        self.sink.shutdown()


def describe(outcome: TickOutcome, bridge: PresenceBridge) -> str:
    """One-line status for the runners."""
    if outcome is TickOutcome.STOPPED:
        return "Stopped"
    if outcome is TickOutcome.CLEARED or bridge.last_presence is None:
        return "iTunes: nothing playing"
    presence = bridge.last_presence
    state = "Playing" if bridge.previous.playing else "Paused"
    if outcome is TickOutcome.FAILED:
        return f"Presence update failed: {presence.top_line} — {presence.bottom_line}"
    return f"{state}: {presence.top_line} — {presence.bottom_line}"
