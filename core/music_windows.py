# core/music_windows.py
import asyncio
import time
from typing import Optional

from .models import PlaybackSnapshot, PlayerState, PlaylistKind
from .debug import debug_log
from .player import PlayerSource, PlayerUnavailable

try:
    from winsdk.windows.media.control import (
        GlobalSystemMediaTransportControlsSessionManager as MediaManager,
        GlobalSystemMediaTransportControlsSessionPlaybackStatus as PlaybackStatus,
    )
except Exception:  # winsdk not installed or not on Windows
    MediaManager = None
    PlaybackStatus = None

_APP_MARKERS = ("itunes", "applemusic", "apple music")

_last_session_log = 0.0


def _timespan_seconds(value) -> int:
    if value is None:
        return 0
    try:
        return int(value.total_seconds())
    except Exception:
        pass
    try:
        # Some WinRT bindings expose a "duration" in 100ns ticks.
        return int(value.duration // 10_000_000)
    except Exception:
        return 0


def _app_id(session) -> str:
    try:
        return (session.source_app_user_model_id or "").lower()
    except Exception:
        return ""


def _is_itunes_session(session) -> bool:
    app_id = _app_id(session)
    return any(marker in app_id for marker in _APP_MARKERS)


def _status(session):
    try:
        return session.get_playback_info().playback_status
    except Exception:
        return None


def _player_state(status) -> PlayerState:
    if status == PlaybackStatus.PLAYING:
        return PlayerState.PLAYING
    if status == PlaybackStatus.PAUSED:
        return PlayerState.PAUSED
    return PlayerState.STOPPED


def _log_sessions(sessions) -> None:
    global _last_session_log
    now = time.time()
    if now - _last_session_log <= 5:
        return
    _last_session_log = now
    names = [f"app_id='{_app_id(s)}' status='{_status(s)}'" for s in sessions]
    debug_log("No iTunes session. Sessions: " + " | ".join(names))


async def _get_now_playing_async() -> Optional[PlaybackSnapshot]:
    try:
        manager = await MediaManager.request_async()
    except Exception as e:
        raise PlayerUnavailable(f"media session manager unavailable: {e}") from e

    session = None
    try:
        current = manager.get_current_session()
        if current and _is_itunes_session(current):
            session = current
    except Exception:
        session = None

    if not session:
        try:
            sessions = list(manager.get_sessions())
        except Exception:
            sessions = []

        candidates = [s for s in sessions if _is_itunes_session(s)]
        playing = [s for s in candidates if _status(s) == PlaybackStatus.PLAYING]
        session = (playing or candidates or [None])[0]

        if not session and sessions:
            _log_sessions(sessions)

    if not session:
        return None

    status = _status(session)
    if status is None or status == PlaybackStatus.STOPPED:
        return None

    try:
        info = await session.try_get_media_properties_async()
    except Exception:
        return None

    try:
        timeline = session.get_timeline_properties()
        duration = _timespan_seconds(timeline.end_time)
        position = _timespan_seconds(timeline.position)
    except Exception:
        duration = 0
        position = 0

    # The transport controls carry no playlist container, so the playlist
    # stays unresolved and the label reads "Album".
    return PlaybackSnapshot(
        title=getattr(info, "title", "") or "",
        artist=getattr(info, "artist", "") or "",
        playlist_name="",
        playlist_kind=PlaylistKind.NONE,
        player_state=_player_state(status),
        position=position,
        duration=duration,
    )


class WindowsMediaPlayer(PlayerSource):
    name = "iTunes (Windows media session)"

    @staticmethod
    def available() -> bool:
        return MediaManager is not None

    def get_now_playing(self) -> Optional[PlaybackSnapshot]:
        if MediaManager is None:
            raise PlayerUnavailable("winsdk is not installed")

        try:
            return asyncio.run(_get_now_playing_async())
        except RuntimeError as e:
            if isinstance(e, PlayerUnavailable):
                raise
            # If an event loop is already running (unlikely here), fall back.
            loop = asyncio.new_event_loop()
            try:
                return loop.run_until_complete(_get_now_playing_async())
            finally:
                loop.close()
