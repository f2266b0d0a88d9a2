# core/player.py
import sys
from abc import ABC, abstractmethod
from typing import Optional, Union

from .models import NO_TRACK, NoTrack, PlaybackSnapshot


class PlayerSource(ABC):
    """Read-only view of a media player, polled once per tick."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def get_now_playing(self) -> Optional[PlaybackSnapshot]:
        """Return the current playback state, or None when there is no current track."""


def capture(player: PlayerSource) -> Union[PlaybackSnapshot, NoTrack]:
    snapshot = player.get_now_playing()
    if snapshot is None:
        return NO_TRACK
    return snapshot


def default_player() -> Optional[PlayerSource]:
    if sys.platform == "win32":
        from .itunes_com import ITunesComPlayer
        if ITunesComPlayer.available():
            return ITunesComPlayer()
        # Without pywin32 only the media session is left, which has no playlist.
        from .music_windows import WindowsMediaPlayer
        return WindowsMediaPlayer() if WindowsMediaPlayer.available() else None
    if sys.platform == "darwin":
        from .music_macos import MusicAppPlayer
        return MusicAppPlayer()
    return None


class PlayerUnavailable(RuntimeError):
    """The player could not be queried at all (as opposed to having no track)."""
