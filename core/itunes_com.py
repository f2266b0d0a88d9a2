# core/itunes_com.py
from typing import Optional

from .models import PlaybackSnapshot, PlayerState, PlaylistKind, SpecialKind
from .player import PlayerSource, PlayerUnavailable

try:
    import win32com.client
except ImportError:  # pywin32 not installed or not on Windows
    win32com = None

# ITPlayerState
_PLAYER_STATES = {
    0: PlayerState.STOPPED,
    1: PlayerState.PLAYING,
    2: PlayerState.FAST_FORWARD,
    3: PlayerState.REWIND,
}

# ITPlaylistKind
_PLAYLIST_KINDS = {
    0: PlaylistKind.NONE,
    1: PlaylistKind.LIBRARY,
    2: PlaylistKind.USER,
    3: PlaylistKind.CD,
    4: PlaylistKind.DEVICE,
    5: PlaylistKind.RADIO_TUNER,
}

# ITUserPlaylistSpecialKind; kinds without a counterpart read as NONE.
_SPECIAL_KINDS = {
    0: SpecialKind.NONE,
    1: SpecialKind.PURCHASED_MUSIC,
    4: SpecialKind.FOLDER,
    6: SpecialKind.MUSIC,
}


def _dispatch():
    return win32com.client.gencache.EnsureDispatch("iTunes.Application")


def _as_user_playlist(playlist):
    return win32com.client.CastTo(playlist, "IITUserPlaylist")


class ITunesComPlayer(PlayerSource):
    """iTunes for Windows through its COM automation server."""

    name = "iTunes (COM)"

    def __init__(self, dispatch=None, as_user_playlist=None):
        self._dispatch = dispatch or _dispatch
        self._as_user_playlist = as_user_playlist or _as_user_playlist
        self._app = None

    @staticmethod
    def available() -> bool:
        return win32com is not None

    def _itunes(self):
        if self._app is None:
            try:
                self._app = self._dispatch()
            except Exception as e:
                raise PlayerUnavailable(f"iTunes COM server unavailable: {e}") from e
        return self._app

    def _special_kind(self, playlist) -> SpecialKind:
        try:
            kind = self._as_user_playlist(playlist).SpecialKind
        except Exception:
            return SpecialKind.NONE
        return _SPECIAL_KINDS.get(kind, SpecialKind.NONE)

    def get_now_playing(self) -> Optional[PlaybackSnapshot]:
        itunes = self._itunes()
        try:
            track = itunes.CurrentTrack
            if track is None:
                return None

            playlist = itunes.CurrentPlaylist
            playlist_name = ""
            playlist_kind = PlaylistKind.NONE
            special_kind = SpecialKind.NONE
            if playlist is not None:
                playlist_name = playlist.Name or ""
                playlist_kind = _PLAYLIST_KINDS.get(playlist.Kind, PlaylistKind.NONE)
                if playlist_kind is PlaylistKind.USER:
                    special_kind = self._special_kind(playlist)

            return PlaybackSnapshot(
                artist=track.Artist or "",
                title=track.Name or "",
                playlist_name=playlist_name,
                playlist_kind=playlist_kind,
                player_state=_PLAYER_STATES.get(itunes.PlayerState, PlayerState.STOPPED),
                position=int(itunes.PlayerPosition or 0),
                duration=int(track.Duration or 0),
                special_kind=special_kind,
            )
        except Exception as e:
            # iTunes was closed under us; reconnect on the next poll.
            self._app = None
            raise PlayerUnavailable(f"iTunes COM call failed: {e}") from e
