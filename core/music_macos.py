#core/music_macos.py
import subprocess
from typing import Optional

from .models import PlaybackSnapshot, PlayerState, PlaylistKind, SpecialKind
from .player import PlayerSource, PlayerUnavailable

SEP = "\x1f"

SCRIPT = r'''
tell application "Music"
    if it is not running then
        return "OK=0"
    end if

    try
        set t to current track
    on error
        return "OK=0"
    end try

    set sep to (character id 31)
    set ps to (player state as string)
    set tName to (name of t as string)
    set tArtist to (artist of t as string)
    set tDur to (duration of t)
    set tPos to (player position)

    set pName to ""
    set pClass to "none"
    set pSpecial to "none"
    try
        set p to current playlist
        set pName to (name of p as string)
        set pClass to (class of p as string)
        if pClass is "user playlist" or pClass is "folder playlist" then
            set pSpecial to (special kind of p as string)
        end if
    end try

    return "OK=1" & sep & tName & sep & tArtist & sep & (tDur as string) & sep & (tPos as string) & sep & ps & sep & pName & sep & pClass & sep & pSpecial
end tell
'''

# Folder playlists are user playlists with a "folder" special kind.
_PLAYLIST_CLASSES = {
    "user playlist": PlaylistKind.USER,
    "folder playlist": PlaylistKind.USER,
    "library playlist": PlaylistKind.LIBRARY,
    "audio CD playlist": PlaylistKind.CD,
    "radio tuner playlist": PlaylistKind.RADIO_TUNER,
    "subscription playlist": PlaylistKind.SUBSCRIPTION,
}


def _to_seconds(v: str) -> int:
    # AppleScript may format reals with a decimal comma depending on locale.
    try:
        return int(float(v.replace(",", ".")))
    except ValueError:
        return 0


def _player_state(v: str) -> PlayerState:
    try:
        return PlayerState(v.strip())
    except ValueError:
        return PlayerState.STOPPED


def _special_kind(v: str) -> SpecialKind:
    try:
        return SpecialKind(v.strip())
    except ValueError:
        return SpecialKind.NONE


def parse_output(out: str) -> Optional[PlaybackSnapshot]:
    parts = out.strip().split(SEP)
    if parts[0] != "OK=1" or len(parts) < 9:
        return None

    # OK=1|title|artist|duration|position|state|playlist|class|special kind
    return PlaybackSnapshot(
        title=parts[1],
        artist=parts[2],
        duration=_to_seconds(parts[3]),
        position=_to_seconds(parts[4]),
        player_state=_player_state(parts[5]),
        playlist_name=parts[6],
        playlist_kind=_PLAYLIST_CLASSES.get(parts[7].strip(), PlaylistKind.NONE),
        special_kind=_special_kind(parts[8]),
    )


class MusicAppPlayer(PlayerSource):
    name = "Music.app"

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout

    def get_now_playing(self) -> Optional[PlaybackSnapshot]:
        try:
            out = subprocess.check_output(
                ["osascript", "-e", SCRIPT],
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise PlayerUnavailable(f"osascript failed: {e}") from e

        return parse_output(out)
