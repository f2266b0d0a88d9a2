# core/models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class PlayerState(Enum):
    STOPPED = "stopped"
    PAUSED = "paused"
    PLAYING = "playing"
    FAST_FORWARD = "fast forwarding"
    REWIND = "rewinding"


class PlaylistKind(Enum):
    NONE = "none"
    LIBRARY = "library playlist"
    USER = "user playlist"
    CD = "audio CD playlist"
    DEVICE = "device playlist"
    RADIO_TUNER = "radio tuner playlist"
    SUBSCRIPTION = "subscription playlist"


class SpecialKind(Enum):
    NONE = "none"
    MUSIC = "Music"
    LIBRARY = "Library"
    FOLDER = "folder"
    GENIUS = "Genius"
    PURCHASED_MUSIC = "Purchased Music"


@dataclass(frozen=True)
class UserPlaylist:
    name: str
    special_kind: SpecialKind = SpecialKind.NONE


@dataclass(frozen=True)
class OtherPlaylist:
    name: str
    kind: PlaylistKind = PlaylistKind.NONE


Playlist = Union[UserPlaylist, OtherPlaylist]


@dataclass(frozen=True)
class PlaybackSnapshot:
    """
    One poll of the player. Equality covers the six observed fields only;
    duration and the playlist's special kind ride along for rendering.
    """
    artist: str
    title: str
    playlist_name: str
    playlist_kind: PlaylistKind
    player_state: PlayerState
    position: int
    duration: int = field(default=0, compare=False)
    special_kind: SpecialKind = field(default=SpecialKind.NONE, compare=False)

    @property
    def playlist(self) -> Playlist:
        if self.playlist_kind is PlaylistKind.USER:
            return UserPlaylist(self.playlist_name, self.special_kind)
        return OtherPlaylist(self.playlist_name, self.playlist_kind)

    @property
    def playing(self) -> bool:
        return self.player_state is PlayerState.PLAYING


EMPTY_SNAPSHOT = PlaybackSnapshot(
    artist="",
    title="",
    playlist_name="",
    playlist_kind=PlaylistKind.NONE,
    player_state=PlayerState.STOPPED,
    position=0,
)


class NoTrack(Enum):
    NO_TRACK = "no_track"


NO_TRACK = NoTrack.NO_TRACK


def has_changed(previous: PlaybackSnapshot, current: PlaybackSnapshot) -> bool:
    return previous != current


@dataclass(frozen=True)
class RenderedPresence:
    top_line: str
    bottom_line: str
    start: Optional[int] = None
    end: Optional[int] = None

    def __post_init__(self):
        if (self.start is None) != (self.end is None):
            raise ValueError("start and end timestamps must be set together")
