# core/template.py
import re
from typing import Optional

from .models import PlaybackSnapshot, Playlist, SpecialKind, UserPlaylist

# End-user configuration refers to these spellings; keep them stable.
PLACEHOLDERS = ("%artist", "%track", "%playlist_name", "%playlist_type")

# Longest token first so "%playlist_name" never matches as a shorter token.
_TOKEN_RE = re.compile("|".join(re.escape(t) for t in sorted(PLACEHOLDERS, key=len, reverse=True)))


def playlist_type_label(playlist: Optional[Playlist]) -> str:
    if isinstance(playlist, UserPlaylist):
        return "Album" if playlist.special_kind is SpecialKind.MUSIC else "Playlist"
    return "Album"


def render(template: str, snapshot: PlaybackSnapshot, playlist_type: str) -> str:
    values = {
        "%artist": snapshot.artist,
        "%track": snapshot.title,
        "%playlist_name": snapshot.playlist_name,
        "%playlist_type": playlist_type,
    }
    # Single pass: replacement text is never scanned again.
    return _TOKEN_RE.sub(lambda m: values[m.group(0)], template)
