# ui/settings_store.py
from dataclasses import fields

from PySide6.QtCore import QSettings

from core.settings import PresenceSettings

ORGANIZATION = "iTunesRichPresence"
APPLICATION = "iTunes Rich Presence"

_KEYS = {
    "paused_top_line": "PausedTopLine",
    "paused_bottom_line": "PausedBottomLine",
    "playing_top_line": "PlayingTopLine",
    "playing_bottom_line": "PlayingBottomLine",
    "display_playback_duration": "DisplayPlaybackDuration",
}


def to_bool(value, default: bool) -> bool:
    # QSettings hands back "true"/"false" strings from INI and plist backends.
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


class QSettingsStore:
    """Persists PresenceSettings with QSettings. Callable, so it doubles as a settings source."""

    def __init__(self, settings_factory=None):
        self._factory = settings_factory or (lambda: QSettings(ORGANIZATION, APPLICATION))

    def load(self) -> PresenceSettings:
        qs = self._factory()
        defaults = PresenceSettings()
        values = {}
        for f in fields(PresenceSettings):
            default = getattr(defaults, f.name)
            raw = qs.value(_KEYS[f.name])
            if isinstance(default, bool):
                values[f.name] = to_bool(raw, default)
            else:
                values[f.name] = default if raw is None else str(raw)
        return PresenceSettings(**values)

    def save(self, settings: PresenceSettings) -> None:
        qs = self._factory()
        for f in fields(PresenceSettings):
            qs.setValue(_KEYS[f.name], getattr(settings, f.name))
        qs.sync()

    def __call__(self) -> PresenceSettings:
        return self.load()
