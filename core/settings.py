# core/settings.py
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class PresenceSettings:
    paused_top_line: str = "Paused"
    paused_bottom_line: str = "%track - %artist"
    playing_top_line: str = "%track"
    playing_bottom_line: str = "%artist"
    display_playback_duration: bool = True

    def templates_for(self, playing: bool):
        if playing:
            return self.playing_top_line, self.playing_bottom_line
        return self.paused_top_line, self.paused_bottom_line


# Anything callable with no arguments that yields the current settings.
SettingsSource = Callable[[], PresenceSettings]


class StaticSettings:
    def __init__(self, settings: PresenceSettings = PresenceSettings()):
        self.settings = settings

    def __call__(self) -> PresenceSettings:
        return self.settings
