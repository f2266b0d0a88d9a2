import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Ensure the repo root is on sys.path for direct package imports
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.discord_rpc import PresenceSink  # noqa: E402
from core.models import PlaybackSnapshot, PlayerState, PlaylistKind, SpecialKind  # noqa: E402
from core.player import PlayerSource  # noqa: E402
from core.reporting import ErrorReporter  # noqa: E402


def make_snapshot(**overrides) -> PlaybackSnapshot:
    values = dict(
        artist="Artist",
        title="Title",
        playlist_name="Library",
        playlist_kind=PlaylistKind.LIBRARY,
        player_state=PlayerState.PLAYING,
        position=30,
        duration=210,
        special_kind=SpecialKind.NONE,
    )
    values.update(overrides)
    return PlaybackSnapshot(**values)


class FakePlayer(PlayerSource):
    name = "fake"

    def __init__(self, *readings: Optional[PlaybackSnapshot]):
        self.readings = list(readings)
        self.current: Optional[PlaybackSnapshot] = None

    def get_now_playing(self) -> Optional[PlaybackSnapshot]:
        if self.readings:
            self.current = self.readings.pop(0)
        return self.current


class FakeSink(PresenceSink):
    def __init__(self, fail_with: Optional[Exception] = None):
        self.fail_with = fail_with
        self.calls: List[tuple] = []

    def initialize(self, application_id):
        self.calls.append(("initialize", application_id))

    def update_presence(self, presence):
        self.calls.append(("update", presence))
        if self.fail_with:
            raise self.fail_with

    def clear_presence(self):
        self.calls.append(("clear",))

    def shutdown(self):
        self.calls.append(("shutdown",))

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def updates(self):
        return [c[1] for c in self.calls if c[0] == "update"]


class FakeReporter(ErrorReporter):
    def __init__(self):
        self.reports = []

    def report(self, error, context):
        self.reports.append((error, context))


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def reporter():
    return FakeReporter()
