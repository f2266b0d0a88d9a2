import pytest

from conftest import make_snapshot
from core.models import (
    EMPTY_SNAPSHOT,
    PlayerState,
    PlaylistKind,
    RenderedPresence,
    SpecialKind,
    has_changed,
)


def test_identical_snapshots_are_unchanged():
    assert has_changed(make_snapshot(), make_snapshot()) is False


@pytest.mark.parametrize(
    "field,value",
    [
        ("artist", "Other Artist"),
        ("title", "Other Title"),
        ("playlist_name", "Other Playlist"),
        ("playlist_kind", PlaylistKind.USER),
        ("player_state", PlayerState.PAUSED),
        ("position", 31),
    ],
)
def test_any_observed_field_counts_as_change(field, value):
    assert has_changed(make_snapshot(), make_snapshot(**{field: value})) is True


def test_duration_and_special_kind_are_not_compared():
    a = make_snapshot(duration=210, special_kind=SpecialKind.NONE)
    b = make_snapshot(duration=999, special_kind=SpecialKind.MUSIC)
    assert has_changed(a, b) is False


def test_empty_snapshot_sentinel():
    assert EMPTY_SNAPSHOT.artist == ""
    assert EMPTY_SNAPSHOT.title == ""
    assert EMPTY_SNAPSHOT.player_state is PlayerState.STOPPED
    assert EMPTY_SNAPSHOT.position == 0


def test_only_exact_playing_counts_as_playing():
    assert make_snapshot(player_state=PlayerState.PLAYING).playing
    for state in (PlayerState.STOPPED, PlayerState.PAUSED, PlayerState.FAST_FORWARD, PlayerState.REWIND):
        assert not make_snapshot(player_state=state).playing


def test_rendered_presence_timestamps_come_in_pairs():
    RenderedPresence("a", "b")
    RenderedPresence("a", "b", start=1, end=2)
    with pytest.raises(ValueError):
        RenderedPresence("a", "b", start=1)
    with pytest.raises(ValueError):
        RenderedPresence("a", "b", end=2)
