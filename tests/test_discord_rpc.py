import pytest
from pypresence.types import ActivityType

from core import discord_rpc
from core.discord_rpc import (
    LARGE_IMAGE_KEY,
    DiscordPresenceSink,
    PresenceNotConnected,
    build_payload,
    display_name,
)
from core.models import RenderedPresence


class FakePresence:
    instances = []

    def __init__(self, client_id):
        self.client_id = client_id
        self.user = {"username": "listener", "discriminator": "0"}
        self.calls = []
        FakePresence.instances.append(self)

    def connect(self):
        self.calls.append(("connect",))

    def update(self, **kwargs):
        self.calls.append(("update", kwargs))

    def clear(self):
        self.calls.append(("clear",))

    def close(self):
        self.calls.append(("close",))


@pytest.fixture
def connected_sink(monkeypatch):
    monkeypatch.setattr(discord_rpc.time, "sleep", lambda s: None)
    sink = DiscordPresenceSink(presence_factory=FakePresence)
    sink.initialize("12345")
    return sink


def test_build_payload_with_timestamps():
    payload = build_payload(RenderedPresence("Top", "Bottom", start=10, end=20))
    assert payload == {
        "details": "Top",
        "state": "Bottom",
        "large_image": LARGE_IMAGE_KEY,
        "activity_type": ActivityType.LISTENING,
        "start": 10,
        "end": 20,
    }


def test_build_payload_without_timestamps():
    payload = build_payload(RenderedPresence("Top", "Bottom"))
    assert "start" not in payload
    assert "end" not in payload


@pytest.mark.parametrize(
    "user,expected",
    [
        ({"username": "a", "discriminator": "1234"}, "a#1234"),
        ({"username": "a", "discriminator": "0"}, "a"),
        ({}, "Unknown"),
        (None, "Unknown"),
    ],
)
def test_display_name(user, expected):
    assert display_name(user) == expected


def test_initialize_connects(monkeypatch, capsys):
    monkeypatch.setattr(discord_rpc.time, "sleep", lambda s: None)
    sink = DiscordPresenceSink(presence_factory=FakePresence)
    sink.initialize("12345")

    rpc = sink.rpc
    assert rpc.client_id == "12345"
    assert rpc.calls == [("connect",)]
    assert sink.connected
    assert "[RPC] Connected as listener" in capsys.readouterr().out


def test_update_forwards_payload(connected_sink):
    connected_sink.update_presence(RenderedPresence("Top", "Bottom"))
    name, kwargs = connected_sink.rpc.calls[-1]
    assert name == "update"
    assert kwargs["details"] == "Top"
    assert kwargs["state"] == "Bottom"


def test_update_without_connection_raises():
    with pytest.raises(PresenceNotConnected):
        DiscordPresenceSink(presence_factory=FakePresence).update_presence(RenderedPresence("a", "b"))


def test_clear_is_idempotent_and_safe_when_disconnected(connected_sink):
    connected_sink.clear_presence()
    connected_sink.clear_presence()
    assert connected_sink.rpc.calls[-2:] == [("clear",), ("clear",)]

    DiscordPresenceSink(presence_factory=FakePresence).clear_presence()


def test_clear_swallows_transport_errors(connected_sink):
    def broken():
        raise ConnectionResetError("pipe")

    connected_sink.rpc.clear = broken
    connected_sink.clear_presence()


def test_shutdown_clears_and_closes_once(connected_sink):
    rpc = connected_sink.rpc
    connected_sink.shutdown()
    connected_sink.shutdown()

    assert rpc.calls[-2:] == [("clear",), ("close",)]
    assert not connected_sink.connected
