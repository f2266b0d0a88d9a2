#core/discord_rpc.py
import os
import time
from abc import ABC, abstractmethod
from typing import Optional

from pypresence import Presence
from pypresence.types import ActivityType

from .debug import debug_log
from .models import RenderedPresence


# APP ID
APP_CLIENT_ID = os.getenv("IRP_CLIENT_ID", "1465803809761792193")

LARGE_IMAGE_KEY = "itunes_logo_big"


class PresenceNotConnected(RuntimeError):
    pass


class PresenceSink(ABC):
    @abstractmethod
    def initialize(self, application_id: str) -> None:
        ...

    @abstractmethod
    def update_presence(self, presence: RenderedPresence) -> None:
        ...

    @abstractmethod
    def clear_presence(self) -> None:
        ...

    @abstractmethod
    def shutdown(self) -> None:
        ...


def build_payload(presence: RenderedPresence) -> dict:
    payload = {
        "details": presence.top_line,
        "state": presence.bottom_line,
        "large_image": LARGE_IMAGE_KEY,
        "activity_type": ActivityType.LISTENING,
    }

    # Progress bar only while playing
    if presence.start is not None:
        payload["start"] = presence.start
        payload["end"] = presence.end

    return payload


def display_name(user: Optional[dict]) -> str:
    user = user or {}
    name = user.get("username", "Unknown")
    disc = user.get("discriminator", "")
    return f"{name}#{disc}" if disc and disc != "0" else name


class DiscordPresenceSink(PresenceSink):
    def __init__(self, presence_factory=Presence):
        self._factory = presence_factory
        self.rpc = None

    @property
    def connected(self) -> bool:
        return self.rpc is not None

    def initialize(self, application_id: str = APP_CLIENT_ID) -> None:
        rpc = self._factory(application_id)
        rpc.connect()

        # Give Discord time to send READY payload
        time.sleep(0.3)

        self.rpc = rpc
        print(f"[RPC] Connected as {display_name(getattr(rpc, 'user', None))}")

    def update_presence(self, presence: RenderedPresence) -> None:
        if not self.rpc:
            raise PresenceNotConnected("Discord presence is not connected")
        self.rpc.update(**build_payload(presence))

    def clear_presence(self) -> None:
        if not self.rpc:
            return
        try:
            self.rpc.clear()
        except Exception as e:
            debug_log(f"Presence clear failed: {e}")

    def shutdown(self) -> None:
        if not self.rpc:
            return
        rpc, self.rpc = self.rpc, None
        try:
            rpc.clear()
            rpc.close()
        except Exception as e:
            debug_log(f"Discord shutdown failed: {e}")
