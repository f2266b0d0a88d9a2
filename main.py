#main.py
import threading

from core.bridge import POLL_SECONDS, BridgeState, PresenceBridge, TickOutcome, describe
from core.debug import debug_log
from core.discord_rpc import DiscordPresenceSink
from core.player import PlayerUnavailable, default_player
from core.reporting import reporter_from_env
from core.settings import StaticSettings


def run(bridge: PresenceBridge, stop: threading.Event, poll_seconds: float = POLL_SECONDS) -> None:
    """Tick until stopped; each wait starts after the previous tick finishes."""
    while not stop.is_set():
        was_active = bridge.state is BridgeState.ACTIVE
        try:
            outcome = bridge.on_tick()
        except PlayerUnavailable as e:
            print(f"[Music] iTunes read failed: {e}")
            debug_log(f"iTunes read failed: {e}")
        else:
            if outcome in (TickOutcome.UPDATED, TickOutcome.FAILED):
                print(f"[RPC] {describe(outcome, bridge)}")
            elif outcome is TickOutcome.CLEARED and was_active:
                print("[RPC] Cleared (nothing playing)")

        stop.wait(poll_seconds)


def main():
    player = default_player()
    if not player:
        print("[Music] Unsupported OS or missing Windows dependency (pywin32 or winsdk).")
        return

    bridge = PresenceBridge(
        player=player,
        sink=DiscordPresenceSink(),
        settings=StaticSettings(),
        reporter=reporter_from_env(),
    )
    try:
        bridge.connect()
    except Exception as e:
        print(f"[RPC] Discord connect failed: {e}")
        debug_log(f"Discord connect failed: {e}")
        return

    stop = threading.Event()
    print(f"[Music] Watching {player.name}… (Ctrl+C to stop)")

    try:
        run(bridge, stop)
    except KeyboardInterrupt:
        pass
    finally:
        stop.set()
        bridge.shutdown()
        print("[RPC] Disconnected")


if __name__ == "__main__":
    main()
