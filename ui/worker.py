# ui/worker.py
from PySide6.QtCore import QThread, Signal

from core.bridge import POLL_SECONDS, PresenceBridge, TickOutcome, describe
from core.debug import debug_log
from core.discord_rpc import DiscordPresenceSink, display_name
from core.player import PlayerUnavailable, default_player
from core.reporting import reporter_from_env


class PresenceWorker(QThread):
    status = Signal(str)
    account = Signal(str)
    presence = Signal(dict)      # {"top_line": str, "bottom_line": str, "playing": bool}

    # Sleep in slices so stop() is honoured well before the next poll.
    _SLICE_MS = 250

    def __init__(self, settings, poll_seconds: int = POLL_SECONDS, parent=None):
        super().__init__(parent)
        self.settings = settings
        self.poll_seconds = poll_seconds
        self._running = True
        self.bridge = None

    def stop(self):
        self._running = False

    def _wait_for_next_poll(self):
        waited = 0
        while self._running and waited < self.poll_seconds * 1000:
            self.msleep(self._SLICE_MS)
            waited += self._SLICE_MS

    def _emit_presence(self, outcome: TickOutcome):
        p = self.bridge.last_presence
        if outcome is TickOutcome.CLEARED or p is None:
            self.presence.emit({"top_line": "", "bottom_line": "", "playing": False})
            return
        self.presence.emit({
            "top_line": p.top_line,
            "bottom_line": p.bottom_line,
            "playing": self.bridge.previous.playing,
        })

    def run(self):
        player = default_player()
        if not player:
            self.status.emit("iTunes source unavailable on this OS")
            return

        sink = DiscordPresenceSink()
        self.bridge = PresenceBridge(
            player=player,
            sink=sink,
            settings=self.settings,
            reporter=reporter_from_env(),
        )

        # 1) Connect to Discord
        try:
            self.status.emit("Connecting to Discord…")
            self.bridge.connect()
            self.status.emit("Discord connected ✅")
            self.account.emit(display_name(getattr(sink.rpc, "user", None)))
        except Exception as e:
            self.status.emit(f"Discord connect failed: {e}")
            debug_log(f"Discord connect failed: {e}")
            return

        # 2) Main loop; the sink is torn down only once ticking has stopped.
        try:
            while self._running:
                try:
                    outcome = self.bridge.on_tick()
                except PlayerUnavailable as e:
                    self.status.emit(f"iTunes read failed: {e}")
                    debug_log(f"iTunes read failed: {e}")
                else:
                    if outcome is not TickOutcome.UNCHANGED:
                        self.status.emit(describe(outcome, self.bridge))
                        self._emit_presence(outcome)

                self._wait_for_next_poll()
        finally:
            self.bridge.shutdown()
