# ui/main_window.py
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QGuiApplication, QIcon
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QPushButton, QFrame, QLineEdit, QCheckBox,
    QMenu, QSystemTrayIcon
)

from core.settings import PresenceSettings
from core.template import PLACEHOLDERS
from .settings_store import QSettingsStore
from .worker import PresenceWorker

PRIMARY = "#7289da"
BG = "#6b7cc8"


class MainWindow(QMainWindow):
    def __init__(self, store: QSettingsStore = None):
        super().__init__()

        self.setWindowTitle("iTunes Rich Presence")
        self.setFixedSize(520, 620)

        self.store = store or QSettingsStore()
        self.worker = None
        self._tray = None
        self._icon = self._load_app_icon()
        self._force_quit = False

        root = QWidget()
        root.setObjectName("Root")
        layout = QVBoxLayout(root)
        layout.setAlignment(Qt.AlignTop)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        layout.addWidget(self._build_status_card())
        layout.addWidget(self._build_templates_card())

        tokens = QLabel("Placeholders: " + "  ".join(PLACEHOLDERS))
        tokens.setObjectName("FooterNote")
        tokens.setAlignment(Qt.AlignCenter)
        tokens.setWordWrap(True)
        layout.addWidget(tokens)
        layout.addStretch()

        self.setCentralWidget(root)
        self._apply_styles()
        self._load_settings()

        self._init_tray()
        if self._icon:
            self.setWindowIcon(self._icon)

        self._start_worker()

    # ==================================================
    # STATUS CARD
    # ==================================================

    def _build_status_card(self):
        card = QFrame()
        card.setObjectName("GlassCard")
        v = QVBoxLayout(card)
        v.setContentsMargins(20, 18, 20, 18)
        v.setSpacing(6)

        self.account_label = QLabel("Not connected")
        self.account_label.setObjectName("DashTitle")

        self.status_label = QLabel("Starting…")
        self.status_label.setObjectName("DashMuted")
        self.status_label.setWordWrap(True)

        self.top_line_label = QLabel("")
        self.top_line_label.setObjectName("SongTitle")

        self.bottom_line_label = QLabel("")
        self.bottom_line_label.setObjectName("ArtistName")

        self.playing_label = QLabel("")
        self.playing_label.setObjectName("PlayingLine")

        v.addWidget(self.account_label)
        v.addWidget(self.status_label)
        v.addWidget(self.top_line_label)
        v.addWidget(self.bottom_line_label)
        v.addWidget(self.playing_label)
        return card

    # ==================================================
    # TEMPLATES CARD
    # ==================================================

    def _build_templates_card(self):
        card = QFrame()
        card.setObjectName("Card")
        v = QVBoxLayout(card)
        v.setContentsMargins(20, 18, 20, 18)
        v.setSpacing(12)

        title = QLabel("Presence Templates")
        title.setObjectName("Title")

        form = QFormLayout()
        self.playing_top = QLineEdit()
        self.playing_bottom = QLineEdit()
        self.paused_top = QLineEdit()
        self.paused_bottom = QLineEdit()
        form.addRow("Playing (top)", self.playing_top)
        form.addRow("Playing (bottom)", self.playing_bottom)
        form.addRow("Paused (top)", self.paused_top)
        form.addRow("Paused (bottom)", self.paused_bottom)

        self.duration_box = QCheckBox("Display playback duration")

        row = QHBoxLayout()
        self.save_btn = QPushButton("Save")
        self.save_btn.setObjectName("CTA")
        self.save_btn.clicked.connect(self._on_save_clicked)
        self.reset_btn = QPushButton("Defaults")
        self.reset_btn.setObjectName("Secondary")
        self.reset_btn.clicked.connect(self._on_reset_clicked)
        row.addWidget(self.reset_btn)
        row.addWidget(self.save_btn)

        v.addWidget(title)
        v.addLayout(form)
        v.addWidget(self.duration_box)
        v.addLayout(row)
        return card

    def _show_settings(self, s: PresenceSettings):
        self.playing_top.setText(s.playing_top_line)
        self.playing_bottom.setText(s.playing_bottom_line)
        self.paused_top.setText(s.paused_top_line)
        self.paused_bottom.setText(s.paused_bottom_line)
        self.duration_box.setChecked(s.display_playback_duration)

    def _load_settings(self):
        self._show_settings(self.store.load())

    def _on_save_clicked(self):
        self.store.save(PresenceSettings(
            paused_top_line=self.paused_top.text(),
            paused_bottom_line=self.paused_bottom.text(),
            playing_top_line=self.playing_top.text(),
            playing_bottom_line=self.playing_bottom.text(),
            display_playback_duration=self.duration_box.isChecked(),
        ))
        self.status_label.setText("Templates saved; shown from the next change")

    def _on_reset_clicked(self):
        self._show_settings(PresenceSettings())

    # ==================================================
    # WORKER HOOKUP
    # ==================================================

    def _start_worker(self):
        if self.worker:
            return

        self.worker = PresenceWorker(settings=self.store, parent=self)
        self.worker.status.connect(self._on_worker_status)
        self.worker.account.connect(self.account_label.setText)
        self.worker.presence.connect(self._on_presence)
        self.worker.start()

    def _on_worker_status(self, msg: str):
        self.status_label.setText(msg)
        if self._tray:
            self._tray.setToolTip(f"iTunes Rich Presence\n{msg}")

    def _on_presence(self, p: dict):
        self.top_line_label.setText(p.get("top_line", ""))
        self.bottom_line_label.setText(p.get("bottom_line", ""))
        if not p.get("top_line") and not p.get("bottom_line"):
            self.playing_label.setText("")
        else:
            self.playing_label.setText("Playing" if p.get("playing") else "Paused")

    # ==================================================
    # CLEAN SHUTDOWN
    # ==================================================

    def closeEvent(self, event):
        # Minimize to tray if available
        if self._tray and self._tray.isVisible() and not self._force_quit:
            self.hide()
            event.ignore()
            return

        self._stop_worker()
        event.accept()

    def _init_tray(self):
        if not QSystemTrayIcon.isSystemTrayAvailable():
            return

        tray = QSystemTrayIcon(self)
        tray.setToolTip("iTunes Rich Presence")
        if self._icon:
            tray.setIcon(self._icon)

        menu = QMenu()
        action_show = menu.addAction("Show")
        action_quit = menu.addAction("Quit")

        action_show.triggered.connect(self._show_from_tray)
        action_quit.triggered.connect(self._quit_from_tray)
        tray.activated.connect(self._on_tray_activated)

        tray.setContextMenu(menu)
        tray.show()
        self._tray = tray

    def _on_tray_activated(self, reason):
        if reason == QSystemTrayIcon.Trigger:
            self._show_from_tray()

    def _show_from_tray(self):
        self.show()
        self.raise_()
        self.activateWindow()

    def _quit_from_tray(self):
        self._force_quit = True
        self._stop_worker()
        app = QGuiApplication.instance()
        if app:
            app.quit()
        else:
            self.close()

    def _load_app_icon(self):
        icon_path = Path(__file__).resolve().parents[1] / "logo.png"
        if icon_path.exists():
            return QIcon(str(icon_path))
        return None

    def _stop_worker(self):
        if not self.worker:
            return
        # The worker shuts the Discord connection down itself once its loop exits.
        self.worker.stop()
        if self.worker.isRunning():
            self.worker.wait(6000)
        self.worker = None

    # ==================================================
    # STYLES
    # ==================================================

    def _apply_styles(self):
        self.setStyleSheet(f"""
            QWidget {{
                color: white;
                font-family: -apple-system, BlinkMacSystemFont,
                             "Segoe UI", Inter, Arial;
            }}

            QMainWindow, QWidget#Root {{
                background-color: {BG};
            }}

            QLabel, QCheckBox {{
                background: transparent;
            }}

            QFrame#Card {{
                background-color: {PRIMARY};
                border-radius: 24px;
            }}

            QFrame#GlassCard {{
                background-color: rgba(255,255,255,0.10);
                border: 1px solid rgba(255,255,255,0.18);
                border-radius: 22px;
            }}

            QLabel#Title {{
                font-size: 18px;
                font-weight: 800;
            }}

            QLabel#DashTitle {{
                font-size: 18px;
                font-weight: 800;
            }}

            QLabel#DashMuted {{
                font-size: 13px;
                color: rgba(255,255,255,0.70);
            }}

            QLabel#SongTitle {{
                font-size: 20px;
                font-weight: 900;
            }}

            QLabel#ArtistName {{
                font-size: 14px;
                color: rgba(255,255,255,0.90);
            }}

            QLabel#PlayingLine {{
                font-size: 12px;
                color: rgba(255,255,255,0.70);
            }}

            QLineEdit {{
                background-color: rgba(255,255,255,0.16);
                border: 1px solid rgba(255,255,255,0.24);
                border-radius: 8px;
                padding: 6px;
            }}

            QPushButton#CTA {{
                background-color: white;
                color: {PRIMARY};
                border-radius: 12px;
                padding: 10px;
                font-size: 14px;
                font-weight: 800;
            }}

            QPushButton#CTA:hover {{
                background-color: #f0f0f0;
            }}

            QPushButton#Secondary {{
                background-color: rgba(255,255,255,0.16);
                border-radius: 12px;
                padding: 10px;
                font-size: 14px;
            }}

            QLabel#FooterNote {{
                font-size: 11px;
                color: rgba(255,255,255,0.70);
            }}
        """)
