import argparse
import sys
from pathlib import Path

from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QApplication, QSystemTrayIcon

from ui.main_window import MainWindow


def main():
    parser = argparse.ArgumentParser(description="Mirror iTunes playback to Discord Rich Presence")
    parser.add_argument("--minimized", action="store_true", help="start hidden in the system tray")
    args, qt_args = parser.parse_known_args()

    app = QApplication([sys.argv[0], *qt_args])
    app.setApplicationName("iTunes Rich Presence")
    icon_path = Path(__file__).resolve().parent / "logo.png"
    if icon_path.exists():
        app.setWindowIcon(QIcon(str(icon_path)))

    # The bridge keeps running from the tray after the window closes.
    app.setQuitOnLastWindowClosed(False)

    win = MainWindow()
    if not (args.minimized and QSystemTrayIcon.isSystemTrayAvailable()):
        win.show()
    app.aboutToQuit.connect(win._stop_worker)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
