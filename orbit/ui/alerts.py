from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtGui import QIcon
from PyQt6.QtMultimedia import QSoundEffect
from PyQt6.QtWidgets import QApplication, QSystemTrayIcon

from orbit.core.assets import alarm_sound_path
from orbit.core.config import Mode, SessionConfig


logger = logging.getLogger(__name__)

MODE_TITLES = {
    Mode.FOCUS: "Focus",
    Mode.SHORT_BREAK: "Short break",
    Mode.LONG_BREAK: "Long break",
}


class CompletionAlerts(QObject):
    """Sound and desktop notification raised when a countdown finishes."""

    def __init__(self, icon: QIcon, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._effect = QSoundEffect(self)
        self._tray: QSystemTrayIcon | None = None
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray = QSystemTrayIcon(icon, self)
            self._tray.setToolTip("Orbit Focus")

    @property
    def has_tray(self) -> bool:
        return self._tray is not None

    def notify(self, config: SessionConfig, mode: Mode) -> None:
        self.play_sound(config.sound)
        if config.notifications:
            self.show_message("Orbit Focus", f"{MODE_TITLES[mode]} timer complete")

    def play_sound(self, sound: str) -> None:
        if sound == "none":
            return
        path = alarm_sound_path(sound)
        if path is None:
            QApplication.beep()
            return
        self._effect.setSource(QUrl.fromLocalFile(str(path)))
        self._effect.play()

    def show_message(self, title: str, message: str) -> None:
        if self._tray is None:
            logger.info("No system tray, notification dropped: %s", message)
            return
        if not self._tray.isVisible():
            self._tray.show()
        self._tray.showMessage(title, message, QSystemTrayIcon.MessageIcon.Information, 5000)
