from __future__ import annotations

import logging

from PyQt6.QtCore import QRect, QTimer, Qt
from PyQt6.QtGui import QAction, QColor, QIcon, QKeySequence, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import (
    QApplication,
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from orbit.core.config import Mode
from orbit.core.errors import InvalidTransition
from orbit.core.session import CompletionEvent, SessionController, SessionStatus, format_remaining
from orbit.ui.alerts import MODE_TITLES, CompletionAlerts
from orbit.ui.settings_dialog import SettingsDialog
from orbit.ui.styles import accent_color, stylesheet_for


logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 33
AUTO_ADVANCE_DELAY_MS = 2000

STATUS_TEXT = {
    SessionStatus.READY: "READY",
    SessionStatus.RUNNING: "RUNNING",
    SessionStatus.PAUSED: "PAUSED",
    SessionStatus.COMPLETED: "COMPLETED",
}

BUTTON_TEXT = {
    SessionStatus.READY: "START",
    SessionStatus.RUNNING: "PAUSE",
    SessionStatus.PAUSED: "RESUME",
    SessionStatus.COMPLETED: "NEXT",
}


class ProgressRing(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(320, 320)
        self._progress = 0.0
        self._remaining_text = "25:00"
        self._accent = QColor(accent_color(Mode.FOCUS))

    def set_state(self, progress: float, remaining_text: str) -> None:
        self._progress = progress
        self._remaining_text = remaining_text
        self.update()

    def set_accent(self, color: str) -> None:
        self._accent = QColor(color)
        self.update()

    def paintEvent(self, event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        rect = self.rect().adjusted(16, 16, -16, -16)
        diameter = min(rect.width(), rect.height())
        circle_rect = QRect(
            rect.left() + (rect.width() - diameter) // 2,
            rect.top() + (rect.height() - diameter) // 2,
            diameter,
            diameter,
        )

        painter.setPen(QPen(QColor("#eee4db"), 10))
        painter.drawEllipse(circle_rect)
        painter.setPen(QPen(self._accent, 10, Qt.PenStyle.SolidLine, Qt.PenCapStyle.RoundCap))
        span = int(-360 * 16 * self._progress)
        painter.drawArc(circle_rect, 90 * 16, span)

        font = painter.font()
        font.setPixelSize(max(24, diameter // 5))
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QColor("#2d2824"))
        painter.drawText(circle_rect, Qt.AlignmentFlag.AlignCenter, self._remaining_text)


def _window_icon(color: str) -> QIcon:
    pixmap = QPixmap(64, 64)
    pixmap.fill(Qt.GlobalColor.transparent)
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.setPen(QPen(QColor(color), 8))
    painter.drawEllipse(8, 8, 48, 48)
    painter.end()
    return QIcon(pixmap)


class MainWindow(QMainWindow):
    def __init__(self, controller: SessionController) -> None:
        super().__init__()
        self.resize(480, 600)
        self.controller = controller
        self.alerts = CompletionAlerts(_window_icon(accent_color(Mode.FOCUS)), self)

        self._build_ui()
        self._connect_signals()
        self._unsubscribe = [
            controller.on_tick(self._on_tick),
            controller.on_completed(self._on_completed),
            controller.on_mode_changed(self._on_mode_changed),
        ]

        self.frame_timer = QTimer(self)
        self.frame_timer.setInterval(FRAME_INTERVAL_MS)
        self.frame_timer.timeout.connect(self._on_frame)
        self.frame_timer.start()

        self._on_mode_changed(controller.mode)
        self._render()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        pills = QHBoxLayout()
        self.mode_group = QButtonGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_buttons: dict[Mode, QPushButton] = {}
        for mode in Mode:
            button = QPushButton(MODE_TITLES[mode])
            button.setObjectName("ModePill")
            button.setCheckable(True)
            self.mode_group.addButton(button)
            self.mode_buttons[mode] = button
            pills.addWidget(button)
        layout.addLayout(pills)

        self.ring = ProgressRing()
        layout.addWidget(self.ring, 1)

        self.status_label = QLabel("READY")
        self.status_label.setObjectName("StatusLabel")
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.status_label)

        self.cycles_label = QLabel()
        self.cycles_label.setObjectName("MutedText")
        self.cycles_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.cycles_label)

        controls = QHBoxLayout()
        self.main_btn = QPushButton("START")
        self.main_btn.setObjectName("PrimaryButton")
        self.reset_btn = QPushButton("Reset")
        self.reset_btn.setObjectName("SecondaryButton")
        self.settings_btn = QPushButton("Settings")
        self.settings_btn.setObjectName("SecondaryButton")
        controls.addStretch()
        controls.addWidget(self.reset_btn)
        controls.addWidget(self.main_btn)
        controls.addWidget(self.settings_btn)
        controls.addStretch()
        layout.addLayout(controls)

        space_action = QAction(self)
        space_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        space_action.triggered.connect(self._on_main_button)
        self.addAction(space_action)

        reset_action = QAction(self)
        reset_action.setShortcut(QKeySequence(Qt.Key.Key_R))
        reset_action.triggered.connect(self._on_reset)
        self.addAction(reset_action)

    def _connect_signals(self) -> None:
        self.main_btn.clicked.connect(self._on_main_button)
        self.reset_btn.clicked.connect(self._on_reset)
        self.settings_btn.clicked.connect(self.open_settings)
        for mode, button in self.mode_buttons.items():
            button.clicked.connect(lambda _checked, m=mode: self.controller.reset(m))

    def _on_main_button(self) -> None:
        try:
            if self.controller.status == SessionStatus.COMPLETED:
                self.controller.advance()
            else:
                self.controller.toggle()
        except InvalidTransition as exc:
            logger.info("Ignored: %s", exc)
        self._render()

    def _on_reset(self) -> None:
        self.controller.reset()
        self._render()

    def _on_frame(self) -> None:
        self.controller.on_frame()

    def _on_tick(self, remaining: int, total: int) -> None:
        self._render()

    def _on_completed(self, event: CompletionEvent) -> None:
        self._render()
        self.alerts.notify(self.controller.config, event.mode)
        if event.auto_advance:
            QTimer.singleShot(AUTO_ADVANCE_DELAY_MS, self._auto_advance)

    def _auto_advance(self) -> None:
        if not self.controller.should_auto_advance:
            return
        self.controller.advance()
        self._render()

    def _on_mode_changed(self, mode: Mode) -> None:
        button = self.mode_buttons[mode]
        if not button.isChecked():
            button.setChecked(True)
        color = accent_color(mode)
        self.ring.set_accent(color)
        self.setWindowIcon(_window_icon(color))
        app = QApplication.instance()
        if app is not None:
            app.setStyleSheet(stylesheet_for(mode))

    def open_settings(self) -> None:
        state = self.controller.state
        dialog = SettingsDialog(self.controller.config, state.completed_cycles, self)
        if dialog.exec() != SettingsDialog.DialogCode.Accepted:
            return
        config = self.controller.configure(dialog.values())
        if dialog.cycles_reset_requested:
            self.controller.reset_cycles()
        self.controller.reset()
        if config.notifications and not self.alerts.has_tray:
            QMessageBox.information(self, "Notifications", "No system tray is available, notifications will not be shown.")
        self._render()

    def _render(self) -> None:
        state = self.controller.state
        text = format_remaining(state.remaining_seconds)
        self.ring.set_state(state.progress, text)
        self.status_label.setText(STATUS_TEXT[state.status])
        self.main_btn.setText(BUTTON_TEXT[state.status])
        self.cycles_label.setText(f"Cycles completed: {state.completed_cycles}")
        self.setWindowTitle(f"{text} - Orbit")

    def closeEvent(self, event) -> None:  # noqa: N802
        self.frame_timer.stop()
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        event.accept()
