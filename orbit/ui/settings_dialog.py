from __future__ import annotations

from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from orbit.core.config import MINUTE_LIMITS, SOUNDS, SessionConfig


class SettingsDialog(QDialog):
    def __init__(self, config: SessionConfig, completed_cycles: int, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.cycles_reset_requested = False

        self.spins: dict[str, QSpinBox] = {}
        form = QFormLayout()
        labels = {
            "focus_minutes": "Focus (min):",
            "short_break_minutes": "Short break (min):",
            "long_break_minutes": "Long break (min):",
        }
        for field, label in labels.items():
            low, high = MINUTE_LIMITS[field]
            spin = QSpinBox()
            spin.setRange(low, high)
            spin.setValue(getattr(config, field))
            self.spins[field] = spin
            form.addRow(label, spin)

        self.sound_combo = QComboBox()
        self.sound_combo.addItems(list(SOUNDS))
        self.sound_combo.setCurrentText(config.sound)
        form.addRow("Alarm sound:", self.sound_combo)

        self.notifications_check = QCheckBox("Desktop notifications")
        self.notifications_check.setChecked(config.notifications)
        form.addRow(self.notifications_check)

        self.auto_advance_check = QCheckBox("Start the next timer automatically")
        self.auto_advance_check.setChecked(config.auto_advance)
        form.addRow(self.auto_advance_check)

        cycles_row = QHBoxLayout()
        self.cycles_label = QLabel(f"Completed focus cycles: {completed_cycles}")
        self.cycles_label.setObjectName("MutedText")
        reset_cycles_btn = QPushButton("Reset")
        reset_cycles_btn.clicked.connect(self._request_cycles_reset)
        cycles_row.addWidget(self.cycles_label)
        cycles_row.addStretch()
        cycles_row.addWidget(reset_cycles_btn)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addLayout(cycles_row)
        layout.addWidget(buttons)

    def _request_cycles_reset(self) -> None:
        self.cycles_reset_requested = True
        self.cycles_label.setText("Completed focus cycles: 0")

    def values(self) -> dict[str, object]:
        data: dict[str, object] = {field: spin.value() for field, spin in self.spins.items()}
        data["sound"] = self.sound_combo.currentText()
        data["notifications"] = self.notifications_check.isChecked()
        data["auto_advance"] = self.auto_advance_check.isChecked()
        return data
