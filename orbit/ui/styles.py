from __future__ import annotations

from PyQt6.QtWidgets import QApplication

from orbit.core.config import Mode


MODE_ACCENTS = {
    Mode.FOCUS: ("#eb8f60", "#de8050", "#cb6f40"),
    Mode.SHORT_BREAK: ("#5fa8a0", "#4f9890", "#3f8880"),
    Mode.LONG_BREAK: ("#7b8fd1", "#6b7fc1", "#5b6fb1"),
}


THEME_QSS = """
QWidget {
    background: #f4f1ee;
    color: #2f2a26;
    font-size: 13px;
}

QMainWindow, QDialog {
    background: #f4f1ee;
}

QLabel, QCheckBox {
    background: transparent;
}

QLabel#StatusLabel {
    font-size: 14px;
    font-weight: 600;
    letter-spacing: 2px;
    color: #6f645b;
}

QLabel#MutedText {
    color: #867b71;
}

QPushButton {
    border: none;
    background: #f7eee6;
    border-radius: 16px;
    padding: 8px 14px;
    font-weight: 600;
}

QPushButton:hover {
    background: #f2e6dc;
}

QPushButton:pressed {
    background: #e8d8cc;
}

QPushButton#SecondaryButton {
    border-radius: 22px;
    padding: 10px 18px;
    min-height: 24px;
    font-size: 14px;
}

QSpinBox, QComboBox {
    background: #fff7f1;
    border: none;
    border-radius: 16px;
    padding: 7px 10px;
    min-height: 22px;
}

QComboBox::drop-down {
    border: none;
    width: 18px;
}

QCheckBox {
    spacing: 8px;
}

QCheckBox::indicator {
    width: 18px;
    height: 18px;
    border-radius: 9px;
    border: none;
    background: #fff1e7;
}
"""


ACCENT_QSS = """
QPushButton#PrimaryButton {{
    background: {base};
    color: #ffffff;
    border: none;
    border-radius: 22px;
    padding: 10px 24px;
    min-height: 24px;
    font-size: 14px;
    letter-spacing: 2px;
}}

QPushButton#PrimaryButton:hover {{
    background: {hover};
}}

QPushButton#PrimaryButton:pressed {{
    background: {pressed};
}}

QPushButton#ModePill:checked {{
    background: {base};
    color: #ffffff;
}}

QCheckBox::indicator:checked {{
    background: {base};
}}
"""


def accent_color(mode: Mode) -> str:
    return MODE_ACCENTS[Mode(mode)][0]


def stylesheet_for(mode: Mode) -> str:
    base, hover, pressed = MODE_ACCENTS[Mode(mode)]
    return THEME_QSS + ACCENT_QSS.format(base=base, hover=hover, pressed=pressed)


def apply_theme(app: QApplication, mode: Mode = Mode.FOCUS) -> None:
    app.setStyleSheet(stylesheet_for(mode))
