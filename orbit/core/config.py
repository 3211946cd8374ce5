from __future__ import annotations

"""Session settings: defaults, allowed ranges and field-by-field sanitizing."""

import logging
import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Mapping

from orbit.core.errors import InvalidConfig


logger = logging.getLogger(__name__)


class Mode(str, Enum):
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


MINUTE_LIMITS = {
    "focus_minutes": (1, 120),
    "short_break_minutes": (1, 60),
    "long_break_minutes": (1, 60),
}

MODE_FIELDS = {
    Mode.FOCUS: "focus_minutes",
    Mode.SHORT_BREAK: "short_break_minutes",
    Mode.LONG_BREAK: "long_break_minutes",
}

SOUNDS = ("digital", "bell", "chime", "none")

# Keys written by the browser version of the app.
KEY_ALIASES = {
    "pomodoro": "focus_minutes",
    "focus": "focus_minutes",
    "focusMinutes": "focus_minutes",
    "shortBreak": "short_break_minutes",
    "shortBreakMinutes": "short_break_minutes",
    "short_break": "short_break_minutes",
    "longBreak": "long_break_minutes",
    "longBreakMinutes": "long_break_minutes",
    "long_break": "long_break_minutes",
    "autoAdvance": "auto_advance",
}


MODE_ALIASES = {
    "pomodoro": Mode.FOCUS,
    "shortBreak": Mode.SHORT_BREAK,
    "longBreak": Mode.LONG_BREAK,
}


def parse_mode(value: Mode | str) -> Mode | None:
    if isinstance(value, Mode):
        return value
    if value in MODE_ALIASES:
        return MODE_ALIASES[value]
    try:
        return Mode(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class SessionConfig:
    focus_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    auto_advance: bool = False
    sound: str = "digital"
    notifications: bool = False

    def minutes_for(self, mode: Mode) -> int:
        return int(getattr(self, MODE_FIELDS[Mode(mode)]))

    def seconds_for(self, mode: Mode) -> int:
        return self.minutes_for(mode) * 60

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = SessionConfig()


def validate_minutes(field: str, value: Any) -> int:
    """Return ``value`` as whole minutes clamped into the field's range.

    Raises ``InvalidConfig`` when the value cannot be read as a number at all;
    out-of-range numbers are clamped rather than rejected.
    """
    low, high = MINUTE_LIMITS[field]
    if isinstance(value, bool) or value is None:
        raise InvalidConfig(f"{field}: expected a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidConfig(f"{field}: expected a number, got {value!r}") from exc
    if math.isnan(number):
        raise InvalidConfig(f"{field}: expected a number, got {value!r}")
    minutes = int(max(low - 1, min(high + 1, number)))
    if minutes < low or minutes > high:
        clamped = max(low, min(high, minutes))
        logger.warning("%s=%r out of range %s-%s, clamped to %s", field, value, low, high, clamped)
        return clamped
    return minutes


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return default


def normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in raw.items():
        normalized[KEY_ALIASES.get(key, key)] = value
    return normalized


def sanitize_config(raw: SessionConfig | Mapping[str, Any] | None) -> SessionConfig:
    """Build a valid ``SessionConfig``; each bad field falls back on its own."""
    if isinstance(raw, SessionConfig):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        if raw is not None:
            logger.warning("Ignoring config of type %s", type(raw).__name__)
        return DEFAULT_CONFIG

    values = normalize_keys(raw)
    fields: dict[str, Any] = {}
    for field in MINUTE_LIMITS:
        default = getattr(DEFAULT_CONFIG, field)
        if field not in values:
            fields[field] = default
            continue
        try:
            fields[field] = validate_minutes(field, values[field])
        except InvalidConfig as exc:
            logger.warning("%s; using default %s", exc, default)
            fields[field] = default

    fields["auto_advance"] = _as_bool(values.get("auto_advance"), DEFAULT_CONFIG.auto_advance)
    fields["notifications"] = _as_bool(values.get("notifications"), DEFAULT_CONFIG.notifications)
    sound = values.get("sound", DEFAULT_CONFIG.sound)
    fields["sound"] = sound if sound in SOUNDS else DEFAULT_CONFIG.sound
    return SessionConfig(**fields)
