from __future__ import annotations

"""Key-value store contract and failure-tolerant settings helpers."""

import logging
from typing import Any, Protocol

from orbit.core.config import DEFAULT_CONFIG, SessionConfig, sanitize_config


logger = logging.getLogger(__name__)

CONFIG_KEY = "config"
CYCLES_KEY = "completed_cycles"


class KeyValueStore(Protocol):
    """Synchronous settings provider; any error it raises is treated as unavailable."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class MemoryStore:
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value


def _read(store: KeyValueStore | None, key: str, default: Any) -> Any:
    if store is None:
        return default
    try:
        return store.get(key, default)
    except Exception as exc:
        logger.warning("Could not read %r, using defaults: %s", key, exc)
        return default


def _write(store: KeyValueStore | None, key: str, value: Any) -> None:
    if store is None:
        return
    try:
        store.set(key, value)
    except Exception as exc:
        logger.warning("Could not save %r: %s", key, exc)


def load_config(store: KeyValueStore | None) -> SessionConfig:
    raw = _read(store, CONFIG_KEY, None)
    if raw is None:
        return DEFAULT_CONFIG
    return sanitize_config(raw)


def save_config(store: KeyValueStore | None, config: SessionConfig) -> None:
    _write(store, CONFIG_KEY, config.to_dict())


def load_completed_cycles(store: KeyValueStore | None) -> int:
    raw = _read(store, CYCLES_KEY, 0)
    try:
        cycles = int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring stored cycle count %r", raw)
        return 0
    return max(0, cycles)


def save_completed_cycles(store: KeyValueStore | None, cycles: int) -> None:
    _write(store, CYCLES_KEY, int(cycles))
