from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from orbit.core.clock import ClockScheduler, MonotonicTimeSource, TimeSource
from orbit.core.config import Mode, SessionConfig, parse_mode, sanitize_config
from orbit.core.errors import InvalidTransition
from orbit.core.persistence import (
    KeyValueStore,
    load_completed_cycles,
    load_config,
    save_completed_cycles,
    save_config,
)


logger = logging.getLogger(__name__)

LONG_BREAK_INTERVAL = 4


class SessionStatus(str, Enum):
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SessionState:
    mode: Mode
    total_seconds: int
    remaining_seconds: int
    status: SessionStatus
    completed_cycles: int

    @property
    def running(self) -> bool:
        return self.status == SessionStatus.RUNNING

    @property
    def progress(self) -> float:
        if self.total_seconds <= 0:
            return 0.0
        return max(0.0, min(1.0, 1.0 - self.remaining_seconds / self.total_seconds))


@dataclass(frozen=True)
class CompletionEvent:
    mode: Mode
    completed_cycles: int
    next_mode: Mode
    auto_advance: bool


TickListener = Callable[[int, int], None]
CompletedListener = Callable[[CompletionEvent], None]
ModeListener = Callable[[Mode], None]


def next_mode(current: Mode, completed_cycles: int) -> Mode:
    """Mode that follows ``current``; expects the count after a focus completes."""
    if Mode(current) == Mode.FOCUS:
        if completed_cycles % LONG_BREAK_INTERVAL == 0:
            return Mode.LONG_BREAK
        return Mode.SHORT_BREAK
    return Mode.FOCUS


def format_remaining(seconds: int) -> str:
    minutes, sec = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{sec:02d}"


class SessionController:
    """Pomodoro countdown state machine driven by external frame callbacks."""

    def __init__(
        self,
        time_source: TimeSource | None = None,
        store: KeyValueStore | None = None,
    ) -> None:
        self._time = time_source or MonotonicTimeSource()
        self._store = store
        self._scheduler = ClockScheduler()
        self._config = load_config(store)
        self._completed_cycles = load_completed_cycles(store)
        self._mode = Mode.FOCUS
        self._run_id = 0
        self._status = SessionStatus.READY
        self._total_seconds = self._config.seconds_for(self._mode)
        self._remaining_seconds = self._total_seconds
        self._tick_listeners: list[TickListener] = []
        self._completed_listeners: list[CompletedListener] = []
        self._mode_listeners: list[ModeListener] = []

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def scheduler(self) -> ClockScheduler:
        return self._scheduler

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def state(self) -> SessionState:
        return SessionState(
            mode=self._mode,
            total_seconds=self._total_seconds,
            remaining_seconds=self._remaining_seconds,
            status=self._status,
            completed_cycles=self._completed_cycles,
        )

    @property
    def should_auto_advance(self) -> bool:
        return self._status == SessionStatus.COMPLETED and self._config.auto_advance

    def on_tick(self, listener: TickListener) -> Callable[[], None]:
        return self._subscribe(self._tick_listeners, listener)

    def on_completed(self, listener: CompletedListener) -> Callable[[], None]:
        return self._subscribe(self._completed_listeners, listener)

    def on_mode_changed(self, listener: ModeListener) -> Callable[[], None]:
        return self._subscribe(self._mode_listeners, listener)

    def configure(self, config: SessionConfig | Mapping[str, Any]) -> SessionConfig:
        self._config = sanitize_config(config)
        save_config(self._store, self._config)
        if self._status == SessionStatus.READY:
            self._apply_duration()
            self._emit(self._tick_listeners, self._remaining_seconds, self._total_seconds)
        return self._config

    def reset(self, mode: Mode | str | None = None) -> None:
        self._stop_clock()
        previous = self._mode
        if mode is not None:
            parsed = parse_mode(mode)
            if parsed is None:
                logger.warning("Unknown mode %r, keeping %s", mode, self._mode.value)
            else:
                self._mode = parsed
        self._status = SessionStatus.READY
        self._apply_duration()
        logger.debug("Reset to %s (%ss)", self._mode.value, self._total_seconds)
        if self._mode != previous:
            self._emit(self._mode_listeners, self._mode)
        self._emit(self._tick_listeners, self._remaining_seconds, self._total_seconds)

    def start(self, now: float | None = None) -> None:
        if self._status == SessionStatus.RUNNING:
            return
        if self._status == SessionStatus.COMPLETED or self._remaining_seconds <= 0:
            raise InvalidTransition(f"Cannot start a {self._status.value} session with nothing left to count")
        if now is None:
            now = self._time.now_ms()
        self._scheduler.start(now)
        logger.debug("%s %s at %ss remaining", "Resumed" if self._status == SessionStatus.PAUSED else "Started", self._mode.value, self._remaining_seconds)
        self._status = SessionStatus.RUNNING

    def pause(self) -> None:
        if self._status != SessionStatus.RUNNING:
            return
        self._stop_clock()
        self._status = SessionStatus.PAUSED
        logger.debug("Paused %s at %ss remaining", self._mode.value, self._remaining_seconds)

    def toggle(self, now: float | None = None) -> None:
        if self._status == SessionStatus.RUNNING:
            self.pause()
        else:
            self.start(now)

    def advance(self, now: float | None = None) -> Mode:
        """Move from a completed countdown into the next mode and start it."""
        if self._status != SessionStatus.COMPLETED:
            raise InvalidTransition(f"Cannot advance from a {self._status.value} session")
        upcoming = next_mode(self._mode, self._completed_cycles)
        self.reset(upcoming)
        self.start(now)
        return upcoming

    def reset_cycles(self) -> None:
        self._completed_cycles = 0
        save_completed_cycles(self._store, 0)

    def on_frame(self, now: float | None = None) -> int:
        """Feed one frame timestamp; returns how many seconds were counted down."""
        if self._status != SessionStatus.RUNNING:
            return 0
        if now is None:
            now = self._time.now_ms()
        ticks = self._scheduler.on_frame(now)
        counted = 0
        run_id = self._run_id
        for _ in range(ticks):
            if self._run_id != run_id:
                break
            self._remaining_seconds = max(0, self._remaining_seconds - 1)
            counted += 1
            self._emit(self._tick_listeners, self._remaining_seconds, self._total_seconds)
            if self._remaining_seconds == 0:
                self._complete()
                break
        return counted

    def _complete(self) -> None:
        self._stop_clock()
        self._status = SessionStatus.COMPLETED
        if self._mode == Mode.FOCUS:
            self._completed_cycles += 1
            save_completed_cycles(self._store, self._completed_cycles)
        event = CompletionEvent(
            mode=self._mode,
            completed_cycles=self._completed_cycles,
            next_mode=next_mode(self._mode, self._completed_cycles),
            auto_advance=self._config.auto_advance,
        )
        logger.info("Completed %s, cycles=%s, next=%s", event.mode.value, event.completed_cycles, event.next_mode.value)
        self._emit(self._completed_listeners, event)

    def _stop_clock(self) -> None:
        # Ticks still queued in on_frame belong to the run that just ended.
        self._scheduler.stop()
        self._run_id += 1

    def _apply_duration(self) -> None:
        self._total_seconds = self._config.seconds_for(self._mode)
        self._remaining_seconds = self._total_seconds

    @staticmethod
    def _subscribe(listeners: list, listener: Callable) -> Callable[[], None]:
        listeners.append(listener)

        def unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    @staticmethod
    def _emit(listeners: list, *args: Any) -> None:
        for listener in list(listeners):
            try:
                listener(*args)
            except Exception:
                logger.exception("Session listener %r failed", listener)
