from __future__ import annotations

import time
from typing import Protocol


TICK_MS = 1000.0


class TimeSource(Protocol):
    def now_ms(self) -> float:
        ...


class MonotonicTimeSource:
    def now_ms(self) -> float:
        return time.monotonic() * 1000.0


class ClockScheduler:
    """Turns frame timestamps into whole-second ticks without drift.

    The anchor only ever moves by the seconds already accounted for, so the
    sub-second remainder of a late frame carries over to the next one.
    """

    def __init__(self) -> None:
        self._anchor_ms: float | None = None

    @property
    def is_running(self) -> bool:
        return self._anchor_ms is not None

    @property
    def anchor(self) -> float | None:
        return self._anchor_ms

    def start(self, now: float) -> None:
        if self._anchor_ms is not None:
            return
        self._anchor_ms = float(now)

    def stop(self) -> None:
        self._anchor_ms = None

    def on_frame(self, now: float) -> int:
        if self._anchor_ms is None:
            return 0
        elapsed = now - self._anchor_ms
        if elapsed < TICK_MS:
            return 0
        ticks = int(elapsed // TICK_MS)
        self._anchor_ms += ticks * TICK_MS
        return ticks
