import pytest

from orbit.core.config import Mode, SessionConfig
from orbit.core.errors import InvalidTransition
from orbit.core.persistence import CONFIG_KEY, CYCLES_KEY, MemoryStore
from orbit.core.session import SessionController, SessionStatus, format_remaining, next_mode


class FakeTimeSource:
    def __init__(self, start_ms: float = 0.0) -> None:
        self.current = start_ms

    def now_ms(self) -> float:
        return self.current

    def advance(self, ms: float) -> float:
        self.current += ms
        return self.current


def make_controller(store: MemoryStore | None = None, **config) -> tuple[SessionController, FakeTimeSource]:
    clock = FakeTimeSource()
    controller = SessionController(time_source=clock, store=store or MemoryStore())
    if config:
        controller.configure(config)
    return controller, clock


def run_seconds(controller: SessionController, clock: FakeTimeSource, seconds: int, frame_ms: float = 250.0) -> None:
    steps = int(seconds * 1000 / frame_ms)
    for _ in range(steps):
        controller.on_frame(clock.advance(frame_ms))


def test_next_mode_cadence() -> None:
    assert next_mode(Mode.FOCUS, 1) == Mode.SHORT_BREAK
    assert next_mode(Mode.FOCUS, 3) == Mode.SHORT_BREAK
    assert next_mode(Mode.FOCUS, 4) == Mode.LONG_BREAK
    assert next_mode(Mode.FOCUS, 8) == Mode.LONG_BREAK
    assert next_mode(Mode.SHORT_BREAK, 4) == Mode.FOCUS
    assert next_mode(Mode.LONG_BREAK, 4) == Mode.FOCUS


def test_new_controller_is_ready_in_focus() -> None:
    controller, _ = make_controller()

    state = controller.state
    assert state.mode == Mode.FOCUS
    assert state.status == SessionStatus.READY
    assert state.total_seconds == state.remaining_seconds == 25 * 60
    assert state.completed_cycles == 0


def test_one_minute_focus_completes_after_sixty_ticks() -> None:
    controller, clock = make_controller(focus_minutes=1, short_break_minutes=1, long_break_minutes=1)
    events = []
    controller.on_completed(events.append)

    controller.start()
    run_seconds(controller, clock, 59)
    assert controller.state.remaining_seconds == 1
    assert events == []

    run_seconds(controller, clock, 1)

    assert controller.status == SessionStatus.COMPLETED
    assert controller.scheduler.is_running is False
    assert len(events) == 1
    assert events[0].mode == Mode.FOCUS
    assert events[0].completed_cycles == 1
    assert events[0].next_mode == Mode.SHORT_BREAK


def test_fourth_cycle_leads_to_long_break() -> None:
    store = MemoryStore({CYCLES_KEY: 3})
    controller, clock = make_controller(store, focus_minutes=1)
    events = []
    controller.on_completed(events.append)

    controller.start()
    run_seconds(controller, clock, 60)

    assert events[0].completed_cycles == 4
    assert events[0].next_mode == Mode.LONG_BREAK
    assert store.get(CYCLES_KEY) == 4


def test_break_completion_does_not_count_a_cycle() -> None:
    controller, clock = make_controller(short_break_minutes=1)
    controller.reset(Mode.SHORT_BREAK)
    events = []
    controller.on_completed(events.append)

    controller.start()
    run_seconds(controller, clock, 60)

    assert events[0].completed_cycles == 0
    assert events[0].next_mode == Mode.FOCUS


def test_every_tick_decrements_by_one_even_for_late_frames() -> None:
    controller, clock = make_controller(focus_minutes=1)
    seen = []
    controller.on_tick(lambda remaining, total: seen.append((remaining, total)))

    controller.start()
    counted = controller.on_frame(clock.advance(3400))

    assert counted == 3
    assert seen == [(59, 60), (58, 60), (57, 60)]


def test_ticks_after_completion_are_discarded() -> None:
    controller, clock = make_controller(focus_minutes=1)
    controller.start()

    counted = controller.on_frame(clock.advance(75_000))

    assert counted == 60
    assert controller.state.remaining_seconds == 0
    assert controller.status == SessionStatus.COMPLETED


def test_remaining_never_increases_while_running() -> None:
    controller, clock = make_controller(focus_minutes=2)
    controller.start()
    previous = controller.state.remaining_seconds

    for step in [16, 700, 1300, 5, 2500, 999, 40_000, 3]:
        controller.on_frame(clock.advance(step))
        current = controller.state.remaining_seconds
        assert 0 <= current <= previous <= controller.state.total_seconds
        previous = current


def test_pause_and_immediate_resume_loses_no_time() -> None:
    controller, clock = make_controller(focus_minutes=1)
    controller.start()
    controller.on_frame(clock.advance(1500))
    assert controller.state.remaining_seconds == 59

    controller.pause()
    assert controller.status == SessionStatus.PAUSED
    controller.on_frame(clock.advance(10_000))
    assert controller.state.remaining_seconds == 59

    controller.start()
    assert controller.on_frame(clock.advance(999)) == 0
    assert controller.on_frame(clock.advance(1)) == 1
    assert controller.state.remaining_seconds == 58


def test_start_twice_keeps_scheduler_anchor() -> None:
    controller, clock = make_controller()
    controller.start()
    anchor = controller.scheduler.anchor

    clock.advance(400)
    controller.start()

    assert controller.scheduler.anchor == anchor
    assert controller.status == SessionStatus.RUNNING


def test_start_after_completion_is_invalid() -> None:
    controller, clock = make_controller(focus_minutes=1)
    controller.start()
    run_seconds(controller, clock, 60)

    with pytest.raises(InvalidTransition):
        controller.start()
    assert controller.status == SessionStatus.COMPLETED


def test_reset_restores_full_duration_and_switches_mode() -> None:
    controller, clock = make_controller(focus_minutes=3, long_break_minutes=20)
    modes = []
    controller.on_mode_changed(modes.append)
    controller.start()
    run_seconds(controller, clock, 30)

    controller.reset()
    assert controller.state.remaining_seconds == controller.state.total_seconds == 180
    assert controller.status == SessionStatus.READY
    assert modes == []

    controller.reset(Mode.LONG_BREAK)
    assert controller.state.remaining_seconds == controller.state.total_seconds == 20 * 60
    assert modes == [Mode.LONG_BREAK]

    controller.reset("not-a-mode")
    assert controller.mode == Mode.LONG_BREAK


def test_reset_keeps_completed_cycles() -> None:
    controller, clock = make_controller(focus_minutes=1)
    controller.start()
    run_seconds(controller, clock, 60)

    controller.reset(Mode.FOCUS)

    assert controller.state.completed_cycles == 1


def test_toggle_switches_between_running_and_paused() -> None:
    controller, _ = make_controller()

    controller.toggle()
    assert controller.status == SessionStatus.RUNNING
    controller.toggle()
    assert controller.status == SessionStatus.PAUSED
    controller.toggle()
    assert controller.status == SessionStatus.RUNNING


def test_advance_moves_to_next_mode_and_starts() -> None:
    controller, clock = make_controller(focus_minutes=1, short_break_minutes=2, auto_advance=True)
    controller.start()
    run_seconds(controller, clock, 60)
    assert controller.should_auto_advance is True

    upcoming = controller.advance()

    assert upcoming == Mode.SHORT_BREAK
    assert controller.mode == Mode.SHORT_BREAK
    assert controller.status == SessionStatus.RUNNING
    assert controller.state.remaining_seconds == 120
    assert controller.should_auto_advance is False


def test_advance_outside_completed_is_invalid() -> None:
    controller, _ = make_controller()

    with pytest.raises(InvalidTransition):
        controller.advance()


def test_auto_advance_flag_comes_from_config() -> None:
    controller, clock = make_controller(focus_minutes=1)
    events = []
    controller.on_completed(events.append)
    controller.start()
    run_seconds(controller, clock, 60)

    assert events[0].auto_advance is False
    assert controller.should_auto_advance is False


def test_configure_clamps_and_applies_when_ready() -> None:
    store = MemoryStore()
    controller, _ = make_controller(store)

    config = controller.configure({"pomodoro": 999})

    assert config.focus_minutes == 120
    assert controller.state.total_seconds == 120 * 60
    assert store.get(CONFIG_KEY)["focus_minutes"] == 120


def test_configure_keeps_running_countdown_snapshot() -> None:
    controller, clock = make_controller(focus_minutes=10)
    controller.start()
    run_seconds(controller, clock, 5)

    controller.configure(SessionConfig(focus_minutes=30))

    assert controller.state.total_seconds == 600
    assert controller.state.remaining_seconds == 595
    controller.reset()
    assert controller.state.total_seconds == 1800


def test_settings_and_cycles_load_from_store() -> None:
    store = MemoryStore({CONFIG_KEY: {"focus_minutes": 40}, CYCLES_KEY: 2})

    controller, _ = make_controller(store)

    assert controller.config.focus_minutes == 40
    assert controller.state.total_seconds == 2400
    assert controller.state.completed_cycles == 2


def test_reset_cycles_persists_zero() -> None:
    store = MemoryStore({CYCLES_KEY: 5})
    controller, _ = make_controller(store)

    controller.reset_cycles()

    assert controller.state.completed_cycles == 0
    assert store.get(CYCLES_KEY) == 0


def test_failing_listener_does_not_stall_countdown() -> None:
    controller, clock = make_controller(focus_minutes=1)

    def explode(remaining: int, total: int) -> None:
        raise RuntimeError("render failed")

    controller.on_tick(explode)
    controller.start()
    run_seconds(controller, clock, 3)

    assert controller.state.remaining_seconds == 57


def test_unsubscribe_stops_events() -> None:
    controller, clock = make_controller(focus_minutes=1)
    seen = []
    unsubscribe = controller.on_tick(lambda remaining, total: seen.append(remaining))
    controller.start()
    controller.on_frame(clock.advance(1000))

    unsubscribe()
    controller.on_frame(clock.advance(1000))

    assert seen == [59]


def test_progress_and_format() -> None:
    controller, clock = make_controller(focus_minutes=1)
    controller.start()
    run_seconds(controller, clock, 15)

    assert controller.state.progress == pytest.approx(0.25)
    assert format_remaining(controller.state.remaining_seconds) == "0:45"
    assert format_remaining(1500) == "25:00"
    assert format_remaining(-3) == "0:00"


class RaisingStore:
    def get(self, key, default=None):
        raise OSError("disk gone")

    def set(self, key, value) -> None:
        raise OSError("disk gone")


def test_advancing_from_completion_listener_discards_leftover_ticks() -> None:
    controller, clock = make_controller(focus_minutes=1, short_break_minutes=1)
    controller.on_completed(lambda event: controller.advance())
    controller.start()

    counted = controller.on_frame(clock.advance(75_000))

    assert counted == 60
    assert controller.mode == Mode.SHORT_BREAK
    assert controller.status == SessionStatus.RUNNING
    assert controller.state.remaining_seconds == 60
    assert controller.on_frame(clock.advance(999)) == 0
    assert controller.on_frame(clock.advance(1)) == 1


def test_restart_from_tick_listener_drops_rest_of_frame() -> None:
    controller, clock = make_controller(focus_minutes=1)

    def restart_on_first(remaining: int, total: int) -> None:
        if remaining == 59:
            controller.pause()
            controller.start()

    controller.on_tick(restart_on_first)
    controller.start()

    assert controller.on_frame(clock.advance(5000)) == 1
    assert controller.state.remaining_seconds == 59


def test_store_raising_os_error_falls_back_to_defaults() -> None:
    controller = SessionController(time_source=FakeTimeSource(), store=RaisingStore())

    assert controller.config == SessionConfig()
    assert controller.state.completed_cycles == 0


def test_store_write_failure_does_not_escape_frame_loop() -> None:
    clock = FakeTimeSource()
    controller = SessionController(time_source=clock, store=RaisingStore())
    controller.configure({"focus_minutes": 1})
    events = []
    controller.on_completed(events.append)
    controller.start()

    controller.on_frame(clock.advance(60_000))

    assert controller.status == SessionStatus.COMPLETED
    assert events[0].completed_cycles == 1
