"""
Tests for the cooking timer.

Covers:
- state transitions (idle, ready, running, finished)
- ticking to completion and the single completion cue
- pause/resume preserving the remaining count
- the asyncio tick driver and the SSE countdown
"""

import asyncio

import pytest

from app.cooking.timer import CookingTimer, TimerDriver, TimerState, countdown_events, format_clock


class CueCounter:
    def __init__(self):
        self.count = 0

    def __call__(self):
        self.count += 1


# =============================================================================
# CookingTimer
# =============================================================================

class TestCookingTimer:

    def test_new_timer_is_idle(self):
        timer = CookingTimer()
        assert timer.state is TimerState.IDLE
        assert timer.display == "00:00"

    def test_seed_without_start_is_ready(self):
        timer = CookingTimer()
        timer.seed(35, start=False)
        assert timer.state is TimerState.READY
        assert timer.remaining_seconds == 35 * 60
        assert timer.display == "35:00"

    def test_seed_with_start_runs(self):
        timer = CookingTimer()
        timer.seed(5, start=True)
        assert timer.state is TimerState.RUNNING

    def test_reseed_while_running_keeps_running(self):
        timer = CookingTimer()
        timer.seed(5, start=True)
        timer.tick()
        timer.seed(2)
        assert timer.running
        assert timer.remaining_seconds == 120

    def test_seed_rejects_negative_minutes(self):
        with pytest.raises(ValueError):
            CookingTimer().seed(-1)

    def test_counts_down_to_finished_with_one_cue(self):
        cue = CueCounter()
        timer = CookingTimer(on_finish=cue)
        timer.seed(2, start=True)

        for _ in range(2 * 60):
            timer.tick()

        assert timer.state is TimerState.FINISHED
        assert timer.remaining_seconds == 0
        assert cue.count == 1

        # extra ticks after finishing change nothing
        assert timer.tick() is False
        assert timer.remaining_seconds == 0
        assert cue.count == 1

    def test_pause_preserves_remaining(self):
        timer = CookingTimer()
        timer.seed(1, start=True)
        for _ in range(10):
            timer.tick()
        timer.pause()

        for _ in range(25):
            assert timer.tick() is False
        assert timer.remaining_seconds == 50
        assert timer.state is TimerState.READY

        timer.start()
        for _ in range(50):
            timer.tick()
        assert timer.state is TimerState.FINISHED

    def test_start_is_noop_at_zero(self):
        timer = CookingTimer()
        timer.start()
        assert not timer.running

        timer.seed(1, start=True)
        for _ in range(60):
            timer.tick()
        timer.toggle()
        assert not timer.running
        assert timer.state is TimerState.FINISHED

    def test_toggle_flips_running(self):
        timer = CookingTimer()
        timer.seed(3)
        timer.toggle()
        assert timer.running
        timer.toggle()
        assert not timer.running

    def test_reset_returns_to_seeded_duration(self):
        timer = CookingTimer()
        timer.seed(3, start=True)
        for _ in range(42):
            timer.tick()
        timer.reset()
        assert timer.remaining_seconds == 180
        assert timer.state is TimerState.READY

    def test_reseed_clears_finished(self):
        cue = CueCounter()
        timer = CookingTimer(on_finish=cue)
        timer.seed(1, start=True)
        for _ in range(60):
            timer.tick()
        timer.seed(1, start=True)
        assert not timer.finished
        for _ in range(60):
            timer.tick()
        assert cue.count == 2

    def test_seed_zero_is_idle_and_does_not_run(self):
        timer = CookingTimer()
        timer.seed(0, start=True)
        assert timer.state is TimerState.IDLE
        assert not timer.running


@pytest.mark.parametrize("seconds, shown", [
    (0, "00:00"),
    (9, "00:09"),
    (65, "01:05"),
    (35 * 60, "35:00"),
    (-4, "00:00"),
])
def test_format_clock(seconds, shown):
    assert format_clock(seconds) == shown


# =============================================================================
# TimerDriver
# =============================================================================

class TestTimerDriver:

    @pytest.mark.asyncio
    async def test_driver_ticks_until_finished(self):
        cue = CueCounter()
        timer = CookingTimer(on_finish=cue)
        driver = TimerDriver(timer, interval=0)
        timer.seed(1, start=True)

        driver.restart()
        await driver.wait()

        assert timer.state is TimerState.FINISHED
        assert cue.count == 1
        assert not driver.active

    @pytest.mark.asyncio
    async def test_restart_replaces_the_previous_loop(self):
        timer = CookingTimer()
        driver = TimerDriver(timer, interval=60)
        timer.seed(5, start=True)
        driver.restart()
        first = driver._task

        timer.seed(3, start=True)
        driver.restart()
        await asyncio.sleep(0)

        assert first.cancelled()
        assert driver.active
        await driver.aclose()
        assert not driver.active

    @pytest.mark.asyncio
    async def test_sync_stops_loop_when_paused(self):
        timer = CookingTimer()
        driver = TimerDriver(timer, interval=60)
        timer.seed(5, start=True)
        driver.sync()
        assert driver.active

        timer.pause()
        driver.sync()
        await asyncio.sleep(0)
        assert not driver.active
        assert timer.remaining_seconds == 300


# =============================================================================
# SSE countdown
# =============================================================================

@pytest.mark.asyncio
async def test_countdown_events_end_with_finished():
    events = [event async for event in countdown_events(1, interval=0)]

    assert events[0] == {"event": "tick", "data": "01:00"}
    assert events[-2] == {"event": "tick", "data": "00:00"}
    assert events[-1] == {"event": "finished", "data": "00:00"}
    assert len(events) == 1 + 60 + 1
