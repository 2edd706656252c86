# app/cooking/timer.py
"""
Countdown timer for cooking steps.

`CookingTimer` is a plain state machine advanced by `tick()`; it knows
nothing about clocks. `TimerDriver` owns the single asyncio task that
ticks it once per interval, and `countdown_events` feeds the SSE endpoint.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import AsyncIterator, Callable, Optional

from core.log import json_log


class TimerState(str, Enum):
    IDLE = "idle"
    READY = "ready"
    RUNNING = "running"
    FINISHED = "finished"


def format_clock(seconds: int) -> str:
    seconds = max(0, seconds)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class CookingTimer:
    def __init__(self, on_finish: Optional[Callable[[], None]] = None):
        self.on_finish = on_finish
        self.initial_seconds = 0
        self.remaining_seconds = 0
        self.running = False
        self.finished = False

    @property
    def state(self) -> TimerState:
        if self.running:
            return TimerState.RUNNING
        if self.finished:
            return TimerState.FINISHED
        if self.initial_seconds == 0:
            return TimerState.IDLE
        return TimerState.READY

    @property
    def display(self) -> str:
        return format_clock(self.remaining_seconds)

    def seed(self, minutes: int, start: Optional[bool] = None) -> None:
        """
        Load a new duration, replacing whatever was there.

        start=True runs immediately (per-step timers), start=False leaves it
        ready (recipe load), None keeps the current running flag.
        """
        if minutes < 0:
            raise ValueError("timer duration must be >= 0 minutes")
        keep_running = self.running if start is None else start
        self.initial_seconds = minutes * 60
        self.remaining_seconds = self.initial_seconds
        self.finished = False
        self.running = bool(keep_running) and self.remaining_seconds > 0

    def start(self) -> None:
        if self.remaining_seconds > 0:
            self.running = True

    def pause(self) -> None:
        self.running = False

    def toggle(self) -> None:
        if self.running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self.remaining_seconds = self.initial_seconds
        self.running = False
        self.finished = False

    def tick(self) -> bool:
        """One second elapsed. Returns False when the timer was not running."""
        if not self.running:
            return False
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            self.running = False
            self.finished = True
            if self.on_finish is not None:
                self.on_finish()
        return True


class TimerDriver:
    """Runs at most one tick loop for a timer."""

    def __init__(self, timer: CookingTimer, interval: float = 1.0):
        self.timer = timer
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _loop(self) -> None:
        while self.timer.running:
            await asyncio.sleep(self.interval)
            self.timer.tick()

    def _cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def restart(self) -> None:
        # Never two loops on one timer
        self._cancel()
        if self.timer.running:
            self._task = asyncio.get_running_loop().create_task(self._loop())

    def sync(self) -> None:
        if self.timer.running and not self.active:
            self.restart()
        elif not self.timer.running:
            self._cancel()

    async def wait(self) -> None:
        """Block until the current loop ends (timer finished, paused or cancelled)."""
        if self._task is not None:
            await asyncio.wait({self._task})

    async def aclose(self) -> None:
        task = self._task
        self._cancel()
        if task is not None:
            await asyncio.wait({task})


async def countdown_events(minutes: int, interval: float = 1.0) -> AsyncIterator[dict]:
    """SSE payloads for a one-off countdown: the start value, each tick, then `finished`."""
    timer = CookingTimer(on_finish=lambda: json_log("info", event="timer_finished", minutes=minutes))
    timer.seed(minutes, start=True)
    yield {"event": "tick", "data": timer.display}
    while timer.running:
        await asyncio.sleep(interval)
        timer.tick()
        yield {"event": "tick", "data": timer.display}
    yield {"event": "finished", "data": timer.display}
