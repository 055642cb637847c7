# scheduler.py -----------------------------------------------
import asyncio
import time
from typing import Callable, Literal, Protocol


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> None: ...


class AsyncioScheduler:
    """Schedules on the running event loop; raises ``RuntimeError`` without one."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        loop = asyncio.get_running_loop()
        loop.call_later(delay, callback)


TimerState = Literal["idle", "pending"]


class FlushTimer:
    """Debounce timer with two states.

    ``arm`` moves ``idle -> pending`` and schedules ``callback``; arming while
    pending does nothing. Firing moves back to ``idle`` before the callback
    runs, so the callback may arm again. There is no cancel.
    """

    def __init__(
        self, scheduler: Scheduler, delay_ms: float, callback: Callable[[], None]
    ) -> None:
        self._scheduler = scheduler
        self.delay_ms = delay_ms
        self._callback = callback
        self._state: TimerState = "idle"

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._state == "pending"

    def arm(self) -> None:
        if self._state == "pending":
            return
        self._state = "pending"
        try:
            self._scheduler.call_later(self.delay_ms / 1000.0, self._fire)
        except RuntimeError:
            # nothing to wait on (no running loop): flush right away
            self._fire()

    def _fire(self) -> None:
        self._state = "idle"
        self._callback()
