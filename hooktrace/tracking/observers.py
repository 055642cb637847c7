"""Timing signal sources feeding ``LogEngine``.

``LongTaskObserver`` watches the event loop for stalls: a heartbeat task
sleeps in short ticks, and a tick that wakes up late by at least
``long_task_ms`` means something held the loop for that long. The stall is
reported once it is over, as ``[start, start + duration]``.

``InteractionObserver`` collects input-processing timings reported by the
``InputBus`` and hands them to the engine in batches. Only reports at or
above ``interaction_ms`` are delivered.
"""

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional

from .engine import LogEngine
from .entries import InteractionTiming, LongTask


class LongTaskObserver:
    def __init__(
        self,
        engine: LogEngine,
        *,
        threshold_ms: Optional[float] = None,
        tick_ms: float = 10.0,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._engine = engine
        self.threshold_ms = (
            engine.config.long_task_ms if threshold_ms is None else threshold_ms
        )
        self.tick_ms = tick_ms
        self._clock = clock or engine.clock
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start on the running loop. Raises ``RuntimeError`` without one."""
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._watch(), name="hooktrace-long-tasks")

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _watch(self) -> None:
        tick = self.tick_ms / 1000.0
        while True:
            before = self._clock()
            await asyncio.sleep(tick)
            after = self._clock()
            stall = after - before - self.tick_ms
            if stall >= self.threshold_ms:
                self.observe(LongTask(start_time=before, duration=after - before))

    def observe(self, task: LongTask) -> None:
        try:
            self._engine.on_long_tasks([task])
        except Exception:
            pass


class InteractionObserver:
    def __init__(
        self,
        engine: LogEngine,
        *,
        threshold_ms: Optional[float] = None,
    ) -> None:
        self._engine = engine
        self.threshold_ms = (
            engine.config.interaction_ms if threshold_ms is None else threshold_ms
        )
        self._pending: List[InteractionTiming] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._scheduled = False

    def start(self) -> None:
        """Bind to the running loop. Raises ``RuntimeError`` without one."""
        self._loop = asyncio.get_running_loop()

    def stop(self) -> None:
        self._loop = None
        self.deliver()

    def report(self, timing: InteractionTiming) -> None:
        if timing.duration < self.threshold_ms:
            return
        self._pending.append(timing)
        if self._loop is None or self._loop.is_closed():
            self.deliver()
            return
        if not self._scheduled:
            # reports from one dispatch arrive together in the next batch
            self._scheduled = True
            self._loop.call_soon_threadsafe(self.deliver)

    def deliver(self) -> None:
        self._scheduled = False
        batch, self._pending = self._pending, []
        if not batch:
            return
        try:
            self._engine.on_interactions(batch)
        except Exception:
            pass


class Observers:
    """The observers started for one engine."""

    def __init__(
        self,
        long_tasks: Optional[LongTaskObserver],
        interactions: Optional[InteractionObserver],
    ) -> None:
        self.long_tasks = long_tasks
        self.interactions = interactions

    @property
    def any(self) -> bool:
        return self.long_tasks is not None or self.interactions is not None

    def stop(self) -> None:
        if self.long_tasks is not None:
            self.long_tasks.stop()
        if self.interactions is not None:
            self.interactions.stop()


def install_observers(engine: LogEngine) -> Observers:
    """Start whatever observers the environment supports.

    With at least one running, the engine buffers and groups; with none, it
    keeps printing every entry as it comes. Never raises.
    """
    long_tasks: Optional[LongTaskObserver] = LongTaskObserver(engine)
    try:
        long_tasks.start()
    except Exception:
        long_tasks = None

    interactions: Optional[InteractionObserver] = InteractionObserver(engine)
    try:
        interactions.start()
    except Exception:
        interactions = None

    observers = Observers(long_tasks, interactions)
    engine.buffered = observers.any
    return observers
