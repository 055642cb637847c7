import asyncio
from typing import Callable, List, Tuple

import pytest

from hooktrace.config import TrackerConfig
from hooktrace.core import runtime as render_runtime
from hooktrace.core.hook import HookContext
from hooktrace.tracking import runtime as tracking
from hooktrace.tracking.engine import LogEngine
from hooktrace.tracking.printer import Printer, RecordingChannels


class ManualClock:
    """Engine clock in ms that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class ManualScheduler:
    """Collects ``call_later`` requests; ``advance`` fires the due ones."""

    def __init__(self, clock: ManualClock) -> None:
        self._clock = clock
        self.calls: List[Tuple[float, Callable[[], None]]] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        self.calls.append((self._clock.now + round(delay * 1000.0, 6), callback))

    def advance(self, ms: float) -> None:
        self._clock.advance(ms)
        due = [c for c in self.calls if c[0] <= self._clock.now]
        self.calls = [c for c in self.calls if c[0] > self._clock.now]
        for _when, callback in due:
            callback()


@pytest.fixture(autouse=True)
def _isolated_runtime():
    tracking.configure(TrackerConfig(color=False))
    tracking.set_logger(None)
    tracking.reset_tracker()
    tracking.state_cache.clear()
    tracking.reducer_cache.clear()
    render_runtime.reset()
    yield
    tracking.set_engine(None)
    tracking.set_logger(None)
    tracking.reset_tracker()
    render_runtime.reset()
    HookContext._services.clear()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def channels():
    return RecordingChannels()


@pytest.fixture
def engine(clock, scheduler, channels):
    """A buffering engine on a manual clock, installed as the process engine."""
    eng = LogEngine(
        Printer(channels),
        config=tracking.get_config(),
        clock=clock,
        scheduler=scheduler,
        buffered=True,
    )
    tracking.set_engine(eng)
    return eng


@pytest.fixture
def messages(engine):
    """Entries delivered synchronously through a custom logger."""
    received: List[str] = []
    tracking.set_logger(received.append)
    return received


def mount(component_fn) -> HookContext:
    ctx = HookContext(component_fn.__name__, component_fn)
    render_runtime.schedule_rerender(ctx, reason="test mount")
    return ctx


def run(coro):
    return asyncio.run(coro)
