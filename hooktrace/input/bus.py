from contextlib import contextmanager
from contextvars import ContextVar
from itertools import count
from typing import Callable, Iterator, Literal, Optional, TypedDict

from hooktrace.tracking.entries import InteractionTiming
from hooktrace.tracking.scheduler import monotonic_ms


class Event(TypedDict, total=False):
    type: Literal["text", "submit", "key"]  # expand if desired
    value: str
    source: Literal["web", "term"]
    ts: float


Subscriber = Callable[[Event], None]
TimingReporter = Callable[[InteractionTiming], None]

_interaction_ids = count(1)
_current_interaction: ContextVar[int] = ContextVar("input_interaction", default=0)


class InputBus:
    """Input bus (thread-safe enough for use with ``asyncio``).

    Each ``emit`` is timed and reported to ``reporter`` as an
    ``InteractionTiming``. Events emitted inside ``interaction()`` share
    that interaction's id; the interaction itself is reported too, covering
    everything done inside the block.
    """

    def __init__(
        self,
        reporter: Optional[TimingReporter] = None,
        *,
        clock: Callable[[], float] = monotonic_ms,
    ):
        self._subs: list[Subscriber] = []
        self.reporter = reporter
        self._clock = clock

    def subscribe(self, fn: Subscriber):
        if fn not in self._subs:
            self._subs.append(fn)

        def unsubscribe():
            try:
                self._subs.remove(fn)
            except ValueError:
                pass

        return unsubscribe

    @contextmanager
    def interaction(self, name: str) -> Iterator[int]:
        interaction_id = next(_interaction_ids)
        token = _current_interaction.set(interaction_id)
        start = self._clock()
        try:
            yield interaction_id
        finally:
            _current_interaction.reset(token)
            self._report(name, interaction_id, start, self._clock())

    def emit(self, ev: Event) -> None:
        interaction_id = _current_interaction.get() or next(_interaction_ids)
        start = self._clock()
        for fn in list(self._subs):
            try:
                fn(ev)
            except Exception:
                # don't let a bad subscriber kill the others
                pass
        self._report(ev.get("type", "event"), interaction_id, start, self._clock())

    def _report(self, name: str, interaction_id: int, start: float, end: float) -> None:
        if self.reporter is None:
            return
        try:
            self.reporter(
                InteractionTiming(
                    name=name,
                    interaction_id=interaction_id,
                    start_time=start,
                    duration=end - start,
                    processing_start=start,
                    processing_end=end,
                )
            )
        except Exception:
            pass
