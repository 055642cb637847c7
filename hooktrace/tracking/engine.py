"""Buffered logging with time-window grouping.

Entries are buffered with a timestamp. When a timing window arrives (a long
event-loop stall or a slow input interaction) the buffer is split into what
happened before, during and after it: ``before`` is printed right away,
``during`` is printed inside one collapsed group, ``after`` stays buffered
for the next window. If no window shows up, a debounced timer flushes the
buffer as individual lines.

``effect-run`` entries only ever appear inside a group, as context for the
state changes around them.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..config import TrackerConfig
from .entries import (
    EFFECT_RUN,
    STATE_CHANGE,
    EntryType,
    InteractionTiming,
    LogEntry,
    LongTask,
    TimingWindow,
)
from .printer import Printer
from .scheduler import AsyncioScheduler, FlushTimer, Scheduler, monotonic_ms

Sink = Callable[[str], None]


def partition(
    buffer: Sequence[LogEntry], start: float, end: float
) -> Tuple[List[LogEntry], List[LogEntry], List[LogEntry]]:
    """Split ``buffer`` around ``[start, end]`` (inclusive), keeping order."""
    before: List[LogEntry] = []
    during: List[LogEntry] = []
    after: List[LogEntry] = []
    for entry in buffer:
        if entry.time < start:
            before.append(entry)
        elif entry.time <= end:
            during.append(entry)
        else:
            after.append(entry)
    return before, during, after


def summarize(entries: Iterable[LogEntry]) -> str:
    entries = list(entries)
    state_changes = sum(1 for e in entries if e.type == STATE_CHANGE)
    others = len(entries) - state_changes
    parts = []
    if state_changes > 0:
        parts.append(f"{state_changes} effect→setState")
    if others > 0:
        parts.append(f"{others} other effects")
    return ", ".join(parts)


def round_ms(duration: float) -> int:
    # half-up
    return int(duration + 0.5) if duration >= 0 else -int(-duration + 0.5)


def long_task_window(task: LongTask) -> TimingWindow:
    return TimingWindow(
        start=task.start_time,
        end=task.start_time + task.duration,
        label=f"Long Task ({round_ms(task.duration)}ms)",
    )


def interaction_window(report: InteractionTiming) -> TimingWindow:
    return TimingWindow(
        start=report.processing_start,
        end=report.processing_end,
        label=f"Slow Interaction: {report.name} ({round_ms(report.duration)}ms)",
    )


def select_slowest_interactions(
    reports: Iterable[InteractionTiming],
) -> List[InteractionTiming]:
    """One report per interaction id, the longest one (later wins a tie).

    Reports without an interaction id are dropped. Ids keep the order in
    which they were first seen.
    """
    slowest = {}
    for report in reports:
        if not report.interaction_id:
            continue
        best = slowest.get(report.interaction_id)
        if best is None or report.duration >= best.duration:
            slowest[report.interaction_id] = report
    return list(slowest.values())


class LogEngine:
    def __init__(
        self,
        printer: Optional[Printer] = None,
        *,
        config: Optional[TrackerConfig] = None,
        clock: Callable[[], float] = monotonic_ms,
        scheduler: Optional[Scheduler] = None,
        buffered: bool = False,
    ) -> None:
        self.config = config or TrackerConfig()
        self.printer = printer or Printer()
        self.clock = clock
        self.buffered = buffered
        self.sink: Optional[Sink] = None
        self.buffer: List[LogEntry] = []
        self._scheduler = scheduler or AsyncioScheduler()
        self.timer = FlushTimer(self._scheduler, self.config.flush_delay_ms, self.flush)

    # ---------------- intake ----------------
    def log(
        self,
        message: str,
        type: EntryType = STATE_CHANGE,
        location: str = "",
        count_key: str = "",
    ) -> None:
        if self.sink is not None:
            try:
                self.sink(message)
            except Exception:
                pass
            return

        if not self.buffered:
            self._quietly(self.printer.print_single, type, message)
            return

        self.buffer.append(LogEntry(message, self.clock(), type, location, count_key))
        self.timer.arm()

    # ---------------- draining ----------------
    def flush(self) -> None:
        pending, self.buffer = self.buffer, []
        visible = [e for e in pending if e.type != EFFECT_RUN]
        if visible:
            self._quietly(self.printer.print_entries, visible)

    def detach(self) -> None:
        """Flush and go back to immediate printing, e.g. when the loop that
        drove the observers and the timer is gone."""
        self.flush()
        self.buffered = False
        self.timer = FlushTimer(self._scheduler, self.config.flush_delay_ms, self.flush)

    def on_long_tasks(self, tasks: Iterable[LongTask]) -> None:
        for task in tasks:
            self.apply_window(long_task_window(task))

    def on_interactions(self, reports: Iterable[InteractionTiming]) -> None:
        for report in select_slowest_interactions(reports):
            self.apply_window(interaction_window(report))

    def apply_window(self, window: TimingWindow) -> None:
        before, during, after = partition(self.buffer, window.start, window.end)
        # the buffer holds only ``after`` from here on; nothing is visited twice
        self.buffer = after

        visible = [e for e in before if e.type != EFFECT_RUN]
        if visible:
            self._quietly(self.printer.print_entries, visible)

        if during:
            self._quietly(self._print_group, f"{window.label} — {summarize(during)}", during)

    def _print_group(self, label: str, entries: List[LogEntry]) -> None:
        self.printer.group_collapsed(label)
        try:
            self.printer.print_entries(entries)
        finally:
            self.printer.group_end()

    @staticmethod
    def _quietly(fn, *args) -> None:
        # output problems must never reach the instrumented app
        try:
            fn(*args)
        except Exception:
            pass
