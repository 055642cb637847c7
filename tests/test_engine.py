from hooktrace.tracking.engine import (
    LogEngine,
    partition,
    select_slowest_interactions,
    summarize,
)
from hooktrace.tracking.entries import (
    EFFECT_RUN,
    SLOW_EFFECT,
    STATE_CHANGE,
    InteractionTiming,
    LogEntry,
    LongTask,
)
from hooktrace.tracking.printer import Printer, RecordingChannels


def _entry(time, type=STATE_CHANGE, key="App.py:6:App", message=None):
    return LogEntry(message or f"entry@{time}", time, type, key.rsplit(":", 1)[0], key)


def _interaction(iid, duration, start=0.0, name="click"):
    return InteractionTiming(
        name=name,
        interaction_id=iid,
        start_time=start,
        duration=duration,
        processing_start=start,
        processing_end=start + duration,
    )


# ---------------- pure helpers ----------------
def test_partition_bounds_are_inclusive():
    buffer = [_entry(t) for t in (9.9, 10.0, 15.0, 20.0, 20.1)]
    before, during, after = partition(buffer, 10.0, 20.0)
    assert [e.time for e in before] == [9.9]
    assert [e.time for e in during] == [10.0, 15.0, 20.0]
    assert [e.time for e in after] == [20.1]


def test_summary_counts_state_changes_and_the_rest():
    entries = [
        _entry(1),
        _entry(2),
        _entry(3, EFFECT_RUN),
        _entry(4, SLOW_EFFECT),
    ]
    assert summarize(entries) == "2 effect→setState, 2 other effects"
    assert summarize(entries[:1]) == "1 effect→setState"
    assert summarize(entries[2:]) == "2 other effects"


def test_slowest_report_wins_per_interaction():
    reports = [
        _interaction(7, 210, name="pointerdown"),
        _interaction(7, 320, name="click"),
        _interaction(7, 250, name="pointerup"),
        _interaction(0, 900, name="scroll"),
        _interaction(9, 205, name="keydown"),
    ]
    chosen = select_slowest_interactions(reports)
    assert [(r.interaction_id, r.name) for r in chosen] == [(7, "click"), (9, "keydown")]


# ---------------- buffering ----------------
def test_entries_wait_in_the_buffer(engine, channels, scheduler):
    engine.log("a changed", STATE_CHANGE, "App.py:6", "App.py:6:App")
    assert channels.records == []
    assert len(engine.buffer) == 1
    assert engine.timer.pending
    assert len(scheduler.calls) == 1


def test_timer_is_armed_once_while_pending(engine, scheduler):
    for i in range(5):
        engine.log(f"m{i}")
    assert len(scheduler.calls) == 1


def test_fallback_flush_prints_individually_without_effect_runs(
    engine, channels, scheduler, clock
):
    engine.log('changed use_state "a" because it was initially mounted', STATE_CHANGE, "App.py:5", "App.py:5:App")
    engine.log("ran because x changed", EFFECT_RUN, "App.py:8", "App.py:8:App")
    engine.log("Slow effect: took 9ms", SLOW_EFFECT, "App.py:8", "App.py:8:App")

    scheduler.advance(99)
    assert channels.records == []

    scheduler.advance(1)
    assert channels.records == [
        ("log", '[state-change] changed use_state "a" because it was initially mounted', 0),
        ("warn", "[slow-effect] Slow effect: took 9ms", 0),
    ]
    assert engine.buffer == []
    assert engine.timer.state == "idle"


def test_timer_rearms_after_firing(engine, scheduler):
    engine.log("first")
    scheduler.advance(100)
    engine.log("second")
    assert engine.timer.pending
    assert len(scheduler.calls) == 1


def test_flushing_an_empty_buffer_prints_nothing(engine, channels):
    engine.flush()
    engine.flush()
    assert channels.records == []


def test_only_effect_runs_flush_to_nothing(engine, channels, scheduler):
    engine.log("ran because it was initially mounted", EFFECT_RUN)
    scheduler.advance(100)
    assert channels.records == []
    assert engine.buffer == []


# ---------------- long tasks ----------------
def test_long_task_groups_entries_inside_it(engine, channels, clock):
    start = clock.now
    for name in ("a", "b", "c"):
        clock.advance(1)
        engine.log(f'changed use_state "{name}"', STATE_CHANGE, "App.py:6", "App.py:6:App")
    clock.advance(1)
    engine.log("other", STATE_CHANGE, "Nav.py:2", "Nav.py:2:Nav")

    engine.on_long_tasks([LongTask(start_time=start, duration=60.4)])

    assert channels.records == [
        ("group", "Long Task (60ms) — 4 effect→setState", 0),
        ("log", '[state-change] 1/3 changed use_state "a"', 1),
        ("log", '[state-change] 2/3 changed use_state "b"', 1),
        ("log", '[state-change] 3/3 changed use_state "c"', 1),
        ("log", "[state-change] other", 1),
        ("group_end", "", 0),
    ]
    assert engine.buffer == []


def test_long_task_prints_earlier_entries_and_keeps_later_ones(engine, channels, clock):
    engine.log("early", STATE_CHANGE, "A.py:1", "A.py:1:A")
    engine.log("early context", EFFECT_RUN, "A.py:2", "A.py:2:A")
    clock.advance(10)
    task_start = clock.now
    engine.log("inside", STATE_CHANGE, "B.py:1", "B.py:1:B")
    engine.log("inside context", EFFECT_RUN, "B.py:2", "B.py:2:B")
    clock.advance(80)
    engine.log("late", STATE_CHANGE, "C.py:1", "C.py:1:C")

    engine.on_long_tasks([LongTask(start_time=task_start, duration=55)])

    assert channels.records == [
        ("log", "[state-change] early", 0),
        ("group", "Long Task (55ms) — 1 effect→setState, 1 other effects", 0),
        ("log", "[state-change] inside", 1),
        ("info", "[effect-run] inside context", 1),
        ("group_end", "", 0),
    ]
    assert [e.message for e in engine.buffer] == ["late"]


def test_retained_entries_are_printed_exactly_once(engine, channels, clock, scheduler):
    engine.log("inside", STATE_CHANGE, "A.py:1", "A.py:1:A")
    start = clock.now
    clock.advance(100)
    engine.log("after", STATE_CHANGE, "A.py:1", "A.py:1:A")

    engine.on_long_tasks([LongTask(start_time=start, duration=60)])
    engine.on_long_tasks([LongTask(start_time=start, duration=60)])
    scheduler.advance(100)
    engine.flush()

    texts = channels.texts()
    assert texts.count("[state-change] inside") == 1
    assert texts.count("[state-change] after") == 1


def test_long_task_with_nothing_inside_prints_no_group(engine, channels, clock):
    engine.log("before", STATE_CHANGE, "A.py:1", "A.py:1:A")
    clock.advance(100)
    engine.on_long_tasks([LongTask(start_time=clock.now - 50, duration=50)])
    assert channels.records == [("log", "[state-change] before", 0)]


# ---------------- interactions ----------------
def test_slow_interaction_groups_with_worst_event_label(engine, channels, clock):
    start = clock.now
    clock.advance(5)
    engine.log('changed use_state "a"', STATE_CHANGE, "App.py:6", "App.py:6:App")
    engine.log('changed use_state "b"', STATE_CHANGE, "App.py:6", "App.py:6:App")
    clock.advance(5)

    engine.on_interactions(
        [
            InteractionTiming("pointerdown", 42, start, 210, start, start + 2),
            InteractionTiming("click", 42, start - 50, 320.4, start, start + 20),
        ]
    )

    assert channels.records == [
        ("group", "Slow Interaction: click (320ms) — 2 effect→setState", 0),
        ("log", '[state-change] 1/2 changed use_state "a"', 1),
        ("log", '[state-change] 2/2 changed use_state "b"', 1),
        ("group_end", "", 0),
    ]


def test_interaction_prints_earlier_entries_without_effect_runs(engine, channels, clock):
    engine.log("ran because it was initially mounted", EFFECT_RUN, "A.py:1", "A.py:1:A")
    engine.log("set before", STATE_CHANGE, "A.py:2", "A.py:2:A")
    clock.advance(10)
    engine.on_interactions([_interaction(3, 250, start=clock.now)])
    assert channels.records == [("log", "[state-change] set before", 0)]
    assert engine.buffer == []


def test_interaction_without_id_is_ignored(engine, channels, clock):
    engine.log("pending", STATE_CHANGE, "A.py:1", "A.py:1:A")
    engine.on_interactions([_interaction(0, 500, start=clock.now - 1)])
    assert channels.records == []
    assert len(engine.buffer) == 1


# ---------------- output paths ----------------
def test_custom_logger_bypasses_the_buffer(engine, channels):
    received = []
    engine.sink = received.append
    engine.log("one", EFFECT_RUN)
    engine.log("two", SLOW_EFFECT)
    assert received == ["one", "two"]
    assert engine.buffer == []
    assert channels.records == []


def test_failing_logger_does_not_reach_the_caller(engine):
    def broken(_message):
        raise IOError("pipe closed")

    engine.sink = broken
    engine.log("still fine")


def test_unbuffered_engine_prints_immediately():
    channels = RecordingChannels()
    engine = LogEngine(Printer(channels), buffered=False)
    engine.log("set it", STATE_CHANGE)
    engine.log("ran", EFFECT_RUN)
    engine.log("took 9ms", SLOW_EFFECT)
    assert channels.records == [
        ("log", "set it", 0),
        ("info", "ran", 0),
        ("warn", "took 9ms", 0),
    ]
    assert engine.buffer == []


def test_printer_failure_is_swallowed(engine, scheduler):
    class Broken(RecordingChannels):
        def log(self, text):
            raise ValueError("closed stream")

    engine.printer = Printer(Broken())
    engine.log("x")
    scheduler.advance(100)
    assert engine.buffer == []


def test_detach_flushes_and_stops_buffering(engine, channels):
    engine.log("pending", STATE_CHANGE, "A.py:1", "A.py:1:A")
    engine.detach()
    assert channels.texts() == ["[state-change] pending"]
    engine.log("now direct")
    assert channels.texts()[-1] == "now direct"
    assert engine.timer.state == "idle"
