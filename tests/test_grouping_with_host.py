"""Tracked hooks feeding a buffering engine, drained by timing windows."""

from hooktrace.core.core import component
from hooktrace.core.runtime import settle
from hooktrace.tracking.effects import tracked_use_effect
from hooktrace.tracking.entries import InteractionTiming, LongTask
from hooktrace.tracking.mutations import tracked_use_state

from conftest import mount, run


@component
def App():
    _a, set_a = tracked_use_state(0, "App.py:3", "App", "a")
    _b, set_b = tracked_use_state(0, "App.py:4", "App", "b")

    def effect():
        set_a(1)
        set_b(2)

    tracked_use_effect(effect, [], "App.py:6", "App", [])
    tracked_use_effect(lambda: None, [], "App.py:10", "App", [])
    return []


def _render_app(clock):
    start = clock.now

    async def scenario():
        mount(App)
        await settle()

    run(scenario())
    clock.advance(5)
    return start, clock.now


def test_long_task_groups_a_render(engine, channels, clock):
    start, end = _render_app(clock)
    engine.on_long_tasks([LongTask(start_time=start - 1, duration=end - start + 10)])

    assert channels.records == [
        ("group", "Long Task (15ms) — 2 effect→setState, 1 other effects", 0),
        (
            "log",
            '[state-change] 1/2 use_effect App.py:6 in App changed use_state "a" '
            "because it was initially mounted",
            1,
        ),
        (
            "log",
            '[state-change] 2/2 use_effect App.py:6 in App changed use_state "b" '
            "because it was initially mounted",
            1,
        ),
        (
            "info",
            "[effect-run] use_effect App.py:10 in App ran because it was initially mounted",
            1,
        ),
        ("group_end", "", 0),
    ]


def test_no_window_falls_back_to_timed_flush(engine, channels, clock, scheduler):
    _render_app(clock)
    assert channels.records == []

    scheduler.advance(200)
    texts = channels.texts()
    assert texts == [
        '[state-change] 1/2 use_effect App.py:6 in App changed use_state "a" '
        "because it was initially mounted",
        '[state-change] 2/2 use_effect App.py:6 in App changed use_state "b" '
        "because it was initially mounted",
    ]
    assert all(c != "group" for c, _t, _d in channels.records)


def test_slow_interaction_groups_a_render(engine, channels, clock):
    start, end = _render_app(clock)
    engine.on_interactions(
        [InteractionTiming("click", 42, start - 50, 320, start - 1, end + 1)]
    )
    group = channels.records[0]
    assert group == (
        "group",
        "Slow Interaction: click (320ms) — 2 effect→setState, 1 other effects",
        0,
    )
    assert channels.records[-1] == ("group_end", "", 0)
    assert len(channels.records) == 5
