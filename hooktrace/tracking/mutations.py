# mutations.py -----------------------------------------------
"""Tracked ``use_state`` / ``use_reducer``.

The host hands back the same setter (or dispatch) on every render of a hook
slot. The first time a setter is seen it gets one wrapper, cached against
it. The wrapper mirrors the current value in its closure so it can tell,
synchronously, whether a call really changes state; when it does and an
effect is running, the change is attributed to that effect.
"""

from typing import Any, Callable, Optional

from ..core.core import hooks
from . import runtime
from .cache import HookMeta, TrackedEntry, weak_callable
from .deps import describe_reason, same_value
from .entries import STATE_CHANGE


def _report_state_change(hook: str, meta: HookMeta) -> None:
    tracker = runtime.contexts.current()
    if tracker is None:
        return
    tracker.state_was_set = True
    runtime.log(
        f"{tracker.kind} {tracker.location} in {tracker.component_name} "
        f'changed {hook} "{meta.state_name}" because {describe_reason(tracker.changed_deps)}',
        STATE_CHANGE,
        tracker.location,
        tracker.count_key,
    )


def make_state_wrapper(raw_set_state: Callable, value: Any, meta: HookMeta) -> Callable:
    raw_ref = weak_callable(raw_set_state)

    def set_state(value_or_updater):
        nonlocal value
        new_value = (
            value_or_updater(value) if callable(value_or_updater) else value_or_updater
        )
        if not same_value(value, new_value):
            _report_state_change("use_state", meta)
        value = new_value

        raw = raw_ref()
        if raw is not None:
            raw(value_or_updater)

    set_state.__qualname__ = f"tracked_set_state[{meta.state_name}]"
    return set_state


def make_dispatch_wrapper(
    raw_dispatch: Callable, reducer_box: list, state: Any, meta: HookMeta
) -> Callable:
    """``reducer_box[0]`` is read on each call, so the mirror follows the
    reducer of the latest render, like the host dispatch does."""
    raw_ref = weak_callable(raw_dispatch)

    def dispatch(action):
        nonlocal state
        next_state = reducer_box[0](state, action)
        if not same_value(state, next_state):
            _report_state_change("use_reducer", meta)
        state = next_state

        raw = raw_ref()
        if raw is not None:
            raw(action)

    dispatch.__qualname__ = f"tracked_dispatch[{meta.state_name}]"
    return dispatch


def tracked_use_state(initial, location: str, component_name: str, state_name: Optional[str]):
    state, raw_set_state = hooks.use_state(initial)
    if not runtime.get_config().enabled:
        return state, raw_set_state

    meta = HookMeta(location, component_name, state_name or "unnamed")
    tracked = runtime.state_cache.get_or_create(
        raw_set_state,
        lambda: TrackedEntry(make_state_wrapper(raw_set_state, state, meta), meta),
    )
    return state, tracked.wrapper


def tracked_use_reducer(
    reducer,
    initial,
    init_fn,
    location: str,
    component_name: str,
    state_name: Optional[str],
):
    state, raw_dispatch = hooks.use_reducer(reducer, initial, init_fn=init_fn)
    if not runtime.get_config().enabled:
        return state, raw_dispatch

    meta = HookMeta(location, component_name, state_name or "unnamed")

    def _create() -> TrackedEntry:
        box = [reducer]
        return TrackedEntry(make_dispatch_wrapper(raw_dispatch, box, state, meta), meta, box)

    tracked = runtime.reducer_cache.get_or_create(raw_dispatch, _create)
    tracked.reducer_box[0] = reducer
    return state, tracked.wrapper
