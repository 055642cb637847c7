# effects.py -------------------------------------------------
"""Tracked ``use_effect`` / ``use_layout_effect``.

Every run of a tracked effect:

1. works out why it ran (first run, or which deps changed),
2. installs an ``EffectTracker`` so tracked setters called from the body can
   attribute themselves to it,
3. times the body and restores the previous tracker, also when it raises,
4. reports a ``slow-effect`` entry for bodies at or above the threshold and an
   ``effect-run`` entry when the body set no state.
"""

import inspect
from typing import Callable, Optional, Sequence

from ..core.core import hooks
from . import runtime
from .context import EffectTracker
from .deps import changed_deps, describe_reason
from .entries import EFFECT_RUN, SLOW_EFFECT
from .engine import round_ms


class EffectInstrumentor:
    """Per-registration memory for one tracked effect hook slot.

    Lives in a ``use_ref`` box, so it survives re-renders of the component.
    """

    def __init__(self, kind: str = "use_effect") -> None:
        self.kind = kind
        self.prev_deps: Optional[list] = None
        self.initial = True

    def next_changed_deps(self, deps, dep_names) -> Optional[list]:
        if self.initial:
            self.initial = False
            changed = None
        else:
            changed = changed_deps(self.prev_deps, deps, dep_names)
            if changed is None:
                changed = []
        self.prev_deps = list(deps) if deps is not None else None
        return changed

    def run(
        self,
        callback: Callable,
        deps: Optional[Sequence],
        location: str,
        component_name: str,
        dep_names: Optional[Sequence[Optional[str]]],
    ):
        changed = self.next_changed_deps(deps, dep_names)
        tracker = EffectTracker(
            location, component_name, changed, dep_names, kind=self.kind
        )

        if inspect.iscoroutinefunction(callback):
            return self._run_async(callback, tracker)

        engine = runtime.get_engine()
        start = engine.clock()
        with runtime.contexts.active(tracker):
            cleanup = callback()
        duration = engine.clock() - start

        if duration >= engine.config.slow_effect_ms:
            runtime.log(
                f"Slow effect: {tracker.kind} {location} in {component_name} "
                f"took {round_ms(duration)}ms",
                SLOW_EFFECT,
                location,
                tracker.count_key,
            )
        self._report_run(tracker)
        return cleanup

    async def _run_async(self, callback: Callable, tracker: EffectTracker):
        # awaited bodies yield to the loop, so their wall time is not reported
        with runtime.contexts.active(tracker):
            cleanup = await callback()
        self._report_run(tracker)
        return cleanup

    def _report_run(self, tracker: EffectTracker) -> None:
        if tracker.state_was_set:
            return
        runtime.log(
            f"{tracker.kind} {tracker.location} in {tracker.component_name} "
            f"ran because {describe_reason(tracker.changed_deps)}",
            EFFECT_RUN,
            tracker.location,
            tracker.count_key,
        )


def _tracked_effect(
    register: Callable,
    kind: str,
    callback: Callable,
    deps: Optional[Sequence],
    location: str,
    component_name: str,
    dep_names: Optional[Sequence[Optional[str]]],
) -> None:
    if not runtime.get_config().enabled:
        register(callback, deps)
        return

    ref = hooks.use_ref(None)
    if ref.current is None:
        ref.current = EffectInstrumentor(kind)
    instrumentor: EffectInstrumentor = ref.current

    def effect():
        return instrumentor.run(callback, deps, location, component_name, dep_names)

    register(effect, deps)


def tracked_use_effect(callback, deps, location: str, component_name: str, dep_names=None) -> None:
    _tracked_effect(
        hooks.use_effect, "use_effect", callback, deps, location, component_name, dep_names
    )


def tracked_use_layout_effect(
    callback, deps, location: str, component_name: str, dep_names=None
) -> None:
    """Layout effects run synchronously right after render, so ``async def``
    bodies are rejected with ``TypeError``."""
    if inspect.iscoroutinefunction(callback):
        raise TypeError(
            f"use_layout_effect {location} in {component_name}: layout effects "
            "cannot be coroutine functions, use use_effect instead"
        )
    _tracked_effect(
        hooks.use_layout_effect,
        "use_layout_effect",
        callback,
        deps,
        location,
        component_name,
        dep_names,
    )
