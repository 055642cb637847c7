# proxy.py ---------------------------------------------------
import os
import sys
from typing import Optional, Sequence

from ..core.core import current_component_name
from .effects import tracked_use_effect, tracked_use_layout_effect
from .mutations import tracked_use_reducer, tracked_use_state


def _caller_location(depth: int = 2) -> str:
    try:
        frame = sys._getframe(depth)
    except ValueError:
        return "<unknown>"
    return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"


class _TrackedHookProxy:
    """Drop-in for ``hooks`` that records where each hook was called.

    The location is the caller's ``file.py:line``, the component is the one
    rendering. Names cannot be recovered at runtime, pass them explicitly:

        count, set_count = tracked.use_state(0, name="count")
        tracked.use_effect(lambda: set_count(len(items)), [items], names=["items"])
    """

    def use_state(self, initial, *, name: Optional[str] = None):
        return tracked_use_state(
            initial, _caller_location(), current_component_name(), name
        )

    def use_reducer(self, reducer, initial, *, init_fn=None, name: Optional[str] = None):
        return tracked_use_reducer(
            reducer, initial, init_fn, _caller_location(), current_component_name(), name
        )

    def use_effect(self, effect_fn, deps=None, *, names: Optional[Sequence[str]] = None):
        tracked_use_effect(
            effect_fn, deps, _caller_location(), current_component_name(), names
        )

    def use_layout_effect(
        self, effect_fn, deps=None, *, names: Optional[Sequence[str]] = None
    ):
        tracked_use_layout_effect(
            effect_fn, deps, _caller_location(), current_component_name(), names
        )


tracked = _TrackedHookProxy()
