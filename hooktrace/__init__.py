"""hooktrace: a hook/component runtime that explains its own re-render cascades."""

from .config import TrackerConfig
from .core import HookContext, component, hooks
from .tracking import (
    get_engine,
    set_logger,
    tracked,
    tracked_use_effect,
    tracked_use_layout_effect,
    tracked_use_reducer,
    tracked_use_state,
)

__all__ = [
    "TrackerConfig",
    "HookContext",
    "component",
    "hooks",
    "get_engine",
    "set_logger",
    "tracked",
    "tracked_use_effect",
    "tracked_use_layout_effect",
    "tracked_use_reducer",
    "tracked_use_state",
]

__version__ = "0.1.0"
