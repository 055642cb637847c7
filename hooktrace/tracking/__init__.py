# hooktrace/tracking/__init__.py
from .cache import HookMeta, TrackedEntry, WrapperCache
from .context import EffectTracker, ExecutionContextTracker
from .deps import changed_deps, describe_reason, same_value
from .effects import EffectInstrumentor, tracked_use_effect, tracked_use_layout_effect
from .engine import LogEngine, partition, select_slowest_interactions, summarize
from .entries import (
    EFFECT_RUN,
    SLOW_EFFECT,
    STATE_CHANGE,
    InteractionTiming,
    LogEntry,
    LongTask,
    TimingWindow,
)
from .mutations import tracked_use_reducer, tracked_use_state
from .observers import InteractionObserver, LongTaskObserver, install_observers
from .printer import ConsoleChannels, Printer, RecordingChannels, TeeChannels
from .proxy import tracked
from .runtime import (
    configure,
    current_tracker,
    get_engine,
    get_logger,
    reset_tracker,
    set_engine,
    set_logger,
)
from .scheduler import AsyncioScheduler, FlushTimer

__all__ = [
    "HookMeta",
    "TrackedEntry",
    "WrapperCache",
    "EffectTracker",
    "ExecutionContextTracker",
    "changed_deps",
    "describe_reason",
    "same_value",
    "EffectInstrumentor",
    "tracked_use_effect",
    "tracked_use_layout_effect",
    "LogEngine",
    "partition",
    "select_slowest_interactions",
    "summarize",
    "EFFECT_RUN",
    "SLOW_EFFECT",
    "STATE_CHANGE",
    "InteractionTiming",
    "LogEntry",
    "LongTask",
    "TimingWindow",
    "tracked_use_reducer",
    "tracked_use_state",
    "InteractionObserver",
    "LongTaskObserver",
    "install_observers",
    "ConsoleChannels",
    "Printer",
    "RecordingChannels",
    "TeeChannels",
    "tracked",
    "configure",
    "current_tracker",
    "get_engine",
    "get_logger",
    "reset_tracker",
    "set_engine",
    "set_logger",
    "AsyncioScheduler",
    "FlushTimer",
]
