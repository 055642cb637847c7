# runtime.py -------------------------------------------------
"""Process-wide tracker state: the engine, the execution context and the
wrapper caches. Everything here is replaceable so tests can drive the
instrumentation without a running app."""

from typing import Optional

from ..config import TrackerConfig
from .cache import WrapperCache
from .context import EffectTracker, ExecutionContextTracker
from .engine import LogEngine, Sink
from .entries import EntryType, STATE_CHANGE
from .printer import ConsoleChannels, Printer

_config: Optional[TrackerConfig] = None
_engine: Optional[LogEngine] = None
_sink: Optional[Sink] = None

contexts = ExecutionContextTracker()
state_cache = WrapperCache()
reducer_cache = WrapperCache()


def get_config() -> TrackerConfig:
    global _config
    if _config is None:
        _config = TrackerConfig.from_env()
    return _config


def configure(config: TrackerConfig) -> None:
    """Replace the config. The next ``get_engine`` builds a fresh engine."""
    global _config, _engine
    _config = config
    _engine = None


def get_engine() -> LogEngine:
    global _engine
    if _engine is None:
        config = get_config()
        _engine = LogEngine(Printer(ConsoleChannels(color=config.color)), config=config)
        _engine.sink = _sink
    return _engine


def set_engine(engine: Optional[LogEngine]) -> None:
    """Install ``engine``. A logger set with ``set_logger`` carries over unless
    the engine already has a sink of its own."""
    global _engine
    if engine is not None and engine.sink is None:
        engine.sink = _sink
    _engine = engine


def set_logger(sink: Optional[Sink]) -> None:
    """Send every entry straight to ``sink`` (no buffering, no grouping).

    ``None`` restores the default console path. The logger belongs to the
    process: engines built later by ``configure``/``get_engine`` use it too.
    """
    global _sink
    _sink = sink
    if _engine is not None:
        _engine.sink = sink


def get_logger() -> Optional[Sink]:
    return _sink


def log(
    message: str,
    type: EntryType = STATE_CHANGE,
    location: str = "",
    count_key: str = "",
) -> None:
    get_engine().log(message, type, location, count_key)


def current_tracker() -> Optional[EffectTracker]:
    return contexts.current()


def reset_tracker() -> None:
    contexts.reset()
