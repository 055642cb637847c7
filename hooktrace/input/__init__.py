from .bus import Event, InputBus

__all__ = ["Event", "InputBus"]
