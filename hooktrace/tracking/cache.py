# cache.py ---------------------------------------------------
import inspect
import weakref
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class HookMeta:
    location: str
    component_name: str
    state_name: str


@dataclass
class TrackedEntry:
    wrapper: Callable
    meta: HookMeta
    # latest reducer for dispatch wrappers, replaced on every render
    reducer_box: Optional[list] = None


def weak_callable(fn: Callable) -> Callable[[], Optional[Callable]]:
    """Weak reference to ``fn`` that also works for bound methods."""
    if inspect.ismethod(fn):
        return weakref.WeakMethod(fn)
    return weakref.ref(fn)


class WrapperCache:
    """One tracking wrapper per raw setter/dispatch object.

    Keys are held weakly. Wrappers must only keep a weak reference to their
    raw callable (see ``weak_callable``), otherwise the value would keep its
    own key alive and the entry would never go away.
    """

    def __init__(self) -> None:
        self._entries: "weakref.WeakKeyDictionary[Callable, TrackedEntry]" = (
            weakref.WeakKeyDictionary()
        )

    def get(self, raw: Callable) -> Optional[TrackedEntry]:
        return self._entries.get(raw)

    def get_or_create(
        self, raw: Callable, factory: Callable[[], TrackedEntry]
    ) -> TrackedEntry:
        tracked = self._entries.get(raw)
        if tracked is None:
            tracked = factory()
            self._entries[raw] = tracked
        return tracked

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, raw) -> bool:
        return raw in self._entries

    def __len__(self) -> int:
        return len(self._entries)
