# context.py -------------------------------------------------
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence


@dataclass
class EffectTracker:
    """What the effect currently executing is, and why it ran."""

    location: str
    component_name: str
    changed_deps: Optional[List[str]]
    dep_names: Optional[Sequence[Optional[str]]] = None
    state_was_set: bool = False
    kind: str = "use_effect"

    @property
    def count_key(self) -> str:
        return f"{self.location}:{self.component_name}"


class ExecutionContextTracker:
    """Holds the "effect currently running" slot.

    Save/restore works like the host's component stack: ``install`` returns a
    token and ``restore`` puts back whatever was there before, so nested
    effects unwind in order.
    """

    def __init__(self, name: str = "effect_tracker") -> None:
        self._var: ContextVar[Optional[EffectTracker]] = ContextVar(name, default=None)

    def current(self) -> Optional[EffectTracker]:
        return self._var.get()

    def install(self, tracker: Optional[EffectTracker]) -> Token:
        return self._var.set(tracker)

    def restore(self, token: Token) -> None:
        self._var.reset(token)

    def reset(self) -> None:
        self._var.set(None)

    @contextmanager
    def active(self, tracker: EffectTracker) -> Iterator[EffectTracker]:
        token = self.install(tracker)
        try:
            yield tracker
        finally:
            self.restore(token)
