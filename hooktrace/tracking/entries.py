# entries.py -------------------------------------------------
from dataclasses import dataclass
from typing import Literal

EntryType = Literal["state-change", "effect-run", "slow-effect"]

# An effect called a setter/dispatch with a new value; a re-render follows.
STATE_CHANGE: EntryType = "state-change"
# An effect ran without setting state. Only printed inside a group, as context.
EFFECT_RUN: EntryType = "effect-run"
# An effect body took at least ``slow_effect_ms``.
SLOW_EFFECT: EntryType = "slow-effect"


@dataclass(frozen=True)
class LogEntry:
    message: str
    time: float  # engine clock, ms
    type: EntryType = STATE_CHANGE
    location: str = ""
    count_key: str = ""


@dataclass(frozen=True)
class LongTask:
    """A finished stall of the event loop."""

    start_time: float
    duration: float
    name: str = "self"


@dataclass(frozen=True)
class InteractionTiming:
    """Timing of one dispatched input event.

    Several reports may share an ``interaction_id`` when one logical input
    produced more than one event; ``0`` means not part of an interaction.
    """

    name: str
    interaction_id: int
    start_time: float
    duration: float
    processing_start: float
    processing_end: float


@dataclass(frozen=True)
class TimingWindow:
    start: float
    end: float
    label: str
