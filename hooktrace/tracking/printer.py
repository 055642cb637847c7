"""Console output for tracker entries.

Each entry type goes to its own channel so consumers can filter:
``state-change`` -> ``log``, ``effect-run`` -> ``info``, ``slow-effect`` ->
``warn``. Channels also open and close collapsible groups.
"""

from __future__ import annotations

import sys
from collections import Counter
from typing import Dict, Iterable, List, Optional, Protocol, TextIO, Tuple

from .entries import EFFECT_RUN, SLOW_EFFECT, EntryType, LogEntry

# ANSI constants
RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
FG_GRAY = "\x1b[90m"
FG_YELLOW = "\x1b[33m"
FG_MAGENTA = "\x1b[35m"
FG_CYAN = "\x1b[36m"


class Channels(Protocol):
    def log(self, text: str) -> None: ...

    def info(self, text: str) -> None: ...

    def warn(self, text: str) -> None: ...

    def group_collapsed(self, label: str) -> None: ...

    def group_end(self) -> None: ...


class ConsoleChannels:
    """Writes to stdout (log/info) and stderr (warn), indenting inside groups."""

    def __init__(
        self,
        *,
        color: bool = True,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ) -> None:
        self._color = color
        self._out = out
        self._err = err
        self._depth = 0

    def _write(self, stream: TextIO, text: str, style: str = "") -> None:
        pad = "  " * self._depth
        if self._color and style:
            text = f"{style}{text}{RESET}"
        print(f"{pad}{text}", file=stream, flush=True)

    def log(self, text: str) -> None:
        self._write(self._out or sys.stdout, text, FG_MAGENTA)

    def info(self, text: str) -> None:
        self._write(self._out or sys.stdout, text, FG_GRAY)

    def warn(self, text: str) -> None:
        self._write(self._err or sys.stderr, text, FG_YELLOW)

    def group_collapsed(self, label: str) -> None:
        marker = f"{FG_CYAN}▸{RESET} " if self._color else "▸ "
        self._write(self._out or sys.stdout, f"{marker}{label}", BOLD)
        self._depth += 1

    def group_end(self) -> None:
        self._depth = max(0, self._depth - 1)


class RecordingChannels:
    """Keeps ``(channel, text, depth)`` tuples instead of printing."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str, int]] = []
        self._depth = 0

    def _record(self, channel: str, text: str) -> None:
        self.records.append((channel, text, self._depth))

    def log(self, text: str) -> None:
        self._record("log", text)

    def info(self, text: str) -> None:
        self._record("info", text)

    def warn(self, text: str) -> None:
        self._record("warn", text)

    def group_collapsed(self, label: str) -> None:
        self._record("group", label)
        self._depth += 1

    def group_end(self) -> None:
        self._depth = max(0, self._depth - 1)
        self._record("group_end", "")

    def texts(self, channel: Optional[str] = None) -> List[str]:
        return [t for c, t, _d in self.records if channel is None or c == channel]


class TeeChannels:
    """Fans every call out to several channel sets."""

    def __init__(self, *targets: Channels) -> None:
        self._targets = targets

    def log(self, text: str) -> None:
        for t in self._targets:
            t.log(text)

    def info(self, text: str) -> None:
        for t in self._targets:
            t.info(text)

    def warn(self, text: str) -> None:
        for t in self._targets:
            t.warn(text)

    def group_collapsed(self, label: str) -> None:
        for t in self._targets:
            t.group_collapsed(label)

    def group_end(self) -> None:
        for t in self._targets:
            t.group_end()


class Printer:
    def __init__(self, channels: Optional[Channels] = None) -> None:
        self.channels: Channels = channels if channels is not None else ConsoleChannels()

    def print_single(self, type: EntryType, text: str) -> None:
        if type == SLOW_EFFECT:
            self.channels.warn(text)
        elif type == EFFECT_RUN:
            self.channels.info(text)
        else:
            self.channels.log(text)

    def print_entries(self, entries: Iterable[LogEntry]) -> None:
        """Print one batch; ``i/N`` is shown when ``N`` entries share a count key."""
        entries = list(entries)
        totals = Counter(entry.count_key for entry in entries)
        seen: Dict[str, int] = {}
        for entry in entries:
            idx = seen.get(entry.count_key, 0) + 1
            seen[entry.count_key] = idx
            total = totals[entry.count_key]
            count = f" {idx}/{total}" if total > 1 else ""
            self.print_single(entry.type, f"[{entry.type}]{count} {entry.message}")

    def group_collapsed(self, label: str) -> None:
        self.channels.group_collapsed(label)

    def group_end(self) -> None:
        self.channels.group_end()
