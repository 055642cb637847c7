from collections import deque
from threading import RLock
from typing import Callable, Deque, Dict, List, Optional

Record = Dict[str, object]


class DiagnosticsBuffer:
    """
    Ring buffer of printed tracker output, shared between the render loop
    (writer) and the web app (reader).

    - `append(channel, text, depth)` stores one record, dropping the oldest
      once `max_records` is reached.
    - `dump()` returns a copy of the current records.
    - `subscribe(cb)`/`unsubscribe(cb)` register callbacks invoked on each append.
    """

    def __init__(self, max_records: int = 2000) -> None:
        self._records: Deque[Record] = deque(maxlen=max(1, int(max_records)))
        self._subs: List[Callable[[Record], None]] = []
        self._lock: RLock = RLock()

    def append(self, channel: str, text: str, depth: int = 0) -> None:
        record: Record = {"channel": channel, "text": text, "depth": depth}
        with self._lock:
            self._records.append(record)

        for cb in list(self._subs):
            try:
                cb(record)
            except Exception:
                pass

    # ---------------- Public API ----------------
    def dump(self) -> List[Record]:
        with self._lock:
            return [dict(r) for r in self._records]

    def text(self) -> str:
        lines = []
        for r in self.dump():
            prefix = "▸ " if r["channel"] == "group" else ""
            lines.append(f"{'  ' * int(r['depth'])}{prefix}{r['text']}")
        return "\n".join(lines)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def subscribe(self, cb: Callable[[Record], None]) -> None:
        with self._lock:
            if cb not in self._subs:
                self._subs.append(cb)

    def unsubscribe(self, cb: Callable[[Record], None]) -> None:
        with self._lock:
            try:
                self._subs.remove(cb)
            except ValueError:
                pass


class BufferChannels:
    """Printer channels that write into a ``DiagnosticsBuffer``."""

    def __init__(self, buffer: Optional[DiagnosticsBuffer] = None) -> None:
        self.buffer = buffer if buffer is not None else DiagnosticsBuffer()
        self._depth = 0

    def log(self, text: str) -> None:
        self.buffer.append("log", text, self._depth)

    def info(self, text: str) -> None:
        self.buffer.append("info", text, self._depth)

    def warn(self, text: str) -> None:
        self.buffer.append("warn", text, self._depth)

    def group_collapsed(self, label: str) -> None:
        self.buffer.append("group", label, self._depth)
        self._depth += 1

    def group_end(self) -> None:
        self._depth = max(0, self._depth - 1)
