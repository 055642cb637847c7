# config.py --------------------------------------------------
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

import dotenv


_ENV_PREFIX = "HOOKTRACE_"
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class TrackerConfig:
    """Thresholds and switches for the render-cascade tracker.

    All durations are milliseconds.
    """

    slow_effect_ms: float = 8.0  # effect bodies at or above this are reported
    flush_delay_ms: float = 100.0  # quiet period before the fallback flush
    long_task_ms: float = 50.0  # loop stalls at or above this form a window
    interaction_ms: float = 200.0  # input handling at or above this forms a window
    enabled: bool = True
    color: bool = True

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, *, load_dotenv: bool = True
    ) -> "TrackerConfig":
        """Build a config from ``HOOKTRACE_*`` variables.

        A ``.env`` file in the working directory is loaded first (existing
        variables win). Values that do not parse keep their default.
        """
        if load_dotenv and environ is None:
            dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))
        env = os.environ if environ is None else environ

        values = {}
        for f in fields(cls):
            raw = env.get(_ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            if f.type in (bool, "bool"):
                values[f.name] = raw.strip().lower() not in _FALSY
                continue
            try:
                number = float(raw)
            except ValueError:
                continue
            if number >= 0:
                values[f.name] = number
        return cls(**values)
