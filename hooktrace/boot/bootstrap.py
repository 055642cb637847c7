from typing import Optional

from hooktrace.config import TrackerConfig
from hooktrace.tracking import runtime as tracking
from hooktrace.web.buffer import DiagnosticsBuffer

from .app_runner import AppRunner


def bootstrap(
    app_component_fn,
    *,
    fps: int = 20,
    config: Optional[TrackerConfig] = None,
    diagnostics: Optional[DiagnosticsBuffer] = None,
) -> AppRunner:
    """Create and start an AppRunner for the given root component.

    ``config`` defaults to ``TrackerConfig.from_env()``.
    """
    tracking.configure(config if config is not None else TrackerConfig.from_env())
    return AppRunner(app_component_fn, fps=fps, diagnostics=diagnostics)
