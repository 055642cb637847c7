from .bootstrap import bootstrap
from .terminal import read_terminal_and_invoke
from .web import run_web
from .app_runner import AppRunner

__all__ = [
    "run_web",
    "bootstrap",
    "AppRunner",
    "read_terminal_and_invoke",
]
