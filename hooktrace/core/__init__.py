# hooktrace/core/__init__.py
from .hook import HookContext, Ref
from .runtime import schedule_rerender, run_renders, settle
from .core import VNode
from .core import component, hooks, current_component, current_component_name

__all__ = [
    "HookContext",
    "Ref",
    "schedule_rerender",
    "run_renders",
    "settle",
    "VNode",
    "component",
    "hooks",
    "current_component",
    "current_component_name",
]
