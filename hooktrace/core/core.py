# core.py ----------------------------------------------------
from contextvars import ContextVar
from functools import wraps
from typing import Optional

_context_stack = ContextVar("component_context", default=None)


class _HookProxy:

    def __getattr__(self, name):
        # ensure the correct component instance is used in the hook (set in HookContext.render)
        comp = _context_stack.get()
        if comp is None:
            raise RuntimeError(
                f"hooks.{name}() can only be used during render."
            )
        return getattr(comp, name)


hooks = _HookProxy()


def current_component():
    """The ``HookContext`` currently rendering, or ``None`` outside render."""
    return _context_stack.get()


def current_component_name(default: str = "Anonymous") -> str:
    comp = _context_stack.get()
    name: Optional[str] = getattr(comp, "name", None)
    return name or default


class VNode:
    def __init__(self, component_fn, props=None, key=None):
        self.component_fn = component_fn
        self.props = props or {}
        self.key = key

    def __repr__(self):
        return f"<VNode {self.component_fn.__name__} key={self.key!r}>"


def component(fn):
    @wraps(fn)
    def wrapper(*, key=None, _render=False, **props):
        if _render:  # called by HookContext.render
            return fn(**props)
        return VNode(wrapper, props=props, key=key)
    return wrapper
