# hook.py ----------------------------------------------------
from typing import Any, Callable, Dict, List
from .core import VNode
from .runtime import schedule_rerender
import asyncio
import warnings


class Ref:
    """Mutable box returned by ``use_ref``; stable for the life of the hook slot."""

    __slots__ = ("current",)

    def __init__(self, current=None) -> None:
        self.current = current

    def __repr__(self):
        return f"Ref({self.current!r})"


class HookContext:
    _services: Dict = {}

    @classmethod
    def get_service(cls, key, factory):
        service = cls._services.get(key)
        if service is None:
            service = factory()
            cls._services[key] = service
        return service

    def __init__(self, name, component_fn, *, props=None, key=None) -> None:
        self.name = name
        self.component_fn = component_fn
        self.props = props or {}
        self.key = key

        self.hooks: list = []
        self.effects: list = []
        self.layout_effects: list = []
        self.children: list["HookContext"] = []
        self.hook_idx: int = 0
        self._effect_slots: set[int] = set()
        # setter/dispatch per hook slot, handed out unchanged on every render
        self._setters: Dict[int, Callable[[Any], None]] = {}
        self._mounted: bool = (
            True  # Track mount lifecycle to avoid rerenders after unmount
        )

    def use_state(self, initial):
        idx = self.hook_idx
        if idx >= len(self.hooks):
            self.hooks.append(initial() if callable(initial) else initial)

        set_state = self._setters.get(idx)
        if set_state is None:

            def set_state(val):
                if not self._mounted:  # Ignore state updates after unmount
                    return
                if callable(val):
                    val = val(self.hooks[idx])

                if val != self.hooks[idx]:
                    self.hooks[idx] = val
                    schedule_rerender(self, reason=f"use_state[{idx}] set -> {val}")

            self._setters[idx] = set_state

        self.hook_idx += 1
        return self.hooks[idx], set_state

    def use_reducer(self, reducer, initial, *, init_fn=None, deps=None):
        """
        Semantics similar to React.useReducer:
        - reducer(state, action) -> new_state
        - initial: initial state (used only on the first mount, unless 'deps' is provided)
        - init_fn(optional): lazy initializer init_fn(initial) -> state
        - deps(optional): if provided, when changed, the state is REINITIALIZED with init_fn(initial) or initial.

        The returned dispatch is the same object on every render of this slot.
        """
        deps_key = None if deps is None else tuple(deps)  # [] → () (immutable object)
        idx = self.hook_idx

        if idx >= len(self.hooks):  # first mount
            state0 = init_fn(initial) if init_fn is not None else initial
            self.hooks.append((state0, reducer, deps_key))
        else:  # updates
            state, old_reducer, old_deps = self.hooks[idx]

            if (
                deps_key is not None and old_deps != deps_key
            ):  # Reinit due to deps change (optional)
                state = init_fn(initial) if init_fn is not None else initial
                self.hooks[idx] = (state, reducer, deps_key)
            elif old_reducer is not reducer:
                # dispatch always uses the reducer from the latest render
                self.hooks[idx] = (state, reducer, old_deps)

        dispatch = self._setters.get(idx)
        if dispatch is None:

            def dispatch(action):
                if not self._mounted:  # Ignore dispatch after unmount
                    return
                s, r, dkey = self.hooks[idx]
                new_state = r(s, action)
                if new_state != s:
                    self.hooks[idx] = (new_state, r, dkey)

                    schedule_rerender(
                        self, reason=f"use_reducer[{idx}] dispatch {action} -> {new_state}"
                    )

            self._setters[idx] = dispatch

        state, _r, _d = self.hooks[idx]
        self.hook_idx += 1
        return state, dispatch  # return the pair (state, dispatch)

    def use_ref(self, initial=None) -> Ref:
        idx = self.hook_idx
        if idx >= len(self.hooks):
            self.hooks.append(Ref(initial))
        self.hook_idx += 1
        return self.hooks[idx]

    def _register_effect(self, queue: List, effect_fn, deps):
        # deps=None -> run after every render, [] -> run once on mount
        deps_key = None if deps is None else tuple(deps)
        idx = self.hook_idx

        if idx >= len(self.hooks):  # first mount
            self.hooks.append((None, deps_key))
            queue.append((effect_fn, deps_key, idx))
            self._effect_slots.add(idx)
        else:  # updates
            old_cleanup, old_deps = self.hooks[idx]
            if deps_key is None or old_deps != deps_key:
                queue.append((effect_fn, deps_key, idx))
                self.hooks[idx] = (old_cleanup, deps_key)

        self.hook_idx += 1

    def use_effect(self, effect_fn, deps=None):
        self._register_effect(self.effects, effect_fn, deps)

    def use_layout_effect(self, effect_fn, deps=None):
        """Like ``use_effect`` but runs synchronously as soon as the tree has
        rendered, before any regular effect of the same render pass."""
        self._register_effect(self.layout_effects, effect_fn, deps)

    def _run_cleanup_slot(self, slot):
        cleanup = slot[0] if isinstance(slot, tuple) else None
        if cleanup:
            try:
                if asyncio.iscoroutinefunction(cleanup):
                    asyncio.create_task(cleanup())
                else:
                    cleanup()
            except Exception:
                pass

    def unmount(self):
        # 1. Run pending cleanups
        for idx in list(self._effect_slots):
            if idx < len(self.hooks):
                self._run_cleanup_slot(self.hooks[idx])

        # 2. Unmount children recursively
        for child in self.children:
            child.unmount()

        # 3. GC
        self.children.clear()
        self.hooks.clear()
        self.effects.clear()
        self.layout_effects.clear()
        self._effect_slots.clear()
        self._setters.clear()
        # mark as unmounted to skip future rerenders
        self._mounted = False

    def render(self):
        from . import core

        token = core._context_stack.set(self)

        try:
            self.hook_idx = 0
            self.effects = []
            self.layout_effects = []

            # 1. store old children and start a new empty list
            old_children = self.children
            self.children = []

            # 2. execute component function
            output = self.component_fn(_render=True, **self.props)
            vnodes = output if isinstance(output, list) else [output]

            # 3. reconciliation – reuse or create child contexts
            for idx, vnode in enumerate(vnodes):
                if not isinstance(vnode, VNode):
                    continue

                vnode_key = vnode.key if vnode.key is not None else f"__idx_{idx}"

                # 4. search for match in old_children
                matched = next(
                    (
                        c
                        for c in old_children
                        if (
                            c.key
                            if c.key is not None
                            else f"__idx_{old_children.index(c)}"
                        )
                        == vnode_key
                        and c.component_fn is vnode.component_fn
                    ),
                    None,
                )

                # 5. warn if there are duplicate siblings without keys
                if vnode.key is None:
                    dup = any(
                        (c.component_fn is vnode.component_fn and c.key is None)
                        for c in self.children
                    )
                    if dup:
                        warnings.warn(
                            f"Sibling <{vnode.component_fn.__name__}> with no explicit 'key'; it can cause extra re-render.",
                            RuntimeWarning,
                            stacklevel=2,
                        )

                if matched is None:
                    matched = HookContext(
                        vnode.component_fn.__name__,
                        vnode.component_fn,
                        props=vnode.props,
                        key=vnode.key,
                    )
                else:
                    matched.props = vnode.props

                self.children.append(matched)

            # 6. recursively unmount orphans
            for orphan in old_children:
                if orphan not in self.children:
                    orphan.unmount()

            # 7. recursively render current children
            for child in self.children:
                child.render()
        finally:
            # 8. restore previous component
            core._context_stack.reset(token)

    def run_layout_effects(self):
        pending, self.layout_effects = self.layout_effects, []
        for fx, deps, idx in pending:
            cln, _ = self.hooks[idx]
            if cln:
                cln()
            res = fx()
            self.hooks[idx] = ((res if callable(res) else None), deps)

        for ch in self.children:
            ch.run_layout_effects()

    async def run_effects(self):
        pending, self.effects = self.effects, []
        for fx, deps, idx in pending:
            cln, _ = self.hooks[idx]
            if cln:
                if asyncio.iscoroutinefunction(cln):
                    await cln()
                else:
                    cln()
            res = fx()
            if asyncio.iscoroutine(res):
                res = await res
            self.hooks[idx] = ((res if callable(res) else None), deps)

        for ch in self.children:
            await ch.run_effects()

    def __repr__(self):
        return f"<HookContext {self.name} key={self.key!r} mounted={self._mounted}>"
