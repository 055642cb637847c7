# runtime.py -------------------------------------------------
import asyncio
from typing import Optional


rerender_queue: asyncio.Queue = asyncio.Queue()
_enqueued: set = set()

_render_idle: Optional[asyncio.Event] = None  # will be created on demand
_render_signal: Optional[asyncio.Event] = None  # set when a render is scheduled


def get_render_idle() -> asyncio.Event:
    """Ensure the ``Event`` belongs to the currently running loop."""
    global _render_idle
    if _render_idle is None:
        _render_idle = asyncio.Event()
        _render_idle.set()  # start in the 'idle' state
    return _render_idle


def get_render_signal() -> asyncio.Event:
    """Event that is set whenever a rerender is scheduled, and cleared after run_renders drains the queue."""
    global _render_signal
    if _render_signal is None:
        _render_signal = asyncio.Event()
    return _render_signal


def schedule_rerender(ctx, reason: str = None):
    loop = asyncio.get_running_loop()
    reasons = ctx.__dict__.setdefault("_render_reasons", [])
    if reason:
        reasons.append(reason)
    if ctx in _enqueued:
        return
    _enqueued.add(ctx)
    get_render_idle().clear()

    def _enqueue():
        try:
            rerender_queue.put_nowait(ctx)
        finally:
            get_render_signal().set()  # Set the signal only after the ctx is in the queue to avoid races

    loop.call_soon_threadsafe(_enqueue)


def commit(ctx) -> None:
    """Render ``ctx`` and run its layout effects (synchronous part of a pass)."""
    ctx.render()
    ctx.run_layout_effects()


async def run_renders() -> None:
    # Drain the queue without awaiting on an initially-empty queue
    while True:
        try:
            ctx = rerender_queue.get_nowait()
        except asyncio.QueueEmpty:
            break
        _enqueued.discard(ctx)
        if getattr(ctx, "_mounted", True):
            ctx._render_reasons = []
            commit(ctx)
            await ctx.run_effects()

    # Mark idle and clear signal after draining current batch
    if rerender_queue.empty() and not _enqueued:
        get_render_idle().set()
        get_render_signal().clear()


async def settle(max_passes: int = 100) -> int:
    """Run render passes until nothing is scheduled. Returns the pass count.

    ``schedule_rerender`` enqueues through ``call_soon``, so each pass first
    yields to the loop to let pending enqueues land.
    """
    passes = 0
    while passes < max_passes:
        await asyncio.sleep(0)
        if rerender_queue.empty() and not _enqueued:
            break
        await run_renders()
        passes += 1
    return passes


def reset() -> None:
    """Drop every scheduled render. Used between app runs and in tests."""
    global _render_idle, _render_signal
    while True:
        try:
            rerender_queue.get_nowait()
        except asyncio.QueueEmpty:
            break
    _enqueued.clear()
    _render_idle = None
    _render_signal = None
