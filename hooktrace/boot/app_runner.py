import asyncio
import threading
import time
from typing import Optional

from hooktrace.core import runtime as render_runtime
from hooktrace.core.hook import HookContext
from hooktrace.core.runtime import run_renders, schedule_rerender, settle
from hooktrace.input.bus import InputBus
from hooktrace.tracking import runtime as tracking
from hooktrace.tracking.engine import LogEngine
from hooktrace.tracking.observers import Observers, install_observers
from hooktrace.tracking.printer import Printer, TeeChannels
from hooktrace.web.buffer import BufferChannels, DiagnosticsBuffer


def _emit_text_and_submit(bus: InputBus, text: str) -> None:
    now = time.time()
    bus.emit({"type": "text", "value": text, "source": "term", "ts": now})
    bus.emit({"type": "submit", "value": text, "source": "term", "ts": now})


class AppRunner:
    """Background runner that manages the render loop, input dispatching and
    the tracker's timing observers.

    Usage:
        app = AppRunner(Boot)
        app.invoke("hello", wait=True)
        ...
        app.shutdown()

    Observers only exist while the loop runs, so tracker output is grouped by
    long tasks and slow interactions for the lifetime of the runner and goes
    back to immediate printing after ``shutdown``.
    """

    def __init__(
        self,
        app_component_fn,
        *,
        fps: int = 20,
        engine: Optional[LogEngine] = None,
        diagnostics: Optional[DiagnosticsBuffer] = None,
    ):
        self._app_component_fn = app_component_fn
        self._fps: int = max(1, int(fps))
        self._loop: asyncio.AbstractEventLoop = asyncio.new_event_loop()
        self._thread: threading.Thread = threading.Thread(
            target=self._thread_main, name="hooktrace-app-loop", daemon=True
        )
        self._stopping: bool = False
        self._ready: threading.Event = threading.Event()

        self.engine: LogEngine = engine if engine is not None else tracking.get_engine()
        self.diagnostics = diagnostics
        if diagnostics is not None:
            self.engine.printer = Printer(
                TeeChannels(self.engine.printer.channels, BufferChannels(diagnostics))
            )

        self._root_ctx: Optional[HookContext] = None
        self._bus: Optional[InputBus] = None
        self._observers: Optional[Observers] = None

        self._thread.start()
        self._ready.wait()

    @property
    def bus(self) -> Optional[InputBus]:
        return self._bus

    def invoke(
        self, text: str, *, wait: bool = False, timeout: Optional[float] = None
    ) -> None:
        """Send a line of input to the app via the InputBus.

        The whole dispatch is one interaction. If wait=True, blocks until the
        renders it triggered have settled or until timeout.
        """
        if self._stopping or self._bus is None:
            return

        async def _do_emit_and_maybe_wait(txt: str, should_wait: bool):
            with self._bus.interaction("submit"):
                _emit_text_and_submit(self._bus, txt)
                if should_wait:
                    await settle()

        fut = asyncio.run_coroutine_threadsafe(
            _do_emit_and_maybe_wait(text, wait), self._loop
        )
        if wait:
            try:
                fut.result(timeout=timeout)
            except Exception:
                return

    def flush_diagnostics(self, timeout: float = 1.0) -> None:
        """Print whatever the tracker still holds in its buffer."""
        if self._stopping:
            return

        async def _task():
            self.engine.flush()

        fut = asyncio.run_coroutine_threadsafe(_task(), self._loop)
        try:
            fut.result(timeout=timeout)
        except Exception:
            pass

    def shutdown(self) -> None:
        """Stop render loop and background threads."""
        if self._stopping:
            return
        self._stopping = True

        # Nudge the loop so the sleep wakes up promptly
        def _noop():
            return None

        try:
            self._loop.call_soon_threadsafe(_noop)
        except Exception:
            pass
        # Wait loop thread to exit
        self._thread.join(timeout=2.0)

    # -------------------------------
    # Internal: loop thread
    # -------------------------------
    def _thread_main(self) -> None:
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_until_complete(self._loop_main())
        finally:
            self._loop.close()

    async def _loop_main(self) -> None:
        render_runtime.reset()

        self._observers = install_observers(self.engine)
        interactions = self._observers.interactions
        self._bus = InputBus(
            reporter=interactions.report if interactions is not None else None
        )
        HookContext._services["input_bus"] = self._bus

        self._root_ctx = HookContext(
            self._app_component_fn.__name__, self._app_component_fn
        )
        schedule_rerender(self._root_ctx, reason="app startup")
        try:
            # mount before accepting input so subscriptions made in effects exist
            await settle()
        finally:
            self._ready.set()

        interval = 1.0 / max(1, self._fps)
        try:
            while not self._stopping:
                await run_renders()
                await asyncio.sleep(interval)
        finally:
            try:
                if self._root_ctx is not None:
                    self._root_ctx.unmount()
            except Exception:
                pass
            self._observers.stop()
            await asyncio.sleep(0)  # let the cancelled heartbeat finish
            self.engine.detach()
            HookContext._services.pop("input_bus", None)
