from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from .buffer import DiagnosticsBuffer


def create_fastapi_app(buffer: DiagnosticsBuffer, runner=None) -> FastAPI:
    """Create a FastAPI app that serves the tracker output held in ``buffer``.

    When ``runner`` (an ``AppRunner``) is given, ``POST /input`` forwards a
    line of text to it, the same way the terminal does.
    """
    app = FastAPI(title="hooktrace diagnostics")
    app.state.diagnostics = buffer
    app.state.app_runner = runner

    @app.get("/diagnostics")
    async def diagnostics(channel: Optional[str] = None):
        records = buffer.dump()
        if channel:
            records = [r for r in records if r["channel"] == channel]
        return JSONResponse({"records": records})

    @app.get("/diagnostics/text")
    async def diagnostics_text():
        return PlainTextResponse(buffer.text())

    @app.delete("/diagnostics")
    async def clear_diagnostics():
        buffer.clear()
        return Response(status_code=204)

    @app.post("/input")
    async def send_input(request: Request):
        if runner is None:
            return JSONResponse({"error": "no app attached"}, status_code=409)
        payload = await request.json()
        text = str(payload.get("text", ""))
        if not text.strip():
            return JSONResponse({"error": "empty input"}, status_code=400)
        runner.invoke(text, wait=bool(payload.get("wait", True)), timeout=5.0)
        return JSONResponse({"ok": True})

    @app.get("/favicon.ico")
    async def favicon():
        return Response(status_code=204, media_type="image/x-icon")

    return app
