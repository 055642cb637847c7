def run_web(
    app_component_fn, *, host="127.0.0.1", port=8000, reload=False, **uvicorn_kwargs
):
    """Run the app and serve its tracker output over HTTP."""
    import uvicorn
    from hooktrace.boot.bootstrap import bootstrap
    from hooktrace.web.buffer import DiagnosticsBuffer
    from hooktrace.web.server import create_fastapi_app

    diagnostics = DiagnosticsBuffer()
    app = bootstrap(app_component_fn, diagnostics=diagnostics)
    fastapi_app = create_fastapi_app(diagnostics, runner=app)
    try:
        uvicorn.run(fastapi_app, host=host, port=port, reload=reload, **uvicorn_kwargs)
    finally:
        app.shutdown()
