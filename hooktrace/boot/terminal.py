import asyncio

from .app_runner import AppRunner


async def read_terminal_and_invoke(
    app: AppRunner, *, prompt: str = ">> ", wait: bool = True
):
    """Minimal async loop that reads lines from stdin and forwards to app.invoke().

    Built-in commands (prefix with ':' or '/'):
      - :flush           → print what the tracker still buffers
      - :q|:quit|:exit   → quit

    - Reading happens via run_in_executor to avoid blocking the event loop.
    - Stop the loop by sending :q / :quit / :exit (case-sensitive) or Ctrl+C.
    """
    loop = asyncio.get_running_loop()
    try:
        while True:
            txt = await loop.run_in_executor(None, input, prompt)
            s = (txt or "").strip()
            if s.startswith(":") or s.startswith("/"):
                cmd = s[1:].strip()
                if not cmd:
                    continue
                if cmd in ("q", "quit", "exit"):
                    break
                if cmd == "flush":
                    app.flush_diagnostics()
                    continue
                print(f"\x1b[90m[hooktrace]\x1b[0m unknown command: {cmd}")
                continue
            app.invoke(s, wait=wait)
    except (EOFError, KeyboardInterrupt):
        pass
    finally:
        app.shutdown()
