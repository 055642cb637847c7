from .buffer import BufferChannels, DiagnosticsBuffer
from .server import create_fastapi_app

__all__ = ["BufferChannels", "DiagnosticsBuffer", "create_fastapi_app"]
