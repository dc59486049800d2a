"""WebSocket host exposing the draw poker engine to a session manager."""

from .server import EngineServer, RequestError

__all__ = ["EngineServer", "RequestError"]
