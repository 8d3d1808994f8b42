"""Chat module: per-worldview expert conversations."""

from gurus.chat.routes import router as chat_router

__all__ = ["chat_router"]
