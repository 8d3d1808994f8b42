"""Copilot module: in-app assistant and model listing."""

from gurus.copilot.routes import router as copilot_router

__all__ = ["copilot_router"]
