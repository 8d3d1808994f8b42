"""Comparison module: topic submission and the worldview pipeline."""

from gurus.comparison.routes import router as topics_router

__all__ = ["topics_router"]
