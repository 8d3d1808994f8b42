"""Worldview Explorer backend."""
