"""Database layer for SQLite (aiosqlite)."""

from gurus.db.connection import get_db, init_db
from gurus.db.schema import SCHEMA
