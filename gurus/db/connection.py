"""SQLite connection management (aiosqlite), one connection per operation."""

import logging
import os

import aiosqlite

from gurus import config
from gurus.db.schema import SCHEMA

logger = logging.getLogger(__name__)


async def get_db() -> aiosqlite.Connection:
    """Open a connection. Callers close it in a ``finally`` block."""
    db = await aiosqlite.connect(config.SQLITE_DB_PATH)
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA foreign_keys = ON")
    return db


async def init_db() -> None:
    """Create all tables if they don't exist. Called once at app startup."""
    directory = os.path.dirname(config.SQLITE_DB_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)
    db = await get_db()
    try:
        await db.executescript(SCHEMA)
        await db.commit()
    finally:
        await db.close()
    logger.info("Database ready at %s", config.SQLITE_DB_PATH)
