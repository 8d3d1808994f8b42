"""SQLite CRUD operations for chat sessions and their messages."""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from gurus.db import get_db


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _session_row(r) -> Dict[str, Any]:
    return {
        "id": r["id"],
        "worldview": r["worldview"],
        "title": r["title"],
        "model": r["model"],
        "provider": r["provider"],
        "createdAt": r["created_at"],
        "updatedAt": r["updated_at"],
    }


def _message_row(r) -> Dict[str, Any]:
    return {
        "id": r["id"],
        "sessionId": r["session_id"],
        "content": r["content"],
        "isUser": bool(r["is_user"]),
        "model": r["model"],
        "provider": r["provider"],
        "createdAt": r["created_at"],
    }


async def create_session(
    worldview: str,
    title: str,
    model: Optional[str] = None,
    provider: Optional[str] = None,
) -> Dict[str, Any]:
    session_id = str(uuid.uuid4())
    now = _now()
    db = await get_db()
    try:
        await db.execute(
            """INSERT INTO chat_sessions (id, worldview, title, model, provider, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (session_id, worldview, title, model, provider, now, now),
        )
        await db.commit()
    finally:
        await db.close()

    return {
        "id": session_id,
        "worldview": worldview,
        "title": title,
        "model": model,
        "provider": provider,
        "createdAt": now,
        "updatedAt": now,
    }


async def get_sessions(worldview: Optional[str] = None) -> List[Dict[str, Any]]:
    """All sessions, most recently active first, optionally for one worldview."""
    db = await get_db()
    try:
        if worldview:
            rows = await db.execute_fetchall(
                """SELECT id, worldview, title, model, provider, created_at, updated_at
                   FROM chat_sessions WHERE worldview = ?
                   ORDER BY updated_at DESC""",
                (worldview,),
            )
        else:
            rows = await db.execute_fetchall(
                """SELECT id, worldview, title, model, provider, created_at, updated_at
                   FROM chat_sessions ORDER BY updated_at DESC"""
            )
        return [_session_row(r) for r in rows]
    finally:
        await db.close()


async def get_session(session_id: str) -> Optional[Dict[str, Any]]:
    db = await get_db()
    try:
        rows = await db.execute_fetchall(
            """SELECT id, worldview, title, model, provider, created_at, updated_at
               FROM chat_sessions WHERE id = ?""",
            (session_id,),
        )
        return _session_row(rows[0]) if rows else None
    finally:
        await db.close()


async def delete_session(session_id: str) -> bool:
    """Delete a session; its messages go with it (ON DELETE CASCADE)."""
    db = await get_db()
    try:
        cursor = await db.execute("DELETE FROM chat_sessions WHERE id = ?", (session_id,))
        await db.commit()
        return cursor.rowcount > 0
    finally:
        await db.close()


async def add_message(
    session_id: str,
    content: str,
    is_user: bool,
    model: Optional[str] = None,
    provider: Optional[str] = None,
) -> Dict[str, Any]:
    """Append a message and bump the session's updated_at."""
    message_id = str(uuid.uuid4())
    now = _now()
    db = await get_db()
    try:
        await db.execute(
            """INSERT INTO chat_messages (id, session_id, content, is_user, model, provider, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (message_id, session_id, content, int(is_user), model, provider, now),
        )
        await db.execute(
            "UPDATE chat_sessions SET updated_at = ? WHERE id = ?",
            (now, session_id),
        )
        await db.commit()
    finally:
        await db.close()

    return {
        "id": message_id,
        "sessionId": session_id,
        "content": content,
        "isUser": is_user,
        "model": model,
        "provider": provider,
        "createdAt": now,
    }


async def get_messages(session_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Messages in send order. With ``limit``, only the most recent ones."""
    db = await get_db()
    try:
        if limit:
            rows = await db.execute_fetchall(
                """SELECT * FROM (
                       SELECT id, session_id, content, is_user, model, provider, created_at, rowid AS seq
                       FROM chat_messages WHERE session_id = ?
                       ORDER BY seq DESC LIMIT ?
                   ) ORDER BY seq ASC""",
                (session_id, limit),
            )
        else:
            rows = await db.execute_fetchall(
                """SELECT id, session_id, content, is_user, model, provider, created_at
                   FROM chat_messages WHERE session_id = ?
                   ORDER BY rowid ASC""",
                (session_id,),
            )
        return [_message_row(r) for r in rows]
    finally:
        await db.close()
