"""SQLite CRUD operations for the topics and responses tables."""

import json
from typing import Any, Dict, List, Optional

from gurus.db import get_db


def _topic_row(r) -> Dict[str, Any]:
    return {
        "id": r["id"],
        "content": r["content"],
        "model": r["model"],
        "provider": r["provider"],
        "createdAt": str(r["created_at"]),
    }


def _response_row(r) -> Dict[str, Any]:
    return {
        "id": r["id"],
        "topicId": r["topic_id"],
        "summary": r["summary"],
        "chartData": json.loads(r["chart_data"]),
        "comparisons": json.loads(r["comparisons"]),
        "createdAt": str(r["created_at"]),
    }


async def create_topic(
    content: str, model: Optional[str] = None, provider: Optional[str] = None
) -> Dict[str, Any]:
    """Insert a topic and return the stored row."""
    db = await get_db()
    try:
        cursor = await db.execute(
            "INSERT INTO topics (content, model, provider) VALUES (?, ?, ?)",
            (content, model, provider),
        )
        await db.commit()
        rows = await db.execute_fetchall(
            "SELECT id, content, model, provider, created_at FROM topics WHERE id = ?",
            (cursor.lastrowid,),
        )
        return _topic_row(rows[0])
    finally:
        await db.close()


async def get_topic(topic_id: int) -> Optional[Dict[str, Any]]:
    db = await get_db()
    try:
        rows = await db.execute_fetchall(
            "SELECT id, content, model, provider, created_at FROM topics WHERE id = ?",
            (topic_id,),
        )
        return _topic_row(rows[0]) if rows else None
    finally:
        await db.close()


async def get_all_topics() -> List[Dict[str, Any]]:
    """All topics, newest first."""
    db = await get_db()
    try:
        rows = await db.execute_fetchall(
            """SELECT id, content, model, provider, created_at FROM topics
               ORDER BY created_at DESC, id DESC"""
        )
        return [_topic_row(r) for r in rows]
    finally:
        await db.close()


async def search_topics(query: Optional[str]) -> List[Dict[str, Any]]:
    """Case-insensitive substring match on content. Blank query returns all."""
    if not query or not query.strip():
        return await get_all_topics()

    term = query.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    db = await get_db()
    try:
        rows = await db.execute_fetchall(
            """SELECT id, content, model, provider, created_at FROM topics
               WHERE content LIKE ? ESCAPE '\\'
               ORDER BY created_at DESC, id DESC""",
            (f"%{term}%",),
        )
        return [_topic_row(r) for r in rows]
    finally:
        await db.close()


async def create_response(
    topic_id: int,
    summary: str,
    chart_data: Dict[str, Any],
    comparisons: List[Dict[str, Any]],
) -> Dict[str, Any]:
    """Insert the pipeline output for a topic and return the stored row."""
    db = await get_db()
    try:
        cursor = await db.execute(
            """INSERT INTO responses (topic_id, summary, chart_data, comparisons)
               VALUES (?, ?, ?, ?)""",
            (topic_id, summary, json.dumps(chart_data), json.dumps(comparisons)),
        )
        await db.commit()
        rows = await db.execute_fetchall(
            """SELECT id, topic_id, summary, chart_data, comparisons, created_at
               FROM responses WHERE id = ?""",
            (cursor.lastrowid,),
        )
        return _response_row(rows[0])
    finally:
        await db.close()


async def get_response_by_topic_id(topic_id: int) -> Optional[Dict[str, Any]]:
    db = await get_db()
    try:
        rows = await db.execute_fetchall(
            """SELECT id, topic_id, summary, chart_data, comparisons, created_at
               FROM responses WHERE topic_id = ?
               ORDER BY id DESC LIMIT 1""",
            (topic_id,),
        )
        return _response_row(rows[0]) if rows else None
    finally:
        await db.close()


async def delete_topic(topic_id: int) -> bool:
    """Delete a topic and its responses. Returns True if the topic existed."""
    db = await get_db()
    try:
        await db.execute("DELETE FROM responses WHERE topic_id = ?", (topic_id,))
        cursor = await db.execute("DELETE FROM topics WHERE id = ?", (topic_id,))
        await db.commit()
        return cursor.rowcount > 0
    finally:
        await db.close()
