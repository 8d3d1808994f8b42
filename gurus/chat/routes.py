"""FastAPI router for chat sessions and messages."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, status

from gurus.config import CHAT_HISTORY_LIMIT
from gurus.chat import database as db
from gurus.chat.models import (
    ChatExchangeResponse,
    ChatMessageCreate,
    ChatMessageResponse,
    ChatSessionCreate,
    ChatSessionDetail,
    ChatSessionResponse,
)
from gurus.llm.models import provider_for
from gurus.worldviews import parse_worldview

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


def _get_components():
    """Import get_components at call time to avoid circular import with main.py."""
    from gurus.main import get_components
    return get_components()


@router.get("/sessions", response_model=list[ChatSessionResponse])
async def list_sessions(worldview: Optional[str] = None):
    """List chat sessions, optionally for a single worldview."""
    if worldview:
        try:
            worldview = parse_worldview(worldview).value
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown worldview '{worldview}'")
    return await db.get_sessions(worldview)


@router.post("/sessions", response_model=ChatSessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(request: ChatSessionCreate):
    """Start a conversation with one worldview expert."""
    provider = request.provider or (provider_for(request.model) if request.model else None)
    return await db.create_session(
        worldview=request.worldview.value,
        title=request.title,
        model=request.model,
        provider=provider,
    )


@router.get("/sessions/{session_id}", response_model=ChatSessionDetail)
async def get_session(session_id: str):
    session = await db.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Chat session not found")
    session["messages"] = await db.get_messages(session_id)
    return session


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    """Delete a session and all of its messages."""
    deleted = await db.delete_session(session_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Chat session not found")
    return {"success": True, "message": "Chat session deleted"}


@router.get("/sessions/{session_id}/messages", response_model=list[ChatMessageResponse])
async def list_messages(session_id: str):
    session = await db.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Chat session not found")
    return await db.get_messages(session_id)


@router.post(
    "/sessions/{session_id}/messages",
    response_model=ChatExchangeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(session_id: str, request: ChatMessageCreate):
    """
    Store the user's message and the worldview expert's reply.

    The user message is kept even when the reply fails; the response then
    carries ``aiMessage: null`` and an error string.
    """
    session = await db.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Chat session not found")

    history = await db.get_messages(session_id, limit=CHAT_HISTORY_LIMIT)
    user_message = await db.add_message(session_id, request.content, is_user=True)

    try:
        worldview = parse_worldview(session["worldview"])
        agent = _get_components()["chat_agents"].get_agent(worldview)
        reply = await agent.process_message(
            request.content,
            history=history,
            model=request.model or session.get("model"),
        )
        ai_message = await db.add_message(
            session_id,
            reply.content,
            is_user=False,
            model=reply.actual_model,
            provider=reply.actual_provider,
        )
    except Exception as e:
        logger.exception("Error processing chat message: %s", e)
        return {
            "userMessage": user_message,
            "aiMessage": None,
            "error": "Failed to generate AI response",
        }

    return {"userMessage": user_message, "aiMessage": ai_message}
