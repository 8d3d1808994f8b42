"""Pydantic request/response schemas for the chat module."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from gurus.worldviews import Worldview


class ChatSessionCreate(BaseModel):
    """Request body for creating a chat session."""
    worldview: Worldview
    title: str = Field(..., min_length=1, max_length=200)
    model: Optional[str] = None
    provider: Optional[str] = None

    @field_validator("worldview", mode="before")
    @classmethod
    def lowercase_worldview(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title cannot be empty")
        return value.strip()


class ChatMessageCreate(BaseModel):
    """Request body for sending a message."""
    content: str = Field(..., min_length=1, max_length=4000)
    model: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message cannot be empty")
        return value.strip()


class ChatMessageResponse(BaseModel):
    id: str
    sessionId: str
    content: str
    isUser: bool
    model: Optional[str] = None
    provider: Optional[str] = None
    createdAt: str


class ChatSessionResponse(BaseModel):
    id: str
    worldview: str
    title: str
    model: Optional[str] = None
    provider: Optional[str] = None
    createdAt: str
    updatedAt: str


class ChatExchangeResponse(BaseModel):
    userMessage: ChatMessageResponse
    aiMessage: Optional[ChatMessageResponse] = None
    error: Optional[str] = None


class ChatSessionDetail(ChatSessionResponse):
    messages: List[ChatMessageResponse] = []
