"""FastAPI router for the copilot assistant and the model list."""

from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from gurus.llm.models import ModelConfig, available_models

router = APIRouter(prefix="/api", tags=["copilot"])


def _get_components():
    """Import get_components at call time to avoid circular import with main.py."""
    from gurus.main import get_components
    return get_components()


class CopilotMessage(BaseModel):
    role: str = "user"
    content: str


class ContextItem(BaseModel):
    name: str
    text: str = ""


class CopilotRequest(BaseModel):
    messages: List[CopilotMessage] = Field(..., min_length=1)
    context: Optional[List[ContextItem]] = None


@router.post("/copilot")
async def copilot(request: CopilotRequest):
    service = _get_components()["copilot"]
    content = await service.process_request(
        [m.model_dump() for m in request.messages],
        [c.model_dump() for c in request.context] if request.context else None,
    )
    return {"content": content}


@router.get("/models", response_model=list[ModelConfig])
async def list_models():
    """Models whose provider credentials are configured."""
    return available_models()
