"""FastAPI router for topic endpoints. Runs the comparison pipeline synchronously."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, status

from gurus.comparison import database as db
from gurus.comparison.agent import PROCESS_EXPLANATION
from gurus.comparison.models import TopicCreate, TopicResponse, TopicWithResponse
from gurus.comparison.process_store import process_details_store
from gurus.llm.models import provider_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/topics", tags=["topics"])


def _get_components():
    """Import get_components at call time to avoid circular import with main.py."""
    from gurus.main import get_components
    return get_components()


@router.get("", response_model=list[TopicResponse])
async def list_topics(q: Optional[str] = None):
    """List topics, newest first, optionally filtered by a substring query."""
    try:
        if q:
            return await db.search_topics(q)
        return await db.get_all_topics()
    except Exception as e:
        logger.exception("Failed to fetch topics: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch topics")


@router.post("", response_model=TopicWithResponse, status_code=status.HTTP_201_CREATED)
async def submit_topic(request: TopicCreate):
    """
    Create a topic, run the comparison pipeline and store its response.

    The topic row is written before the pipeline runs and is not removed if
    a later step fails.
    """
    content = request.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="Topic cannot be empty")

    provider = request.provider or (provider_for(request.model) if request.model else None)

    try:
        topic = await db.create_topic(content, model=request.model, provider=provider)

        coordinator = _get_components()["coordinator"]
        result = await coordinator.process_topic(topic["content"], model=request.model)
        process_details_store.put(topic["id"], result.processDetails)

        response = await db.create_response(
            topic_id=topic["id"],
            summary=result.summary,
            chart_data=result.chartData.model_dump(),
            comparisons=[c.model_dump(mode="json") for c in result.comparisons],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error processing topic: %s", e)
        raise HTTPException(status_code=500, detail="Failed to process topic")

    return {"topic": topic, "response": response}


@router.get("/{topic_id}/response", response_model=TopicWithResponse)
async def get_topic_response(topic_id: int):
    """Stored topic together with its pipeline response."""
    topic = await db.get_topic(topic_id)
    if not topic:
        raise HTTPException(status_code=404, detail="Topic not found")

    response = await db.get_response_by_topic_id(topic_id)
    if not response:
        raise HTTPException(status_code=404, detail="Response not found")

    return {"topic": topic, "response": response}


@router.get("/{topic_id}/process-details")
async def get_process_details(topic_id: int):
    """Diagnostics for a recently processed topic (in-memory, bounded)."""
    details = process_details_store.get(topic_id)
    if details is None:
        raise HTTPException(
            status_code=404,
            detail="Process details are only available for recently processed topics",
        )
    return {
        "topicId": topic_id,
        "processDetails": details.model_dump(),
        "explanation": {"steps": PROCESS_EXPLANATION},
    }


@router.delete("/{topic_id}")
async def delete_topic(topic_id: int):
    """Delete a topic and its stored response."""
    deleted = await db.delete_topic(topic_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Topic not found")
    return {"success": True, "message": f"Topic {topic_id} deleted"}
