import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from gurus.config import FRONTEND_URL, LOG_LEVEL
from gurus.db import init_db
from gurus.chat import chat_router
from gurus.chat.agent import ChatAgentFactory
from gurus.comparison import topics_router
from gurus.comparison.agent import ComparisonCoordinator
from gurus.copilot import copilot_router
from gurus.copilot.service import CopilotService
from gurus.llm import LLMClient, available_models
from gurus.worldviews import Worldview

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Worldview Explorer API",
    description="Compares how religions and philosophies respond to a topic",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(topics_router)
app.include_router(chat_router)
app.include_router(copilot_router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report body/query validation failures as 400 with the field errors."""
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "errors": errors},
    )


@app.on_event("startup")
async def startup():
    await init_db()
    logger.info(
        "Available models: %s", ", ".join(m.id for m in available_models())
    )


# Lazy-load the LLM-backed components so a missing key never blocks startup
llm_client = None
coordinator = None
chat_agents = None
copilot_service = None


def get_components():
    global llm_client, coordinator, chat_agents, copilot_service

    if llm_client is None:
        llm_client = LLMClient()
    if coordinator is None:
        coordinator = ComparisonCoordinator(llm_client)
    if chat_agents is None:
        chat_agents = ChatAgentFactory(llm_client)
    if copilot_service is None:
        copilot_service = CopilotService(llm_client)

    return {
        "llm": llm_client,
        "coordinator": coordinator,
        "chat_agents": chat_agents,
        "copilot": copilot_service,
    }


# Health check endpoint (responds immediately, no LLM calls)
@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.get("/")
async def root():
    return {
        "message": "Worldview Explorer API",
        "version": "1.0.0",
        "worldviews": [wv.value for wv in Worldview],
        "endpoints": {
            "topics": "/api/topics",
            "topic_response": "/api/topics/{topic_id}/response",
            "process_details": "/api/topics/{topic_id}/process-details",
            "chat_sessions": "/api/chat/sessions",
            "models": "/api/models",
            "copilot": "/api/copilot",
        },
    }


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
