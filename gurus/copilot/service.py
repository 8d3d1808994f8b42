"""In-app assistant that helps users navigate the explorer."""

import logging
from typing import Dict, List, Optional

from gurus.config import CHAT_TEMPERATURE
from gurus.worldviews import Worldview

logger = logging.getLogger(__name__)

COPILOT_SYSTEM_PROMPT = """You are a helpful assistant for the Religious Gurus application, \
which helps users explore different worldviews.
{app_description}

Available worldviews: {worldviews}

Your job is to:
1. Help users navigate the application
2. Provide neutral information about different worldviews
3. Guide users to the comparison and chat features
4. Answer questions about the application functionality

Never provide personal opinions on religious matters. Always direct users to use the app's \
features to explore perspectives from different worldviews."""

COPILOT_EMPTY_REPLY = (
    "I'm not sure how to help with that. Try asking about the application features."
)
COPILOT_ERROR_REPLY = "I'm having trouble processing your request. Please try again later."


def extract_worldview_mentions(message: str) -> List[Worldview]:
    """Worldviews named in the message, in declaration order."""
    lowered = message.lower()
    return [wv for wv in Worldview if wv.value in lowered]


def _context_text(context: Optional[List[Dict[str, str]]], name: str) -> str:
    for item in context or []:
        if item.get("name") == name:
            return item.get("text", "")
    return ""


def _transcript(messages: List[Dict[str, str]]) -> str:
    return "\n".join(f"{m.get('role', 'user')}: {m.get('content', '')}" for m in messages)


class CopilotService:
    def __init__(self, llm):
        self.llm = llm

    async def process_request(
        self,
        messages: List[Dict[str, str]],
        context: Optional[List[Dict[str, str]]] = None,
    ) -> str:
        """Reply to the latest user message. Never raises."""
        worldviews = _context_text(context, "worldviews") or ", ".join(
            wv.display_name for wv in Worldview
        )
        system = COPILOT_SYSTEM_PROMPT.format(
            app_description=_context_text(context, "app_description"),
            worldviews=worldviews,
        )

        latest = next(
            (m.get("content", "") for m in reversed(messages) if m.get("role") == "user"), ""
        )
        mentioned = extract_worldview_mentions(latest)
        if mentioned:
            system += "\n\nThe user is asking about: " + ", ".join(
                wv.display_name for wv in mentioned
            )

        try:
            content = await self.llm.complete(
                _transcript(messages), system=system, temperature=CHAT_TEMPERATURE
            )
            return content or COPILOT_EMPTY_REPLY
        except Exception as e:
            logger.error("Error in copilot service: %s", e)
            return COPILOT_ERROR_REPLY
