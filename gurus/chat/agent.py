"""Per-worldview chat agents wrapping the same LLM client as the pipeline."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from gurus.config import CHAT_TEMPERATURE
from gurus.llm.models import provider_for
from gurus.worldviews import Worldview

logger = logging.getLogger(__name__)

CHAT_SYSTEM_PROMPT = """You are an educational expert on {worldview}. {instructions} \
Always provide factual, balanced, and educational responses about {worldview}.

Context information about this conversation:
{context}

Conversation history:
{history}

Respond conversationally while staying true to {worldview} perspectives. Keep responses \
concise (1-3 paragraphs) and avoid unnecessarily formal academic language."""

WORLDVIEW_INSTRUCTIONS = {
    Worldview.ATHEISM: (
        "As an atheist perspective expert, focus on naturalistic, science-based explanations. "
        "Don't suggest supernatural causes or religious interpretations. Emphasize skepticism, "
        "critical thinking, and evidence-based reasoning."
    ),
    Worldview.AGNOSTICISM: (
        "As an agnostic perspective expert, emphasize the limitations of human knowledge about "
        "ultimate questions. Present both religious and secular perspectives, while maintaining "
        "that definitive answers may be unknowable."
    ),
    Worldview.CHRISTIANITY: (
        "As a Christian perspective expert, reference biblical teachings, Jesus Christ's life and "
        "teachings, and Christian theological concepts. Present mainstream Christian views while "
        "acknowledging denominational differences when relevant."
    ),
    Worldview.ISLAM: (
        "As an Islamic perspective expert, reference Quranic teachings, hadith, and Islamic "
        "theological concepts. Present mainstream Islamic views while acknowledging differences "
        "between major traditions (Sunni, Shia, etc.) when relevant."
    ),
    Worldview.HINDUISM: (
        "As a Hindu perspective expert, draw on the diversity of Hindu traditions, referencing "
        "concepts like dharma, karma, reincarnation, and moksha. Acknowledge the multiple "
        "approaches and philosophies within Hinduism."
    ),
    Worldview.BUDDHISM: (
        "As a Buddhist perspective expert, focus on teachings about impermanence, non-self, "
        "suffering, and the path to liberation. Reference concepts like karma, rebirth, "
        "meditation, and the Four Noble Truths when relevant."
    ),
    Worldview.JUDAISM: (
        "As a Jewish perspective expert, reference Torah teachings, rabbinic literature, and "
        "Jewish theological concepts. Present mainstream Jewish views while acknowledging "
        "differences between major movements (Orthodox, Conservative, Reform, etc.) when relevant."
    ),
    Worldview.SIKHISM: (
        "As a Sikh perspective expert, reference teachings from the Guru Granth Sahib, the Sikh "
        "Gurus, and key Sikh theological concepts like Waheguru, Mukti, and Seva. Emphasize Sikh "
        "principles of equality, justice, honest work, and service to humanity."
    ),
}


@dataclass
class ChatReply:
    content: str
    actual_model: str
    actual_provider: str


def format_history(messages: List[Dict]) -> str:
    lines = []
    for message in messages:
        speaker = "User" if message.get("isUser") else "Expert"
        lines.append(f"{speaker}: {message.get('content', '')}")
    return "\n".join(lines) or "(no previous messages)"


class WorldviewChatAgent:
    """Answers chat messages from the perspective of one worldview."""

    def __init__(self, worldview: Worldview, llm):
        self.worldview = worldview
        self.llm = llm
        self.context = (
            f"You are an expert in {worldview.value}, responding to questions with accurate, "
            f"educational information about this worldview. Your responses should be neutral and "
            f"factual, but written in a conversational style. If asked about topics outside of "
            f"{worldview.value}, you should redirect the conversation back to {worldview.value} "
            f"perspectives."
        )

    def system_prompt(self, history: Optional[List[Dict]] = None) -> str:
        return CHAT_SYSTEM_PROMPT.format(
            worldview=self.worldview.value,
            instructions=WORLDVIEW_INSTRUCTIONS[self.worldview],
            context=self.context,
            history=format_history(history or []),
        )

    async def _ask(self, message: str, system: str, model: str) -> ChatReply:
        content = await self.llm.complete(
            message, system=system, model=model, temperature=CHAT_TEMPERATURE
        )
        return ChatReply(
            content=content,
            actual_model=model,
            actual_provider=provider_for(model) or "openai",
        )

    async def process_message(
        self,
        message: str,
        history: Optional[List[Dict]] = None,
        model: Optional[str] = None,
    ) -> ChatReply:
        """
        Answer one user message.

        A requested model that fails falls back to the default model; if
        that fails too, a templated apology is returned instead of raising.
        """
        system = self.system_prompt(history)
        default_model = self.llm.default_model

        if model and model != default_model:
            try:
                return await self._ask(message, system, model)
            except Exception as e:
                logger.warning(
                    "%s chat agent: model %s failed, using %s: %s",
                    self.worldview.value, model, default_model, e,
                )

        try:
            return await self._ask(message, system, default_model)
        except Exception as e:
            logger.error("Error in %s chat agent: %s", self.worldview.value, e)
            return ChatReply(
                content=(
                    f"I apologize, but I'm having trouble processing your request about "
                    f"{self.worldview.value}. Could you try asking in a different way?"
                ),
                actual_model=default_model,
                actual_provider=provider_for(default_model) or "openai",
            )


class ChatAgentFactory:
    """One cached agent per worldview."""

    def __init__(self, llm):
        self.llm = llm
        self._agents: Dict[Worldview, WorldviewChatAgent] = {}

    def get_agent(self, worldview: Worldview) -> WorldviewChatAgent:
        if worldview not in self._agents:
            self._agents[worldview] = WorldviewChatAgent(worldview, self.llm)
        return self._agents[worldview]
