"""Model registry. A provider's models are offered only when its key is set."""

import os
from typing import List, Optional

from pydantic import BaseModel

from gurus import config


class ModelConfig(BaseModel):
    id: str
    name: str
    description: str
    provider: str  # openai | groq | huggingface
    api_key_env: str


MODELS: List[ModelConfig] = [
    ModelConfig(
        id="gpt-4o",
        name="GPT-4o (OpenAI)",
        description="Most capable OpenAI model for complex tasks",
        provider="openai",
        api_key_env="OPENAI_API_KEY",
    ),
    ModelConfig(
        id="gpt-4o-mini",
        name="GPT-4o mini (OpenAI)",
        description="Fast, inexpensive OpenAI model",
        provider="openai",
        api_key_env="OPENAI_API_KEY",
    ),
    ModelConfig(
        id="llama-3.1-8b-instant",
        name="Llama 3.1 8B (Groq)",
        description="Low-latency Llama served by Groq",
        provider="groq",
        api_key_env="GROQ_API_KEY",
    ),
    ModelConfig(
        id="meta-llama/Llama-2-70b-chat-hf",
        name="Llama-2-70B (Hugging Face)",
        description="Meta's most capable open model",
        provider="huggingface",
        api_key_env="HUGGINGFACE_API_KEY",
    ),
    ModelConfig(
        id="mistralai/Mistral-7B-Instruct-v0.2",
        name="Mistral-7B (Hugging Face)",
        description="Efficient, high-quality instruction model",
        provider="huggingface",
        api_key_env="HUGGINGFACE_API_KEY",
    ),
    ModelConfig(
        id="mistralai/Mixtral-8x7B-Instruct-v0.1",
        name="Mixtral-8x7B (Hugging Face)",
        description="Powerful mixture-of-experts model",
        provider="huggingface",
        api_key_env="HUGGINGFACE_API_KEY",
    ),
]


def _key_for(model: ModelConfig) -> str:
    # config holds the values read at startup; the environment wins for tests
    return os.getenv(model.api_key_env) or getattr(config, model.api_key_env, "")


def get_model(model_id: str) -> Optional[ModelConfig]:
    for model in MODELS:
        if model.id == model_id:
            return model
    return None


def available_models() -> List[ModelConfig]:
    """Models whose provider credential is configured.

    Falls back to the first registry entry so the UI always has one option.
    """
    available = [m for m in MODELS if _key_for(m)]
    return available or [MODELS[0]]


def provider_for(model_id: str) -> Optional[str]:
    model = get_model(model_id)
    return model.provider if model else None
