from gurus.llm.client import LLMClient, LLMError, ProviderUnavailableError, parse_json_object
from gurus.llm.models import ModelConfig, MODELS, available_models, get_model

__all__ = [
    "LLMClient", "LLMError", "ProviderUnavailableError", "parse_json_object",
    "ModelConfig", "MODELS", "available_models", "get_model",
]
