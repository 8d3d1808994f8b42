"""Async LLM client routing prompts to OpenAI, Groq, Hugging Face or Ollama."""

import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx
from groq import AsyncGroq
from openai import AsyncOpenAI

from gurus.config import (
    OPENAI_API_KEY, OPENAI_MODEL,
    GROQ_API_KEY,
    HUGGINGFACE_API_KEY, HUGGINGFACE_BASE_URL,
    OLLAMA_BASE_URL, OLLAMA_MODEL, USE_OLLAMA_FALLBACK,
    LLM_TEMPERATURE, LLM_MAX_TOKENS, LLM_TIMEOUT,
)
from gurus.llm.models import provider_for

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class LLMError(Exception):
    """A provider call failed or returned unusable output."""


class ProviderUnavailableError(LLMError):
    """No credential is configured for the requested provider."""


def parse_json_object(text: str) -> Dict[str, Any]:
    """Parse model output as a JSON object, tolerating ``` fences and chatter."""
    cleaned = _FENCE_RE.sub("", (text or "").strip())
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise LLMError("Model output is not JSON")
        try:
            parsed = json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError as e:
            raise LLMError(f"Model output is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise LLMError("Model output is not a JSON object")
    return parsed


class LLMClient:
    """Single entry point for every prompt the app sends.

    The provider is picked from the model registry; unknown model ids are
    treated as OpenAI models.
    """

    def __init__(
        self,
        default_model: str = OPENAI_MODEL,
        temperature: float = LLM_TEMPERATURE,
        max_tokens: int = LLM_MAX_TOKENS,
    ):
        self.default_model = default_model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.openai_client = AsyncOpenAI(api_key=OPENAI_API_KEY) if OPENAI_API_KEY else None
        self.groq_client = AsyncGroq(api_key=GROQ_API_KEY) if GROQ_API_KEY else None
        self.hf_api_key = HUGGINGFACE_API_KEY
        self.ollama_url = OLLAMA_BASE_URL
        self.ollama_model = OLLAMA_MODEL
        self.use_ollama_fallback = USE_OLLAMA_FALLBACK

    def _messages(self, prompt: str, system: Optional[str]) -> List[Dict[str, str]]:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def _call_openai(
        self, model: str, messages: List[Dict[str, str]], temperature: float, json_mode: bool
    ) -> str:
        if not self.openai_client:
            raise ProviderUnavailableError("OPENAI_API_KEY is not set")
        kwargs: Dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = await self.openai_client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=self.max_tokens,
            **kwargs,
        )
        return response.choices[0].message.content or ""

    async def _call_groq(
        self, model: str, messages: List[Dict[str, str]], temperature: float, json_mode: bool
    ) -> str:
        if not self.groq_client:
            raise ProviderUnavailableError("GROQ_API_KEY is not set")
        kwargs: Dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = await self.groq_client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=self.max_tokens,
            **kwargs,
        )
        return response.choices[0].message.content or ""

    async def _call_huggingface(
        self, model: str, prompt: str, system: Optional[str], temperature: float
    ) -> str:
        if not self.hf_api_key:
            raise ProviderUnavailableError("HUGGINGFACE_API_KEY is not set")
        full_prompt = f"{system}\n\n{prompt}" if system else prompt
        async with httpx.AsyncClient(timeout=LLM_TIMEOUT) as client:
            response = await client.post(
                f"{HUGGINGFACE_BASE_URL}/{model}",
                headers={"Authorization": f"Bearer {self.hf_api_key}"},
                json={
                    "inputs": full_prompt,
                    "parameters": {
                        "max_new_tokens": self.max_tokens,
                        # text-generation rejects a temperature of exactly 0
                        "temperature": max(temperature, 0.01),
                        "top_p": 0.95,
                        "repetition_penalty": 1.2,
                        "do_sample": True,
                        "return_full_text": False,
                    },
                },
            )
            response.raise_for_status()
            data = response.json()
        if isinstance(data, list) and data:
            data = data[0]
        return (data or {}).get("generated_text") or "No response generated"

    async def _call_ollama(self, prompt: str, system: Optional[str]) -> str:
        async with httpx.AsyncClient(timeout=LLM_TIMEOUT) as client:
            response = await client.post(
                f"{self.ollama_url}/api/generate",
                json={
                    "model": self.ollama_model,
                    "prompt": prompt,
                    "system": system or "",
                    "stream": False,
                },
            )
            response.raise_for_status()
            return response.json().get("response", "")

    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        json_mode: bool = False,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Send one prompt and return the raw text. Raises LLMError on failure."""
        model = model or self.default_model
        temperature = self.temperature if temperature is None else temperature
        provider = provider_for(model) or "openai"

        try:
            if provider == "groq":
                return await self._call_groq(
                    model, self._messages(prompt, system), temperature, json_mode
                )
            if provider == "huggingface":
                return await self._call_huggingface(model, prompt, system, temperature)
            return await self._call_openai(
                model, self._messages(prompt, system), temperature, json_mode
            )
        except Exception as e:
            if not self.use_ollama_fallback:
                if isinstance(e, LLMError):
                    raise
                raise LLMError(f"{provider} call failed: {e}") from e
            logger.warning("%s call failed, falling back to Ollama: %s", provider, e)

        try:
            return await self._call_ollama(prompt, system)
        except Exception as e:
            raise LLMError(f"Ollama fallback failed: {e}") from e

    async def complete_json(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        text = await self.complete(
            prompt, system=system, json_mode=True, model=model, temperature=temperature
        )
        return parse_json_object(text)
