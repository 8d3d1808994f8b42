import json

import pytest
from fastapi.testclient import TestClient

from gurus import config
from gurus.chat.agent import ChatAgentFactory
from gurus.comparison.agent import ComparisonCoordinator
from gurus.comparison.process_store import process_details_store
from gurus.copilot.service import CopilotService
from gurus.llm.client import LLMError, parse_json_object
from gurus.worldviews import Worldview


class FakeLLM:
    """Stands in for LLMClient. ``handler(prompt, system, json_mode, model)`` returns text or raises."""

    def __init__(self, handler=None, default_model="gpt-4o"):
        self.handler = handler or always_fail
        self.default_model = default_model
        self.calls = []

    async def complete(self, prompt, system=None, json_mode=False, model=None, temperature=None):
        self.calls.append({
            "prompt": prompt,
            "system": system,
            "json_mode": json_mode,
            "model": model,
        })
        return self.handler(prompt, system, json_mode, model)

    async def complete_json(self, prompt, system=None, model=None, temperature=None):
        text = await self.complete(prompt, system=system, json_mode=True, model=model)
        return parse_json_object(text)


def always_fail(prompt, system, json_mode, model):
    raise LLMError("provider down")


GOOD_CHART = {
    "metrics": ["Divine Judgment", "Rebirth", "Soul", "Ritual"],
    "scores": {wv.value: [10, 20, 30, 40] for wv in Worldview},
}

GOOD_COMPARISONS = {
    wv.value: {
        "summary": f"{wv.display_name} summary.",
        "keyConcepts": ["concept a", "concept b"],
        "afterlifeType": "Varies",
    }
    for wv in Worldview
}


def happy_handler(prompt, system, json_mode, model):
    """Answers every pipeline prompt with well-formed output."""
    system = system or ""
    if system.startswith("You are an expert in"):
        return f"Answer from {system.split('You are an expert in ')[1].split('.')[0]}."
    if "Synthesize" in system:
        return "All worldviews address this topic differently."
    if "theological overlap" in system:
        return json.dumps(GOOD_CHART)
    if "structured comparison data" in system:
        return json.dumps(GOOD_COMPARISONS)
    return "Chat reply."


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    path = tmp_path / "test.db"
    monkeypatch.setattr(config, "SQLITE_DB_PATH", str(path))
    return path


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def client(temp_db, fake_llm, monkeypatch):
    import gurus.main as main

    components = {
        "llm": fake_llm,
        "coordinator": ComparisonCoordinator(fake_llm),
        "chat_agents": ChatAgentFactory(fake_llm),
        "copilot": CopilotService(fake_llm),
    }
    monkeypatch.setattr(main, "get_components", lambda: components)
    process_details_store.clear()

    with TestClient(main.app) as test_client:
        yield test_client

    process_details_store.clear()
