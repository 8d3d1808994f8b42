import pytest

from conftest import FakeLLM, always_fail, happy_handler
from gurus.chat.agent import ChatAgentFactory, WorldviewChatAgent, format_history
from gurus.llm.client import LLMError
from gurus.worldviews import Worldview


def new_session(client, worldview="Buddhism", title="Rebirth questions", **extra):
    return client.post(
        "/api/chat/sessions", json={"worldview": worldview, "title": title, **extra}
    )


def test_create_and_list_sessions(client):
    created = new_session(client, model="llama-3.1-8b-instant")

    assert created.status_code == 201
    session = created.json()
    assert session["worldview"] == "buddhism"
    assert session["provider"] == "groq"

    new_session(client, worldview="islam", title="Prayer")

    assert len(client.get("/api/chat/sessions").json()) == 2
    only_islam = client.get("/api/chat/sessions", params={"worldview": "Islam"}).json()
    assert [s["title"] for s in only_islam] == ["Prayer"]


def test_invalid_session_requests(client):
    assert new_session(client, worldview="jedi").status_code == 400
    assert new_session(client, title="  ").status_code == 400
    assert client.get("/api/chat/sessions", params={"worldview": "jedi"}).status_code == 400


def test_send_message_stores_both_sides(client, fake_llm):
    fake_llm.handler = happy_handler
    session_id = new_session(client).json()["id"]

    response = client.post(
        f"/api/chat/sessions/{session_id}/messages", json={"content": "What is karma?"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["userMessage"]["isUser"] is True
    assert body["aiMessage"]["content"] == "Chat reply."
    assert body["aiMessage"]["isUser"] is False
    assert body["aiMessage"]["model"] == "gpt-4o"
    assert body.get("error") is None

    messages = client.get(f"/api/chat/sessions/{session_id}/messages").json()
    assert [m["content"] for m in messages] == ["What is karma?", "Chat reply."]

    detail = client.get(f"/api/chat/sessions/{session_id}").json()
    assert len(detail["messages"]) == 2


def test_provider_failure_returns_apology(client):
    session_id = new_session(client).json()["id"]

    body = client.post(
        f"/api/chat/sessions/{session_id}/messages", json={"content": "Hello"}
    ).json()

    assert "I apologize" in body["aiMessage"]["content"]
    assert "buddhism" in body["aiMessage"]["content"]


def test_agent_crash_keeps_user_message(client, monkeypatch):
    import gurus.main as main

    factory = main.get_components()["chat_agents"]

    def broken(worldview):
        raise RuntimeError("agent unavailable")

    monkeypatch.setattr(factory, "get_agent", broken)
    session_id = new_session(client).json()["id"]

    response = client.post(
        f"/api/chat/sessions/{session_id}/messages", json={"content": "Hello"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["aiMessage"] is None
    assert body["error"] == "Failed to generate AI response"
    messages = client.get(f"/api/chat/sessions/{session_id}/messages").json()
    assert [m["content"] for m in messages] == ["Hello"]


def test_unknown_session_returns_404(client):
    assert client.get("/api/chat/sessions/nope").status_code == 404
    assert client.get("/api/chat/sessions/nope/messages").status_code == 404
    assert client.post(
        "/api/chat/sessions/nope/messages", json={"content": "Hi"}
    ).status_code == 404
    assert client.delete("/api/chat/sessions/nope").status_code == 404


def test_delete_session_removes_messages(client, fake_llm):
    fake_llm.handler = happy_handler
    session_id = new_session(client).json()["id"]
    client.post(f"/api/chat/sessions/{session_id}/messages", json={"content": "Hi"})

    assert client.delete(f"/api/chat/sessions/{session_id}").json()["success"] is True
    assert client.get(f"/api/chat/sessions/{session_id}").status_code == 404


@pytest.mark.asyncio
async def test_requested_model_falls_back_to_default():
    def handler(prompt, system, json_mode, model):
        if model == "llama-3.1-8b-instant":
            raise LLMError("groq down")
        return "Default model answer."

    llm = FakeLLM(handler)
    agent = WorldviewChatAgent(Worldview.HINDUISM, llm)

    reply = await agent.process_message("What is dharma?", model="llama-3.1-8b-instant")

    assert reply.content == "Default model answer."
    assert reply.actual_model == "gpt-4o"
    assert reply.actual_provider == "openai"
    assert [call["model"] for call in llm.calls] == ["llama-3.1-8b-instant", "gpt-4o"]


@pytest.mark.asyncio
async def test_history_and_instructions_reach_the_prompt():
    llm = FakeLLM(happy_handler)
    agent = WorldviewChatAgent(Worldview.SIKHISM, llm)
    history = [
        {"content": "Who founded Sikhism?", "isUser": True},
        {"content": "Guru Nanak.", "isUser": False},
    ]

    await agent.process_message("Tell me more", history=history)

    system = llm.calls[0]["system"]
    assert "Guru Granth Sahib" in system
    assert "User: Who founded Sikhism?\nExpert: Guru Nanak." in system
    assert llm.calls[0]["prompt"] == "Tell me more"


def test_agents_are_cached_per_worldview():
    factory = ChatAgentFactory(FakeLLM(always_fail))

    assert factory.get_agent(Worldview.ISLAM) is factory.get_agent(Worldview.ISLAM)
    assert factory.get_agent(Worldview.ISLAM) is not factory.get_agent(Worldview.JUDAISM)


def test_empty_history_placeholder():
    assert format_history([]) == "(no previous messages)"
