import asyncio

import pytest

from conftest import FakeLLM, always_fail, happy_handler
from gurus.comparison.collector import collect_expert_responses, expert_fallback
from gurus.comparison.generators import format_expert_responses
from gurus.llm.client import LLMError
from gurus.worldviews import Worldview

TOPIC = "What happens after death?"


@pytest.mark.asyncio
async def test_every_worldview_answers():
    llm = FakeLLM(happy_handler)

    responses, errors = await collect_expert_responses(llm, TOPIC)

    assert list(responses) == list(Worldview)
    assert responses[Worldview.ISLAM] == "Answer from islam."
    assert errors == []
    assert len(llm.calls) == len(Worldview)
    assert all(TOPIC in call["prompt"] for call in llm.calls)


@pytest.mark.asyncio
async def test_all_failures_fall_back_per_worldview():
    llm = FakeLLM(always_fail)

    responses, errors = await collect_expert_responses(llm, TOPIC)

    assert len(responses) == len(Worldview)
    for worldview, text in responses.items():
        assert text == expert_fallback(worldview, TOPIC)
        assert worldview.display_name in text
        assert TOPIC in text
    assert len(errors) == len(Worldview)
    assert errors[0] == "atheism: provider down"


@pytest.mark.asyncio
async def test_one_failure_does_not_affect_siblings():
    def handler(prompt, system, json_mode, model):
        if "expert in buddhism" in system:
            raise LLMError("timeout")
        if "expert in judaism" in system:
            return "   "
        return happy_handler(prompt, system, json_mode, model)

    responses, errors = await collect_expert_responses(FakeLLM(handler), TOPIC)

    assert responses[Worldview.BUDDHISM] == expert_fallback(Worldview.BUDDHISM, TOPIC)
    assert responses[Worldview.JUDAISM] == expert_fallback(Worldview.JUDAISM, TOPIC)
    assert responses[Worldview.HINDUISM] == "Answer from hinduism."
    assert sorted(errors) == ["buddhism: timeout", "judaism: empty response"]


@pytest.mark.asyncio
async def test_concurrency_cap_limits_in_flight_calls():
    in_flight = 0
    peak = 0

    class SlowLLM(FakeLLM):
        async def complete(self, prompt, system=None, json_mode=False, model=None, temperature=None):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return await super().complete(prompt, system, json_mode, model, temperature)

    responses, errors = await collect_expert_responses(
        SlowLLM(happy_handler), TOPIC, concurrency=2
    )

    assert peak <= 2
    assert len(responses) == len(Worldview)
    assert errors == []


@pytest.mark.asyncio
async def test_requested_model_is_passed_to_every_call():
    llm = FakeLLM(happy_handler)

    await collect_expert_responses(llm, TOPIC, model="llama-3.1-8b-instant")

    assert {call["model"] for call in llm.calls} == {"llama-3.1-8b-instant"}


def test_format_expert_responses_uses_display_names_in_order():
    text = format_expert_responses({
        Worldview.ISLAM: "B",
        Worldview.ATHEISM: "A",
    })

    assert text == "### Atheism\nA\n\n### Islam\nB"


@pytest.mark.asyncio
async def test_default_fan_out_runs_every_worldview_at_once():
    in_flight = 0
    peak = 0

    class SlowLLM(FakeLLM):
        async def complete(self, prompt, system=None, json_mode=False, model=None, temperature=None):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return await super().complete(prompt, system, json_mode, model, temperature)

    responses, errors = await collect_expert_responses(SlowLLM(happy_handler), TOPIC)

    assert peak == len(Worldview)
    assert errors == []
