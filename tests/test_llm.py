import asyncio
import json
import httpx
import pytest
from mindbot.core.config import settings
from mindbot.conversation.pipeline import DecisionPipeline
from mindbot.llm import claude_client, composer, openai_client
from mindbot.llm.errors import LLMError, error_for_status

def _mock_client(monkeypatch, handler):
    real = httpx.AsyncClient

    def factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", factory)

def test_error_for_status_maps_known_codes():
    err = error_for_status("Claude", 429, "slow down")
    assert err.status_code == 429
    assert str(err).startswith("Rate limit exceeded")
    assert "slow down" in str(err)
    assert str(error_for_status("OpenAI", 418)) == "OpenAI API error: 418"

def test_claude_missing_key(monkeypatch):
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "")
    with pytest.raises(LLMError):
        asyncio.run(claude_client.messages_completion("sys", [{"role": "user", "content": "hi"}]))

def test_claude_request_shape(monkeypatch):
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "sk-test")
    seen = {}

    def handler(request: httpx.Request):
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"content": [{"type": "text", "text": "hello "}, {"type": "text", "text": "there"}]})

    _mock_client(monkeypatch, handler)
    out = asyncio.run(claude_client.messages_completion(
        "be kind",
        [{"role": "system", "content": "x"}, {"role": "assistant", "content": "a"}, {"role": "user", "content": "b"}],
        max_tokens=123,
    ))
    assert out == "hello there"
    assert seen["headers"]["x-api-key"] == "sk-test"
    assert seen["body"]["system"] == "be kind"
    assert seen["body"]["max_tokens"] == 123
    assert [m["role"] for m in seen["body"]["messages"]] == ["user", "assistant", "user"]

def test_claude_http_error(monkeypatch):
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "sk-test")
    _mock_client(monkeypatch, lambda r: httpx.Response(401, json={"error": {"message": "bad key"}}))
    with pytest.raises(LLMError) as exc:
        asyncio.run(claude_client.messages_completion(None, [{"role": "user", "content": "hi"}]))
    assert exc.value.status_code == 401

def test_openai_malformed_body(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    _mock_client(monkeypatch, lambda r: httpx.Response(200, json={"choices": []}))
    with pytest.raises(LLMError):
        asyncio.run(openai_client.chat_completion([{"role": "user", "content": "hi"}]))

def test_openai_success(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    _mock_client(monkeypatch, lambda r: httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]}))
    assert asyncio.run(openai_client.chat_completion([{"role": "user", "content": "hi"}])) == "ok"

def test_complete_dispatches_on_provider(monkeypatch):
    calls = []

    async def fake_openai(messages, temperature=0.7, max_tokens=None, response_format=None):
        calls.append(("openai", messages))
        return " from openai "

    async def fake_claude(system, messages, temperature=0.7, max_tokens=600):
        calls.append(("claude", system, messages))
        return "from claude"

    monkeypatch.setattr("mindbot.llm.openai_client.chat_completion", fake_openai)
    monkeypatch.setattr("mindbot.llm.claude_client.messages_completion", fake_claude)

    monkeypatch.setattr(settings, "LLM_PROVIDER", "openai")
    assert asyncio.run(composer.complete("SYS", [{"role": "user", "content": "hi"}])) == "from openai"
    assert calls[-1][1][0] == {"role": "system", "content": "SYS"}

    monkeypatch.setattr(settings, "LLM_PROVIDER", "anthropic")
    assert asyncio.run(composer.complete("SYS", [{"role": "user", "content": "hi"}, {"role": "user", "content": ""}])) == "from claude"
    assert calls[-1][2] == [{"role": "user", "content": "hi"}]

def test_complete_rejects_empty_conversation():
    with pytest.raises(LLMError):
        asyncio.run(composer.complete("SYS", [{"role": "user", "content": ""}]))

def test_chat_prompt_contains_decision_instructions():
    decision = DecisionPipeline().evaluate([{"role": "user", "content": "I feel anxious"}])
    prompt = composer.chat_system_prompt(decision)
    assert "MindBot" in prompt
    assert decision.instructions in prompt
    assert "1323" in prompt

def test_lead_pitch_falls_back_on_llm_error(monkeypatch):
    async def boom(*args, **kwargs):
        raise LLMError("down")

    monkeypatch.setattr("mindbot.llm.composer.complete", boom)
    pitch = asyncio.run(composer.compose_lead_pitch({
        "school_name": "โรงเรียนทดสอบ",
        "weak_domains": [{"name": "การคัดกรอง", "score": 30}],
    }))
    assert "โรงเรียนทดสอบ" in pitch
    assert "การคัดกรอง (30%)" in pitch

def test_json_calls_request_json_object_from_openai(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(settings, "LLM_PROVIDER", "openai")
    bodies = []

    def handler(request: httpx.Request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"choices": [{"message": {"content": "{}"}}]})

    _mock_client(monkeypatch, handler)
    asyncio.run(composer.analyze_vent("tired", "en"))
    asyncio.run(composer.build_toolkits("low", "nurse", "en"))
    asyncio.run(composer.compose_vent_mode("en", [{"role": "user", "content": "tired"}]))
    assert bodies[0]["response_format"] == {"type": "json_object"}
    assert bodies[1]["response_format"] == {"type": "json_object"}
    assert "response_format" not in bodies[2]

def test_clients_share_llm_timeout(monkeypatch):
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "sk-test")
    monkeypatch.setattr(settings, "LLM_TIMEOUT_SECONDS", 7)
    real = httpx.AsyncClient
    timeouts = []

    def factory(*args, **kwargs):
        timeouts.append(kwargs.get("timeout"))
        kwargs["transport"] = httpx.MockTransport(
            lambda r: httpx.Response(200, json={"content": [{"type": "text", "text": "hi"}]})
        )
        return real(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", factory)
    asyncio.run(claude_client.messages_completion("sys", [{"role": "user", "content": "hi"}]))
    assert timeouts == [7]
