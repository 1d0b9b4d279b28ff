"""Tests for the async LLM client, using httpx.MockTransport."""

import asyncio
import json

import httpx
import pytest

from email_assistant.config import Config
from email_assistant.llm_client import (
    LLMError,
    _extract_json_from_text,
    call_llm_json,
    parse_json_content,
)

MESSAGES = [{"role": "user", "content": "hi"}]


def _config(**overrides):
    values = {
        "openai_api_key": "test-key",
        "model_name": "test-model",
        "llm_base_url": "https://llm.test/v1/chat/completions",
    }
    values.update(overrides)
    return Config(**values)


def _completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def test_extract_json_from_fenced_block():
    text = 'Sure!\n```json\n{"a": 1}\n```\nAnything else?'
    assert _extract_json_from_text(text) == '{"a": 1}'


def test_extract_json_ignores_commentary():
    assert _extract_json_from_text('Here: {"a": {"b": 2}} done') == '{"a": {"b": 2}}'


@pytest.mark.parametrize("text", ["", "   ", "no json here", "} backwards {"])
def test_extract_json_rejects_non_objects(text):
    with pytest.raises(LLMError):
        _extract_json_from_text(text)


def test_parse_json_content_accepts_dicts_and_rejects_other_types():
    assert parse_json_content({"a": 1}) == {"a": 1}
    with pytest.raises(LLMError):
        parse_json_content(["a"])
    with pytest.raises(LLMError):
        parse_json_content('{"a": }')


def test_call_sends_openai_payload_and_parses_reply():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion('{"suggestions": ["ok"]}'))

    result = asyncio.run(
        call_llm_json(_config(), MESSAGES, max_tokens=50, temperature=0.5, transport=httpx.MockTransport(handler))
    )

    assert result == {"suggestions": ["ok"]}
    assert seen["url"] == "https://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer test-key"
    assert seen["content_type"] == "application/json"
    body = seen["body"]
    assert body["model"] == "test-model"
    assert body["messages"] == MESSAGES
    assert body["max_tokens"] == 50
    assert body["temperature"] == 0.5
    assert body["response_format"] == {"type": "json_object"}


def test_missing_api_key_fails_before_any_request():
    def handler(request):
        raise AssertionError("should not be called")

    with pytest.raises(LLMError):
        asyncio.run(call_llm_json(_config(openai_api_key=""), MESSAGES, transport=httpx.MockTransport(handler)))


def test_http_error_becomes_llm_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"error": "boom"}))
    with pytest.raises(LLMError, match="HTTP error"):
        asyncio.run(call_llm_json(_config(), MESSAGES, transport=transport))


def test_reply_without_choices_is_an_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []}))
    with pytest.raises(LLMError, match="No choices"):
        asyncio.run(call_llm_json(_config(), MESSAGES, transport=transport))


def test_malformed_reply_structure_is_an_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": [{}]}))
    with pytest.raises(LLMError, match="Unexpected structure"):
        asyncio.run(call_llm_json(_config(), MESSAGES, transport=transport))


def test_non_json_http_body_is_an_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(LLMError, match="Invalid JSON"):
        asyncio.run(call_llm_json(_config(), MESSAGES, transport=transport))
