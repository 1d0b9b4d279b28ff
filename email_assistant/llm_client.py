"""
Async JSON chat calls against an OpenAI-compatible completions endpoint.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import Config

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Generic error raised by the LLM client."""


def _extract_json_from_text(text: str) -> str:
    """Slice the outermost JSON object out of a reply, unwrapping a ``` fence first."""
    text = text.strip()
    if not text:
        raise LLMError("Empty response from model when JSON was expected.")

    if "```" in text:
        parts = text.split("```")
        if len(parts) >= 3:
            inner = parts[1]
            if inner.lstrip().lower().startswith("json"):
                inner = inner.split("\n", 1)[-1]
            text = inner.strip()

    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last <= first:
        raise LLMError("Could not locate a JSON object in the model response.")

    return text[first : last + 1]


def parse_json_content(content: Any) -> Dict[str, Any]:
    """Turn the message content of a completion into a dict."""
    if isinstance(content, dict):
        return content
    if not isinstance(content, str):
        raise LLMError(f"LLM content is neither string nor dict: {type(content)}")

    try:
        parsed = json.loads(_extract_json_from_text(content))
    except json.JSONDecodeError as e:
        logger.error(
            "Raw LLM content that failed JSON parse (first 1000 chars): %s",
            content[:1000],
        )
        raise LLMError(f"Failed to parse JSON from LLM content: {e}") from e

    if not isinstance(parsed, dict):
        raise LLMError("LLM content is JSON but not an object.")
    return parsed


def _request_payload(
    config: Config, messages: List[Dict[str, str]], max_tokens: int, temperature: float
) -> Dict[str, Any]:
    return {
        "model": config.model_name,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "response_format": {"type": "json_object"},
    }


def _message_content(data: Any) -> Any:
    try:
        choices = data.get("choices")
        if not choices:
            raise LLMError("No choices in LLM response.")
        return choices[0]["message"]["content"]
    except LLMError:
        raise
    except (AttributeError, KeyError, IndexError, TypeError) as e:
        logger.exception("Unexpected structure in LLM response: %s", e)
        raise LLMError("Unexpected structure in LLM response.") from e


async def call_llm_json(
    config: Config,
    messages: List[Dict[str, str]],
    max_tokens: int = 2000,
    temperature: float = 0.2,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    POST `messages` to `config.llm_base_url` and return the reply as a dict.

    `transport` replaces the network layer (tests pass a MockTransport). Any
    HTTP, decoding, or shape problem is raised as LLMError.
    """
    if not config.openai_api_key:
        raise LLMError("OPENAI_API_KEY (or equivalent) is not set in config.")

    headers = {"Authorization": f"Bearer {config.openai_api_key}"}
    payload = _request_payload(config, messages, max_tokens, temperature)

    try:
        logger.info("Calling LLM model=%s", config.model_name)
        async with httpx.AsyncClient(
            timeout=config.llm_timeout, transport=transport
        ) as client:
            resp = await client.post(config.llm_base_url, headers=headers, json=payload)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.exception("HTTP error calling LLM: %s", e)
        raise LLMError(f"HTTP error from LLM API: {e}") from e

    try:
        data = resp.json()
    except json.JSONDecodeError as e:
        logger.exception("Failed to decode JSON from LLM HTTP response: %s", e)
        raise LLMError("Invalid JSON from LLM HTTP response.") from e

    content = _message_content(data)
    snippet = content if isinstance(content, str) else repr(content)
    logger.debug("LLM raw content (first 500 chars): %s", snippet[:500])

    return parse_json_content(content)
