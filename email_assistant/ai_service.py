"""
AI-backed analysis and reply suggestion services.

Both services build a prompt, call the LLM for a JSON object, normalize the
common ways models deviate from the requested keys, and validate the result
into pydantic models.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Protocol

from pydantic import ValidationError

from .config import Config
from .llm_client import call_llm_json
from .models import Email, FullEmailAnalysis, SuggestionsResult, Tone
from .prompts import build_analysis_messages, build_suggestion_messages

logger = logging.getLogger(__name__)

LLMCall = Callable[..., Awaitable[Dict[str, Any]]]


class AIServiceError(Exception):
    """The model answered, but not in a usable shape."""


class AnalysisError(AIServiceError):
    pass


class SuggestionError(AIServiceError):
    pass


class AnalysisService(Protocol):
    async def analyze(self, email: Email) -> FullEmailAnalysis:
        ...


class SuggestionService(Protocol):
    async def generate_suggestions(
        self,
        email: Email,
        tone: Tone,
        instruction: str,
        count: int,
        system_instruction: str,
    ) -> List[str]:
        ...


# camelCase spellings some models return despite the prompt
_KEY_ALIASES = {
    "keyPoints": "key_points",
    "nextActions": "next_actions",
    "followUp": "follow_up",
    "requiresFollowUp": "requires_follow_up",
    "isClosed": "is_closed",
    "suggestedReminder": "suggested_reminder",
}


def _normalize_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, dict):
            value = _normalize_keys(value)
        out[_KEY_ALIASES.get(key, key)] = value
    return out


def parse_analysis(raw: Dict[str, Any]) -> FullEmailAnalysis:
    """Validate a raw analysis reply into a FullEmailAnalysis."""
    data = _normalize_keys(raw)

    # A bare string for "security" is the status alone
    if isinstance(data.get("security"), str):
        data["security"] = {"status": data["security"], "details": ""}

    for list_key in ("key_points", "next_actions"):
        if isinstance(data.get(list_key), str):
            data[list_key] = [data[list_key]]

    try:
        return FullEmailAnalysis.model_validate(data)
    except ValidationError as ve:
        logger.warning("Invalid analysis from LLM: %s", ve)
        raise AnalysisError(f"Invalid analysis from LLM: {ve}") from ve


def parse_suggestions(raw: Dict[str, Any], count: int) -> List[str]:
    """Validate a raw suggestions reply, keeping at most `count` non-empty drafts."""
    try:
        result = SuggestionsResult.model_validate(raw)
    except ValidationError as ve:
        logger.warning("Invalid suggestions from LLM: %s", ve)
        raise SuggestionError(f"Invalid suggestions from LLM: {ve}") from ve

    suggestions = [s.strip() for s in result.suggestions if s and s.strip()]
    if not suggestions:
        logger.warning("LLM returned no usable suggestions.")
    if len(suggestions) > count:
        logger.debug("Trimming %d suggestions to %d.", len(suggestions), count)
    return suggestions[:count]


class LLMAnalysisService:
    def __init__(self, config: Config, llm: LLMCall = call_llm_json):
        self._config = config
        self._llm = llm

    async def analyze(self, email: Email) -> FullEmailAnalysis:
        messages = build_analysis_messages(email)
        raw = await self._llm(self._config, messages, max_tokens=1500, temperature=0.2)
        analysis = parse_analysis(raw)
        logger.info(
            "Analysis for email id=%s: security=%s, urgency=%s, follow-up=%s",
            email.id,
            analysis.security.status.value,
            analysis.urgency,
            analysis.follow_up.requires_follow_up,
        )
        return analysis


class LLMSuggestionService:
    def __init__(self, config: Config, llm: LLMCall = call_llm_json):
        self._config = config
        self._llm = llm

    async def generate_suggestions(
        self,
        email: Email,
        tone: Tone,
        instruction: str,
        count: int,
        system_instruction: str,
    ) -> List[str]:
        messages = build_suggestion_messages(
            email,
            tone=tone,
            instruction=instruction,
            count=count,
            system_instruction=system_instruction,
        )
        # Higher temperature so the drafts differ from each other
        raw = await self._llm(self._config, messages, max_tokens=2000, temperature=0.7)
        suggestions = parse_suggestions(raw, count)
        logger.info(
            "Generated %d suggestions for email id=%s (tone=%s)",
            len(suggestions),
            email.id,
            tone.value,
        )
        return suggestions
