"""Tests for the LLM-backed analysis and suggestion services."""

import asyncio

import pytest

from email_assistant.ai_service import (
    AnalysisError,
    LLMAnalysisService,
    LLMSuggestionService,
    SuggestionError,
    parse_analysis,
    parse_suggestions,
)
from email_assistant.config import Config
from email_assistant.email_source import MOCK_EMAIL
from email_assistant.models import SecurityStatus, Tone


RAW_ANALYSIS = {
    "security": {"status": "Phishing", "details": "Lookalike domain."},
    "sentiment": "Negative",
    "urgency": "High",
    "intent": "Credential request",
    "key_points": ["Asks for password"],
    "next_actions": ["Report to IT"],
    "follow_up": {
        "requires_follow_up": False,
        "is_closed": True,
        "reason": "Do not engage.",
        "suggested_reminder": None,
    },
}


class RecordingLLM:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    async def __call__(self, config, messages, **kwargs):
        self.calls.append((config, messages, kwargs))
        return self.reply


def test_parse_analysis_accepts_the_requested_schema():
    analysis = parse_analysis(RAW_ANALYSIS)
    assert analysis.security.status is SecurityStatus.PHISHING
    assert analysis.key_points == ["Asks for password"]
    assert analysis.follow_up.is_closed is True
    assert analysis.to_email_analysis().intent == "Credential request"


def test_parse_analysis_normalizes_camel_case_and_shortcuts():
    raw = {
        "security": "safe",
        "sentiment": "Positive",
        "urgency": "Low",
        "intent": "Information",
        "keyPoints": "Single point",
        "nextActions": [],
        "followUp": {"requiresFollowUp": True, "isClosed": False, "reason": "Question asked", "suggestedReminder": "Tomorrow"},
    }

    analysis = parse_analysis(raw)

    assert analysis.security.status is SecurityStatus.SAFE
    assert analysis.key_points == ["Single point"]
    assert analysis.follow_up.requires_follow_up is True
    assert analysis.follow_up.suggested_reminder == "Tomorrow"


def test_parse_analysis_rejects_missing_sections():
    raw = dict(RAW_ANALYSIS)
    del raw["follow_up"]
    with pytest.raises(AnalysisError):
        parse_analysis(raw)


def test_parse_suggestions_trims_blanks_and_extra_items():
    raw = {"suggestions": ["  One  ", "", "Two", "Three", "Four"]}
    assert parse_suggestions(raw, 3) == ["One", "Two", "Three"]


@pytest.mark.parametrize("raw", [{}, {"suggestions": []}, {"suggestions": ["  "]}])
def test_parse_suggestions_empty_reply_gives_empty_list(raw):
    assert parse_suggestions(raw, 3) == []


@pytest.mark.parametrize("raw", [{"suggestions": "text"}, {"suggestions": [{"text": "hi"}]}])
def test_parse_suggestions_rejects_malformed(raw):
    with pytest.raises(SuggestionError):
        parse_suggestions(raw, 3)


def test_analysis_service_sends_email_in_prompt():
    llm = RecordingLLM(RAW_ANALYSIS)
    config = Config(openai_api_key="k")
    service = LLMAnalysisService(config, llm=llm)

    result = asyncio.run(service.analyze(MOCK_EMAIL))

    assert result.security.status is SecurityStatus.PHISHING
    (called_config, messages, _), = llm.calls
    assert called_config is config
    assert MOCK_EMAIL.subject in messages[1]["content"]


def test_suggestion_service_passes_tone_instruction_and_count():
    llm = RecordingLLM({"suggestions": ["a", "b", "c"]})
    service = LLMSuggestionService(Config(openai_api_key="k"), llm=llm)

    result = asyncio.run(
        service.generate_suggestions(MOCK_EMAIL, Tone.SHORTER, "Mention Friday", 3, "Sign as J.")
    )

    assert result == ["a", "b", "c"]
    _, messages, kwargs = llm.calls[0]
    system, user = messages[0]["content"], messages[1]["content"]
    assert "exactly 3" in system
    assert "Sign as J." in system
    assert "Shorter" in user
    assert "Mention Friday" in user
    assert kwargs["temperature"] > 0.2
