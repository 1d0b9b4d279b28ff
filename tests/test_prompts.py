"""Tests for prompt construction."""

import json

from email_assistant.email_source import MOCK_EMAIL
from email_assistant.models import SecurityStatus, Tone
from email_assistant.prompts import build_analysis_messages, build_suggestion_messages


def _input_json(content: str) -> dict:
    start = content.index("Input JSON:\n") + len("Input JSON:\n")
    end = content.index("\n\n", content.index("\n}", start))
    return json.loads(content[start:end])


def test_analysis_prompt_lists_statuses_and_embeds_thread():
    system, user = build_analysis_messages(MOCK_EMAIL)

    assert system["role"] == "system"
    for status in SecurityStatus:
        assert f'"{status.value}"' in system["content"]
    payload = _input_json(user["content"])
    assert payload["id"] == MOCK_EMAIL.id
    assert len(payload["thread"]) == 2


def test_default_tone_and_empty_instruction_add_nothing_extra():
    _, user = build_suggestion_messages(MOCK_EMAIL, Tone.DEFAULT, "", 2)
    assert "Rewrite style" not in user["content"]
    assert "Additional instruction" not in user["content"]
    assert "Propose 2 replies" in user["content"]


def test_system_instruction_is_appended_only_when_set():
    system, _ = build_suggestion_messages(MOCK_EMAIL, Tone.MORE_FORMAL, "x", 3, "   ")
    assert "standing instructions" not in system["content"]

    system, user = build_suggestion_messages(MOCK_EMAIL, Tone.MORE_FORMAL, "x", 3, "Always sign as Jordan")
    assert "Always sign as Jordan" in system["content"]
    assert "Rewrite style: More formal." in user["content"]
