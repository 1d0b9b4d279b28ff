"""Shared fakes for the email source and the two AI services."""

from typing import List, Optional, Sequence, Union

import pytest

from email_assistant.email_source import MOCK_EMAIL
from email_assistant.models import (
    Email,
    FollowUpAnalysis,
    FullEmailAnalysis,
    SecurityAnalysis,
    SecurityStatus,
    Tone,
)


class FakeEmailSource:
    def __init__(self, email: Email = MOCK_EMAIL, error: Optional[Exception] = None):
        self.email = email
        self.error = error
        self.calls = 0

    async def get_current_email(self) -> Email:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.email


class FakeAnalysisService:
    def __init__(self, result: Optional[FullEmailAnalysis] = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: List[Email] = []

    async def analyze(self, email: Email) -> FullEmailAnalysis:
        self.calls.append(email)
        if self.error is not None:
            raise self.error
        return self.result


class FakeSuggestionService:
    """
    Returns scripted responses in order; an Exception entry is raised instead.
    Once the script runs out, the last entry repeats.
    """

    def __init__(self, responses: Sequence[Union[List[str], Exception]]):
        self.responses = list(responses)
        self.calls: List[tuple] = []

    async def generate_suggestions(
        self,
        email: Email,
        tone: Tone,
        instruction: str,
        count: int,
        system_instruction: str,
    ) -> List[str]:
        self.calls.append((email, tone, instruction, count, system_instruction))
        index = min(len(self.calls) - 1, len(self.responses) - 1)
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return list(response)


@pytest.fixture
def full_analysis() -> FullEmailAnalysis:
    return FullEmailAnalysis(
        security=SecurityAnalysis(status=SecurityStatus.SAFE, details="Known sender, no links."),
        sentiment="Neutral",
        urgency="High",
        intent="Request",
        key_points=["Sign-off needed by Wednesday", "Vendor contract status requested"],
        next_actions=["Approve milestones", "Check contract"],
        follow_up=FollowUpAnalysis(
            requires_follow_up=True,
            is_closed=False,
            reason="Alex asked two direct questions.",
            suggested_reminder="Reply before Wednesday 17:00",
        ),
    )
