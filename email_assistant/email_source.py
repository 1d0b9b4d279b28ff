"""
Email sources.

Provides:
- EmailSource: the interface the controller depends on
- MockEmailSource: returns a fixed email with a short thread
- JsonFileEmailSource: reads one Email from a JSON file
"""

import logging
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from .config import Config
from .models import Contact, Email

logger = logging.getLogger(__name__)


class EmailSourceError(Exception):
    """Raised when the current email cannot be produced."""


class EmailSource(Protocol):
    """Supplies the email currently open in the client."""

    async def get_current_email(self) -> Email:
        ...


_ALEX = Contact(name="Alex Johnson", email="alex.johnson@example.com")
_JORDAN = Contact(name="Jordan Lee", email="jordan.lee@example.com")

MOCK_EMAIL = Email(
    id="msg-0003",
    sender=_ALEX,
    recipient=_JORDAN,
    subject="Re: Q3 project timeline",
    body=(
        "Hi Jordan,\n\n"
        "Thanks for sending the revised plan. The design review moved to"
        " Thursday, so we need your sign-off on the updated milestones by"
        " Wednesday end of day. Could you also confirm whether the vendor"
        " contract has been countersigned?\n\n"
        "If anything in the new dates doesn't work for your team, let me know"
        " and we can find time tomorrow to talk it through.\n\n"
        "Best,\nAlex"
    ),
    date="2024-07-16T09:42:00Z",
    thread=(
        Email(
            id="msg-0001",
            sender=_ALEX,
            recipient=_JORDAN,
            subject="Q3 project timeline",
            body=(
                "Hi Jordan,\n\nCan you share an updated timeline for Q3? The"
                " steering group meets next week.\n\nThanks,\nAlex"
            ),
            date="2024-07-12T14:05:00Z",
        ),
        Email(
            id="msg-0002",
            sender=_JORDAN,
            recipient=_ALEX,
            subject="Re: Q3 project timeline",
            body=(
                "Hi Alex,\n\nRevised plan attached. Main change: integration"
                " testing slips two weeks.\n\nJordan"
            ),
            date="2024-07-15T17:30:00Z",
        ),
    ),
)


class MockEmailSource:
    """Always returns the same email."""

    def __init__(self, email: Email = MOCK_EMAIL):
        self._email = email

    async def get_current_email(self) -> Email:
        logger.debug("Returning mock email id=%s", self._email.id)
        return self._email


class JsonFileEmailSource:
    """Reads the current email from a JSON file on every call."""

    def __init__(self, path: Path):
        self._path = path

    async def get_current_email(self) -> Email:
        path = self._path
        if not path.exists():
            raise EmailSourceError(f"Email file not found: {path}")

        text = path.read_text(encoding="utf-8")
        try:
            email = Email.model_validate_json(text)
        except ValidationError as e:
            logger.exception("Invalid email file %s: %s", path, e)
            raise EmailSourceError(f"Invalid email file {path}: {e}") from e

        logger.info("Loaded email id=%s from %s", email.id, path)
        return email


def build_email_source(config: Config, path: Optional[Path] = None) -> EmailSource:
    """Pick the file source when a path is configured, otherwise the mock."""
    path = path or config.email_path
    if path is not None:
        return JsonFileEmailSource(path)
    return MockEmailSource()
