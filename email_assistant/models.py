"""
Pydantic models for emails, AI analyses, tones, and panel settings.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, ConfigDict, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class SecurityStatus(str, Enum):
    SAFE = "Safe"
    SPAM = "Spam"
    PHISHING = "Phishing"
    VIRUS = "Virus Detected"

    @classmethod
    def parse(cls, value: str) -> "SecurityStatus":
        """
        Lenient lookup by value or member name, ignoring case.

        Models tend to answer "safe", "PHISHING" or "virus" rather than the
        exact display value.
        """
        key = value.strip().lower()
        for member in cls:
            if key in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"unknown security status: {value!r}")


class Tone(str, Enum):
    DEFAULT = "Default"
    MORE_PROFESSIONAL = "More professional"
    MORE_TECHNICAL = "More technical"
    MORE_ACCESSIBLE = "More accessible"
    MORE_POLITE = "More polite"
    MORE_FORMAL = "More formal"
    MORE_INFORMAL = "More informal"
    GRAMMATICALLY_CORRECT = "Grammatically correct"
    EASIER_TO_READ = "Easier to read"
    MORE_PASSIONATE = "More passionate"
    LESS_EMOTIONAL = "Less emotional"
    MORE_SARCASTIC = "More sarcastic"
    AS_BULLET_POINTS = "As bullet points"
    SHORTER = "Shorter"
    LONGER = "Longer"
    MORE_PERSUASIVE = "More persuasive"
    MORE_DIRECT = "More direct"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    def flipped(self) -> "Theme":
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


class AccentColor(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    ORANGE = "orange"
    SLATE = "slate"
    ROSE = "rose"


class BackgroundStyle(str, Enum):
    SOLID = "solid"
    GRADIENT = "gradient"


# ---------------------------------------------------------------------------
# Emails
# ---------------------------------------------------------------------------


class Contact(BaseModel):
    name: str = ""
    email: str

    model_config = ConfigDict(frozen=True)


class Email(BaseModel):
    """
    A single email plus the ordered thread of messages that preceded it.

    Instances are frozen: once fetched, an email is never edited in place.
    """

    id: str
    sender: Contact
    recipient: Contact
    subject: str = ""
    body: str = ""
    date: str = ""
    thread: Tuple["Email", ...] = ()

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
    )


Email.model_rebuild()


# ---------------------------------------------------------------------------
# Analyses
# ---------------------------------------------------------------------------


class SecurityAnalysis(BaseModel):
    status: SecurityStatus
    details: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        if isinstance(v, str) and not isinstance(v, SecurityStatus):
            return SecurityStatus.parse(v)
        return v

    model_config = ConfigDict(frozen=True)


class EmailAnalysisResult(BaseModel):
    sentiment: str
    urgency: str
    intent: str
    key_points: List[str] = Field(default_factory=list)
    next_actions: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class FollowUpAnalysis(BaseModel):
    requires_follow_up: bool
    is_closed: bool
    reason: str = ""
    suggested_reminder: Optional[str] = None

    @field_validator("suggested_reminder")
    @classmethod
    def blank_reminder_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class FullEmailAnalysis(BaseModel):
    """
    Combined reply of the analysis service: security, sentiment and follow-up.
    """

    security: SecurityAnalysis
    sentiment: str
    urgency: str
    intent: str
    key_points: List[str] = Field(default_factory=list)
    next_actions: List[str] = Field(default_factory=list)
    follow_up: FollowUpAnalysis

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_email_analysis(self) -> EmailAnalysisResult:
        return EmailAnalysisResult(
            sentiment=self.sentiment,
            urgency=self.urgency,
            intent=self.intent,
            key_points=list(self.key_points),
            next_actions=list(self.next_actions),
        )


class SuggestionsResult(BaseModel):
    suggestions: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


MIN_SUGGESTION_COUNT = 1
MAX_SUGGESTION_COUNT = 10


class AppSettings(BaseModel):
    """
    Display and generation preferences for the panel.

    Held in memory for the session only.
    """

    theme: Theme = Theme.LIGHT
    accent_color: AccentColor = AccentColor.BLUE
    background_style: BackgroundStyle = BackgroundStyle.SOLID
    sync_with_system: bool = False
    show_email: bool = True
    show_instructions: bool = True
    show_security: bool = True
    show_analysis: bool = True
    show_follow_up: bool = True
    suggestion_count: int = Field(
        default=3, ge=MIN_SUGGESTION_COUNT, le=MAX_SUGGESTION_COUNT
    )
    system_instruction: str = ""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )


__all__ = [
    "SecurityStatus",
    "Tone",
    "Theme",
    "AccentColor",
    "BackgroundStyle",
    "Contact",
    "Email",
    "SecurityAnalysis",
    "EmailAnalysisResult",
    "FollowUpAnalysis",
    "FullEmailAnalysis",
    "SuggestionsResult",
    "AppSettings",
    "MIN_SUGGESTION_COUNT",
    "MAX_SUGGESTION_COUNT",
]
