"""
Prompt templates for the email analysis and reply suggestion calls.
"""

import json
from typing import Any, Dict, List

from .models import Email, SecurityStatus, Tone


def _serialize_email(email: Email) -> Dict[str, Any]:
    return email.model_dump(mode="json")


def _pretty_json(obj: Any) -> str:
    return json.dumps(obj, indent=2, sort_keys=False, default=str)


# ---------------------------------------------------------------------------
# Analysis prompt
# ---------------------------------------------------------------------------


def build_analysis_messages(email: Email) -> List[Dict[str, str]]:
    """
    Build messages for the combined security / sentiment / follow-up analysis.
    """
    statuses = ", ".join(f'"{s.value}"' for s in SecurityStatus)
    system_content = (
        "You are an email assistant embedded in a mail client. You examine one"
        " email, together with the earlier messages of its thread, and report"
        " on its trustworthiness, its tone, and whether the conversation still"
        " needs action from the reader.\n\n"
        "CRITICAL RULES:\n"
        "1. You MUST output a single JSON object, with no surrounding text.\n"
        "2. The JSON object MUST have exactly these keys:\n"
        '   - "security": object with "status" (one of '
        + statuses
        + ') and "details" (string)\n'
        '   - "sentiment": short category, e.g. "Positive", "Neutral", "Negative"\n'
        '   - "urgency": short category, e.g. "Low", "Medium", "High"\n'
        '   - "intent": short category, e.g. "Request", "Information", "Complaint"\n'
        '   - "key_points": array of strings\n'
        '   - "next_actions": array of strings\n'
        '   - "follow_up": object with "requires_follow_up" (bool),'
        ' "is_closed" (bool), "reason" (string) and "suggested_reminder"'
        " (string or null)\n"
        "3. Use the whole thread to decide whether the conversation is closed.\n"
        "4. DO NOT include comments or explanations in the JSON.\n"
    )

    user_content = (
        "Analyze this email.\n\n"
        "Input JSON:\n"
        + _pretty_json(_serialize_email(email))
        + "\n\n"
        "Remember: respond with ONLY the JSON object."
    )

    return [
        {"role": "system", "content": system_content},
        {"role": "user", "content": user_content},
    ]


# ---------------------------------------------------------------------------
# Suggestions prompt
# ---------------------------------------------------------------------------


def build_suggestion_messages(
    email: Email,
    tone: Tone,
    instruction: str,
    count: int,
    system_instruction: str = "",
) -> List[Dict[str, str]]:
    """
    Build messages asking for `count` reply drafts in the requested tone.

    The model MUST output JSON:
        { "suggestions": ["<reply 1>", "<reply 2>", ...] }
    """
    system_content = (
        "You are an email assistant that drafts replies on behalf of the"
        " recipient of an email. Each draft must be a complete reply body that"
        " can be sent as-is, without subject line or placeholders.\n\n"
        "CRITICAL RULES:\n"
        "1. You MUST output a single JSON object of the form:\n"
        '   { "suggestions": ["...", "..."] }\n'
        f"2. Provide exactly {count} distinct suggestions.\n"
        "3. DO NOT include any commentary or additional keys.\n"
    )
    if system_instruction.strip():
        system_content += (
            "\nThe user has given these standing instructions for every reply:\n"
            f"{system_instruction.strip()}\n"
        )

    tone_line = (
        "Write the replies in a natural tone."
        if tone == Tone.DEFAULT
        else f"Rewrite style: {tone.value}."
    )

    user_content = (
        "Here is the email I need to answer.\n\n"
        "Input JSON:\n"
        + _pretty_json(_serialize_email(email))
        + "\n\n"
        + tone_line
        + "\n"
    )
    if instruction.strip():
        user_content += f"Additional instruction: {instruction.strip()}\n"
    user_content += f"\nPropose {count} replies. Remember: respond with ONLY the JSON object."

    return [
        {"role": "system", "content": system_content},
        {"role": "user", "content": user_content},
    ]
