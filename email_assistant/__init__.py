"""
email_assistant package

AI-assisted analysis of a single email and reply suggestions, rendered as a
terminal panel.
"""

__all__ = [
    "config",
    "logging_config",
    "models",
    "constants",
    "llm_client",
    "prompts",
    "email_source",
    "ai_service",
    "settings_store",
    "theme",
    "controller",
    "views",
    "cli",
]
