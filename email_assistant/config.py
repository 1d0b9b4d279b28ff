from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """
    Application configuration loaded from environment variables and .env file.
    """

    # LLM
    openai_api_key: str = Field(default="", alias="OPENAI_API_KEY")
    model_name: str = Field(default="gpt-4.1-mini", alias="MODEL_NAME")
    llm_base_url: str = Field(
        default="https://api.openai.com/v1/chat/completions",
        alias="LLM_BASE_URL",
    )
    llm_timeout: float = Field(default=60.0, alias="LLM_TIMEOUT")

    # Email source: unset means the built-in mock email
    email_path: Optional[Path] = Field(default=None, alias="EMAIL_PATH")

    # Logging
    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")
    log_to_file: bool = Field(default=False, alias="LOG_TO_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


def load_config() -> "Config":
    return Config()
