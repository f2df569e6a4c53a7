"""Configuration management using Pydantic Settings."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "http://127.0.0.1:8001/api/v1"

# Global settings singleton
_settings: "FeedSettings | None" = None


class FeedSettings(BaseSettings):
    """Research feed client settings loaded from environment variables.

    Priority: environment variables > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RESEARCH_FEED_",
        extra="ignore",
    )

    api_url: str = Field(default=DEFAULT_API_URL)
    api_token: str = Field(default="")

    page_size: int = Field(default=15, ge=1, le=100)
    # Single request; favorites beyond the cap are not loaded.
    favorites_cap: int = Field(default=1000, ge=1)
    request_timeout: float = Field(default=30.0, gt=0)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        name = v.upper()
        if name not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{v}'")
        return name

    @property
    def has_token(self) -> bool:
        """Whether a session token is configured."""
        return bool(self.api_token)


def get_settings() -> FeedSettings:
    """Get or create the global settings singleton."""
    global _settings
    if _settings is None:
        _settings = FeedSettings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings (for testing)."""
    global _settings
    _settings = None
