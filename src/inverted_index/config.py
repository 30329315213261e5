"""Centralized configuration for inverted-index using Pydantic Settings."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    All environment variables are validated at startup with proper types.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # HTTP/Request settings
    http_timeout: float = Field(default=30.0, ge=1, description="HTTP request timeout in seconds")
    http_connect_timeout: float = Field(default=10.0, ge=1, description="HTTP connect timeout in seconds")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects when fetching remote documents")
    user_agent: str = Field(
        default="inverted-index/0.1 (+https://pypi.org/project/inverted-index/)",
        description="User-Agent header sent with remote document requests",
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{value}'")
        return normalized.lower()

    def get_http_headers(self) -> dict[str, str]:
        """Headers used for remote document requests."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json, text/plain;q=0.9, */*;q=0.8",
        }
