"""Pydantic Settings configuration model.

3-tier config hierarchy (lowest to highest priority):
1. Pydantic defaults (in code below)
2. .env file (loaded by Pydantic Settings)
3. Environment variables (e.g., RH_READ_TIMEOUT=10)
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.robinhood.com/"
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
VALID_LOG_FORMATS = frozenset({"console", "json"})


class ClientConfig(BaseSettings):
    """Top-level client configuration.

    Env var examples:
        RH_LOG_LEVEL=DEBUG
        RH_USERNAME=you@example.com
        RH_PASSWORD=hunter2
        RH_CONNECT_TIMEOUT=3
    """

    model_config = SettingsConfigDict(
        env_prefix="RH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = DEFAULT_BASE_URL
    connect_timeout: float = Field(default=5.0, gt=0, le=60)
    read_timeout: float = Field(default=30.0, gt=0, le=300)
    token_type: str = "Bearer"
    user_agent: str = "robinhood-client/0.1"
    username: str = ""
    password: str = Field(default="", repr=False)
    log_level: str = "INFO"
    log_format: str = "console"

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {v!r}")
        # urljoin drops the last path segment without it
        return v if v.endswith("/") else v + "/"

    @field_validator("token_type")
    @classmethod
    def validate_token_type(cls, v: str) -> str:
        v = v.strip()
        if not v or " " in v:
            raise ValueError(f"token_type must be a single word, got {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {v}"
            )
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in VALID_LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {sorted(VALID_LOG_FORMATS)}, got {v}"
            )
        return v
