"""Configuration for the float-mcp gateway.

Settings are read once at startup from environment variables and an
optional ``.env`` file. There is no hot reload; restart to pick up changes.
"""

from __future__ import annotations

from typing import Literal, Optional

import pydantic
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.float.com/v3"


class Settings(BaseSettings):
    """Gateway settings.

    Only FLOAT_API_KEY is required; everything else has a default.
    """

    FLOAT_API_KEY: str = Field(..., min_length=1)
    FLOAT_API_BASE_URL: str = DEFAULT_BASE_URL

    # Admission queue
    RATE_LIMIT_WINDOW_MS: int = Field(60_000, gt=0)
    RATE_LIMIT_MAX_REQUESTS: int = Field(100, gt=0)
    ADMISSION_MAX_WAIT_MS: Optional[int] = Field(None, gt=0)

    # Request execution
    REQUEST_TIMEOUT_SECONDS: float = Field(30.0, gt=0)
    USER_AGENT: str = "float-mcp"

    # Pagination
    DEFAULT_PAGE_SIZE: int = Field(50, ge=1, le=200)
    MAX_PAGES: int = Field(1000, ge=1)

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "pretty"] = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @pydantic.field_validator("LOG_LEVEL", "LOG_FORMAT", mode="before")
    @classmethod
    def _normalize_case(cls, value: object, info: pydantic.ValidationInfo) -> object:
        if not isinstance(value, str):
            return value
        value = value.strip()
        if info.field_name == "LOG_LEVEL":
            value = value.upper()
            return "WARNING" if value == "WARN" else value
        return value.lower()

    @pydantic.field_validator("FLOAT_API_BASE_URL")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("FLOAT_API_BASE_URL must be an http(s) URL")
        return value.rstrip("/")


def load_settings(**overrides: object) -> Settings:
    """Load settings, converting validation failures to ConfigurationError.

    Args:
        **overrides: Values taking precedence over the environment

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    try:
        return Settings(**overrides)
    except pydantic.ValidationError as e:
        problems = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "settings"
            if field == "FLOAT_API_KEY":
                problems.append(
                    "- Missing: FLOAT_API_KEY (get this from your Float account settings)"
                )
            else:
                problems.append(f"- Invalid: {field}: {error['msg']}")
        raise ConfigurationError(
            "Configuration validation failed:\n" + "\n".join(problems)
        ) from e
