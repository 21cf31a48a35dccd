"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import DatabaseURLSchemes, LogLevels
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import (
    BusyTimeoutMs,
    ConnectionTimeoutS,
    MaxTokens,
    NonNegativeInt,
    PositiveFloat,
    PositiveInt,
    TemperatureFloat,
)


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/recommendations.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: BusyTimeoutMs = Field(
        default=5000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: ConnectionTimeoutS = Field(
        default=10,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith(DatabaseURLSchemes.SQLITE):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class AISettings(BaseModel):
    """Completion provider configuration.

    ``provider="openai"`` talks to the OpenAI chat completions API and needs an
    API key. ``provider="pydantic-ai"`` builds a pydantic-ai agent from a
    ``provider:model`` string (e.g. ``google-gla:gemini-2.0-flash``); that
    provider reads its own credentials from the environment.
    """

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    provider: Literal["openai", "pydantic-ai"] = "openai"
    api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("api_key", "openai_api_key", "openai_key"),
    )
    model: str = Field(
        default="gpt-4o-mini", validation_alias=AliasChoices("model", "ai_model", "openai_model")
    )
    max_tokens: MaxTokens = 1500
    temperature: TemperatureFloat = 0.7
    timeout_seconds: PositiveFloat = Field(
        default=30.0, validation_alias=AliasChoices("timeout_seconds", "timeout")
    )

    @property
    def enabled(self) -> bool:
        """Whether a completion client should be constructed at all."""
        if self.provider == "openai":
            return bool(self.api_key.get_secret_value())
        return ":" in self.model


class RecommendationSettings(BaseModel):
    """Recommendation engine tuning."""

    model_config = SettingsConfigDict(frozen=True)

    default_amount: PositiveInt = 5
    max_prompt_similar_items: PositiveInt = 10
    max_prompt_previous_names: NonNegativeInt = 50
    fallback_score_scale: PositiveFloat = 100.0


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DATABASE__URL, DATABASE__BUSY_TIMEOUT_MS (nested with prefix)
    - AI__PROVIDER, AI__API_KEY, AI__MODEL, AI__TIMEOUT_SECONDS
    - RECOMMENDATIONS__FALLBACK_SCORE_SCALE, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    ai: AISettings = Field(default_factory=AISettings)
    recommendations: RecommendationSettings = Field(default_factory=RecommendationSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        v_upper = v.upper()
        if v_upper not in LogLevels.ALL:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(LogLevels.ALL))
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
