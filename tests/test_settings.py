"""
Unit Tests for Application Settings Configuration

Tests for:
- Default values for nested settings objects
- Custom validators (database URL, log level)
- AI provider enablement
- Loading settings from environment variables
- Settings caching and clearing
"""

import pytest
from pydantic import SecretStr, ValidationError

from music_recommender.config.settings import (
    AISettings,
    DatabaseSettings,
    RecommendationSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Run every test from an empty directory so a stray .env is never read."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "ENVIRONMENT",
        "DEBUG",
        "LOG_LEVEL",
        "AI__PROVIDER",
        "AI__MODEL",
        "AI__API_KEY",
        "DATABASE__URL",
        "RECOMMENDATIONS__DEFAULT_AMOUNT",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# DatabaseSettings Tests
# =============================================================================


class TestDatabaseSettings:
    def test_create_with_defaults(self):
        db = DatabaseSettings()

        assert db.url == "sqlite:///data/recommendations.db"
        assert db.busy_timeout_ms == 5000
        assert db.connection_timeout_s == 10

    def test_accepts_memory_url(self):
        assert DatabaseSettings(url="sqlite:///:memory:").url == "sqlite:///:memory:"

    def test_rejects_non_sqlite_url(self):
        with pytest.raises(ValidationError, match="sqlite://"):
            DatabaseSettings(url="postgresql://localhost/db")

    def test_rejects_busy_timeout_out_of_range(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(busy_timeout_ms=10)

    def test_is_frozen(self):
        db = DatabaseSettings()
        with pytest.raises(ValidationError):
            db.url = "sqlite:///other.db"


# =============================================================================
# AISettings Tests
# =============================================================================


class TestAISettings:
    def test_defaults(self):
        ai = AISettings()

        assert ai.provider == "openai"
        assert ai.model == "gpt-4o-mini"
        assert ai.api_key.get_secret_value() == ""
        assert ai.timeout_seconds == 30.0
        assert ai.enabled is False

    def test_openai_enabled_with_key(self):
        ai = AISettings(api_key=SecretStr("sk-test-key"))

        assert ai.enabled is True

    def test_accepts_openai_api_key_alias(self):
        ai = AISettings(openai_api_key=SecretStr("sk-alias"))

        assert ai.api_key.get_secret_value() == "sk-alias"

    def test_pydantic_ai_needs_provider_prefixed_model(self):
        assert AISettings(provider="pydantic-ai", model="google-gla:gemini-2.0-flash").enabled
        assert not AISettings(provider="pydantic-ai", model="gemini-2.0-flash").enabled

    def test_rejects_unknown_provider(self):
        with pytest.raises(ValidationError):
            AISettings(provider="llama")

    @pytest.mark.parametrize("temperature", [-0.1, 2.5])
    def test_rejects_temperature_out_of_range(self, temperature):
        with pytest.raises(ValidationError):
            AISettings(temperature=temperature)

    def test_secret_is_masked(self):
        ai = AISettings(api_key=SecretStr("sk-secret"))

        assert "sk-secret" not in repr(ai)


# =============================================================================
# RecommendationSettings Tests
# =============================================================================


class TestRecommendationSettings:
    def test_defaults(self):
        rec = RecommendationSettings()

        assert rec.default_amount == 5
        assert rec.max_prompt_similar_items == 10
        assert rec.max_prompt_previous_names == 50
        assert rec.fallback_score_scale == 100.0

    def test_rejects_non_positive_scale(self):
        with pytest.raises(ValidationError):
            RecommendationSettings(fallback_score_scale=0.0)


# =============================================================================
# Settings (environment) Tests
# =============================================================================


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert isinstance(settings.database, DatabaseSettings)
        assert isinstance(settings.ai, AISettings)
        assert isinstance(settings.recommendations, RecommendationSettings)

    def test_load_from_environment_variables(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "warning")

        settings = Settings()

        assert settings.environment == "production"
        assert settings.log_level == "WARNING"

    def test_load_nested_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("AI__PROVIDER", "pydantic-ai")
        monkeypatch.setenv("AI__MODEL", "google-gla:gemini-2.0-flash")
        monkeypatch.setenv("DATABASE__URL", "sqlite:///tmp/recs.db")

        settings = Settings()

        assert settings.ai.provider == "pydantic-ai"
        assert settings.ai.enabled is True
        assert settings.database.url == "sqlite:///tmp/recs.db"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_database_url_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE__URL", "invalid://url")

        with pytest.raises(ValidationError):
            Settings()


class TestSettingsCaching:
    def test_get_settings_returns_cached_instance(self):
        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "test")
        settings1 = get_settings()

        clear_settings_cache()
        monkeypatch.setenv("ENVIRONMENT", "production")
        settings2 = get_settings()

        assert settings1 is not settings2
        assert settings1.environment == "test"
        assert settings2.environment == "production"

    def test_numeric_values_from_env_are_coerced(self, monkeypatch):
        monkeypatch.setenv("RECOMMENDATIONS__DEFAULT_AMOUNT", "3")

        assert Settings().recommendations.default_amount == 3
