"""Unit tests for settings validation."""

import pytest
from pydantic import ValidationError

from survey_service.config import Settings


def make_settings(**overrides) -> Settings:
    values = {"database_url": "sqlite+aiosqlite:///test.db", "jwt_secret_key": "k"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:
    """Tests for Settings."""

    def test_plain_urls_rewritten_to_async_drivers(self):
        assert make_settings(database_url="postgresql://u:p@db/app").database_url == "postgresql+asyncpg://u:p@db/app"
        assert make_settings(database_url="sqlite:///x.db").database_url == "sqlite+aiosqlite:///x.db"

    def test_async_url_untouched(self):
        url = "postgresql+asyncpg://u:p@db/app"
        assert make_settings(database_url=url).database_url == url

    def test_environment_normalized(self):
        settings = make_settings(environment="PRODUCTION")
        assert settings.environment == "production"
        assert settings.is_production
        assert not settings.is_development

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            make_settings(environment="qa")

    def test_log_level_normalized(self):
        assert make_settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            make_settings(log_level="chatty")

    def test_allowed_origins_list(self):
        settings = make_settings(allowed_origins="https://a.example, https://b.example ,")
        assert settings.get_allowed_origins_list() == ["https://a.example", "https://b.example"]

    def test_is_sqlite(self):
        assert make_settings().is_sqlite
        assert not make_settings(database_url="postgresql://db/app").is_sqlite

    def test_bcrypt_rounds_bounds(self):
        with pytest.raises(ValidationError):
            make_settings(bcrypt_rounds=2)
