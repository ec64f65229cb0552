"""
Tests for settings parsing and engine configuration.
"""
import pytest

from app.core.config import DEFAULT_CORS_ORIGINS, Settings
from app.core.database import engine_options


def _settings(**overrides) -> Settings:
    values = {"DATABASE_URL": "postgresql+asyncpg://u:p@db.internal:5432/store", "ENVIRONMENT": "development"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("postgres://u:p@db/store", "postgresql+asyncpg://u:p@db/store"),
            ("postgresql://u:p@db/store", "postgresql+asyncpg://u:p@db/store"),
            ("postgresql+asyncpg://u:p@db/store", "postgresql+asyncpg://u:p@db/store"),
            ("sqlite+aiosqlite:///./store.db", "sqlite+aiosqlite:///./store.db"),
        ],
    )
    def test_database_url_normalized(self, url, expected):
        assert _settings(DATABASE_URL=url).DATABASE_URL == expected

    def test_cors_origins_comma_separated(self):
        settings = _settings(CORS_ORIGINS="https://a.example.com, https://b.example.com")
        assert settings.CORS_ORIGINS == ["https://a.example.com", "https://b.example.com"]

    def test_cors_origins_blank_uses_defaults(self):
        assert _settings(CORS_ORIGINS="  ").CORS_ORIGINS == DEFAULT_CORS_ORIGINS

    def test_max_limit_blank_means_unlimited(self):
        assert _settings(STORE_API_MAX_LIMIT="").STORE_API_MAX_LIMIT is None
        assert _settings(STORE_API_MAX_LIMIT="50").STORE_API_MAX_LIMIT == 50

    def test_production_rejects_debug(self):
        with pytest.raises(ValueError) as exc_info:
            _settings(ENVIRONMENT="production", DEBUG=True, CORS_ORIGINS=["https://shop.example.com"])
        assert "DEBUG=True is forbidden" in str(exc_info.value)

    def test_production_rejects_localhost_database(self):
        with pytest.raises(ValueError):
            _settings(
                ENVIRONMENT="production",
                DATABASE_URL="postgresql+asyncpg://u:p@localhost/store",
                CORS_ORIGINS=["https://shop.example.com"],
            )


class TestEngineOptions:

    def test_sqlite_gets_no_pool_arguments(self):
        assert engine_options("sqlite+aiosqlite:///:memory:", "production") == {}

    def test_development_pool(self):
        assert engine_options("postgresql+asyncpg://u:p@db/store", "development")["pool_size"] == 2

    def test_production_pool_from_settings(self):
        options = engine_options("postgresql+asyncpg://u:p@db/store", "production")
        assert options["pool_recycle"] == 3600
        assert options["pool_pre_ping"] is True
