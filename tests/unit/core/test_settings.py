import pytest
from pydantic import ValidationError

from donorbase.core.config import Settings, get_settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DONORBASE_ENVIRONMENT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.app_name == "DonorBase"
        assert settings.api_prefix == "/api/v1"
        assert settings.reject_non_positive_amounts is False
        assert settings.projection_placeholder == "-"
        assert settings.realtime_heartbeat_seconds == 30.0

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("DONORBASE_REJECT_NON_POSITIVE_AMOUNTS", "true")
        monkeypatch.setenv("DONORBASE_ENVIRONMENT", "production")
        settings = Settings(_env_file=None)
        assert settings.reject_non_positive_amounts is True
        assert settings.is_production
        assert not settings.is_development

    def test_cors_origins_from_comma_string(self):
        settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test")
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_sqlite_rejects_multiple_workers(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, workers=4)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_currency_label_normalized(self):
        assert Settings(_env_file=None, export_currency_label=" usd ").export_currency_label == "USD"

    def test_heartbeat_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, realtime_heartbeat_seconds=0)

    def test_server_database_allows_workers(self):
        settings = Settings(
            _env_file=None,
            database_url="postgresql+asyncpg://u:p@db/donorbase",
            workers=4,
        )
        assert not settings.is_sqlite
        assert settings.workers == 4
