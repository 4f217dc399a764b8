"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from bookshelf.core.config import Settings, get_settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        """Test default values when nothing is configured."""
        for var in ("ENVIRONMENT", "PORT", "BOOK_ID_LENGTH", "OTEL_ENABLED"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings(_env_file=None)
        assert settings.app_name == "Bookshelf API"
        assert settings.port == 9000
        assert settings.book_id_length == 16
        assert settings.otel_enabled is False
        assert settings.is_development is True

    def test_reads_environment(self, monkeypatch):
        """Test values are read from environment variables."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("BOOK_ID_LENGTH", "21")
        monkeypatch.setenv("OTEL_EXPORTER_OTLP_PROTOCOL", "grpc")

        settings = Settings(_env_file=None)
        assert settings.port == 8080
        assert settings.book_id_length == 21
        assert settings.otel_exporter_otlp_protocol == "grpc"
        assert settings.is_development is False

    def test_rejects_unknown_protocol(self):
        """Test the OTLP protocol is restricted to http and grpc."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, otel_exporter_otlp_protocol="udp")

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
