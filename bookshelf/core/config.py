"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables and an optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Bookshelf API"
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 9000

    # Logging
    log_level: str = "INFO"

    # Books
    book_id_length: int = 16

    # OpenTelemetry
    otel_enabled: bool = False
    otel_service_name: str = "bookshelf-api"
    otel_exporter_otlp_endpoint: str = "http://localhost:4318/v1/traces"
    otel_exporter_otlp_protocol: Literal["http", "grpc"] = "http"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()
