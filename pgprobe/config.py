from __future__ import annotations

from functools import lru_cache
from typing import Any

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logger.bind(module="config")


class Settings(BaseSettings):
    """Centralised application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="pgprobe", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    probe_db_scheme: str = Field(default="postgresql+psycopg", alias="PROBE_DB_SCHEME")
    # libpq sslmode requested when a connection asks for encrypted transport.
    probe_ssl_mode: str = Field(default="require", alias="PROBE_SSL_MODE")
    probe_liveness_query: str = Field(default="SELECT 1", alias="PROBE_LIVENESS_QUERY")
    # None leaves the driver's own connect timeout in charge.
    probe_connect_timeout: int | None = Field(default=None, alias="PROBE_CONNECT_TIMEOUT")

    @field_validator("probe_ssl_mode")
    @classmethod
    def _check_ssl_mode(cls, value: str) -> str:
        allowed = {"require", "verify-ca", "verify-full"}
        normalised = (value or "").strip().lower()
        if normalised not in allowed:
            raise ValueError(
                f"PROBE_SSL_MODE must be one of {sorted(allowed)}, got {value!r}",
            )
        return normalised

    @field_validator("probe_connect_timeout")
    @classmethod
    def _check_connect_timeout(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("PROBE_CONNECT_TIMEOUT must be a positive number of seconds.")
        return value

    def export_safe(self) -> dict[str, Any]:
        """Return non-sensitive settings for debugging/logging."""
        return {
            "app_name": self.app_name,
            "log_level": self.log_level,
            "probe_db_scheme": self.probe_db_scheme,
            "probe_ssl_mode": self.probe_ssl_mode,
            "probe_liveness_query": self.probe_liveness_query,
            "probe_connect_timeout": self.probe_connect_timeout,
        }


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""
    settings = Settings()
    log.info("Settings initialised: {}", settings.export_safe())
    return settings
