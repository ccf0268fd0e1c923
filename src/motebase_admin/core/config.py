"""Configuration management for the MoteBase admin console.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once when the
console starts and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Console configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MOTEBASE_ADMIN_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "MoteBase Admin"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"

    # API Settings
    api_url: str = "http://localhost:8080"
    api_prefix: str = "/api"
    request_timeout: float | None = Field(
        default=None,
        description="Seconds before an API request is abandoned (None waits indefinitely)",
    )

    # List View Settings
    records_per_page: int = Field(default=20, ge=1)
    collections_per_page: int = Field(default=12, ge=1)
    max_visible_fields: int = Field(default=5, ge=1)
    relation_page_size: int = Field(default=20, ge=1)

    # Session Settings
    session_file: str = "~/.motebase_admin/session.json"

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the API base URL so paths can be appended directly."""
        return v.rstrip("/")

    @field_validator("api_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """Ensure the prefix starts with a slash and has no trailing slash."""
        v = v.strip().strip("/")
        return f"/{v}" if v else ""

    @property
    def base_url(self) -> str:
        """Full URL the REST client is rooted at."""
        return f"{self.api_url}{self.api_prefix}"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached console settings instance.
    """
    return Settings()
