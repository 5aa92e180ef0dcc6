# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the
school administration console. Settings are loaded from environment
variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.backend.institutions_url)
    'http://localhost:9080/api/v1/institutions'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendSettings(BaseSettings):
    """REST backend configuration for institution and classroom records.

    Attributes:
        institutions_url: Base URL of the institutions resource.
        classrooms_url: Base URL of the classrooms resource.
        timeout: Request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="BACKEND_",
        extra="ignore",
    )

    institutions_url: str = "http://localhost:9080/api/v1/institutions"
    classrooms_url: str = "http://localhost:9080/api/v1/classrooms"
    timeout: float = 30.0


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        backend: REST backend settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    backend: BackendSettings = Field(default_factory=BackendSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production against a local backend.
        """
        if self.environment == "production":
            for url in (self.backend.institutions_url, self.backend.classrooms_url):
                if "localhost" in url or "127.0.0.1" in url:
                    raise ValueError(
                        "Backend URLs must not point to localhost in production. "
                        "Set BACKEND_INSTITUTIONS_URL and BACKEND_CLASSROOMS_URL."
                    )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
