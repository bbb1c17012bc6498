"""
Configuration management for the praline tasting service.

This module centralizes environment-driven configuration using Pydantic's
`BaseSettings`. All components consume the shared `settings` instance to ensure
consistent configuration across the API, the CLI and the seed tooling.
"""

from __future__ import annotations

from typing import Annotated, List

from pydantic import Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General application settings
    API_TITLE: str = "Praline Tasting API"
    API_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = Field("development", pattern=r"^(development|staging|production|test)$")
    LOG_LEVEL: str = "INFO"

    # Relational store
    DATABASE_URL: str = "sqlite+aiosqlite:///./tasting.db"
    DATABASE_ECHO: bool = False

    # Admin gate
    SECRET_KEY: str = "changeme"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 12 * 60
    ADMIN_API_KEYS: Annotated[List[str], NoDecode] = Field(default_factory=list)
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"])

    # Domain tuning
    MIN_YEAR_EXCLUSIVE: int = 2020
    MAX_YEAR: int = 2050
    SIGNATURE_MAX_ATTEMPTS: PositiveInt = 5

    # Monitoring / tracing
    ENABLE_TRACING: bool = False
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None

    @field_validator("ALLOWED_ORIGINS", "ADMIN_API_KEYS", mode="before")
    @classmethod
    def _split_csv(cls, value: str | List[str]) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


settings = Settings()

__all__ = ["Settings", "settings"]
