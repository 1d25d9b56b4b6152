"""
Configuration settings for the KU Tutorium admin dashboard.

Uses Pydantic Settings to load environment variables for the backend API
location, logging, and dashboard defaults.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_comma_separated(value: str) -> List[str]:
    """Split a comma-separated env value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    # Backend
    api_base_url: str = Field("http://localhost:8000", alias="API_BASE_URL")
    # None disables the timeout entirely (a hung backend keeps the page loading).
    api_timeout_seconds: Optional[float] = Field(None, alias="API_TIMEOUT_SECONDS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    # Dashboard defaults
    revenue_window_days: int = Field(14, alias="REVENUE_WINDOW_DAYS", ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def cors_origin_list(self) -> List[str]:
        return parse_comma_separated(self.cors_origins)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings", "parse_comma_separated"]
