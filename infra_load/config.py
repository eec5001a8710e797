"""
Configuration settings for infra-load.

Uses Pydantic Settings to load environment variables for the load target,
logging, result persistence, and run defaults.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TARGET_HOST = "http://host.docker.internal:8000"


class Settings(BaseSettings):
    # Load target
    target_host: str = Field(DEFAULT_TARGET_HOST, alias="TARGET_HOST")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Run defaults
    results_dir: str = Field("results", alias="RESULTS_DIR")
    failure_policy: Literal["tolerant", "strict"] = Field("tolerant", alias="FAILURE_POLICY")

    # Preflight probe (disabled unless asked for)
    preflight: bool = Field(False, alias="PREFLIGHT")
    preflight_attempts: int = Field(3, alias="PREFLIGHT_ATTEMPTS", ge=1)
    preflight_timeout_seconds: float = Field(5.0, alias="PREFLIGHT_TIMEOUT_SECONDS", gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["DEFAULT_TARGET_HOST", "Settings", "get_settings"]
