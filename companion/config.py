"""Configuration helpers for the companion service."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_BASE_URL = "http://gogothegogo.github.io/TetrisTime/"


def _default_store_path() -> Path:
    return Path(__file__).resolve().parent / ".data" / "local_storage.json"


class _Settings(BaseSettings):
    config_base_url: str = Field(
        default=DEFAULT_CONFIG_BASE_URL, alias="CONFIG_BASE_URL"
    )
    options_store_path: Path = Field(
        default_factory=_default_store_path, alias="OPTIONS_STORE_PATH"
    )
    app_scope: str = Field(default="tetristime", alias="APP_SCOPE")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    device_queue_maxsize: int = Field(default=100, alias="DEVICE_QUEUE_MAXSIZE")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value


@lru_cache(maxsize=1)
def get_settings() -> _Settings:
    """Return cached application settings."""

    return _Settings()  # type: ignore[call-arg]


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()


def env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


__all__ = [
    "DEFAULT_CONFIG_BASE_URL",
    "env_bool",
    "get_settings",
    "reset_settings_cache",
]
