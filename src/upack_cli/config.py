"""Runtime configuration.

Settings come from ``UPACK_*`` environment variables or a local
``.env`` file, validated by pydantic-settings at the CLI boundary.  Core
code never reads the environment itself.
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from upack_cli.version import __version__


class UpackSettings(BaseSettings):
    """Central application settings."""

    model_config = SettingsConfigDict(
        env_prefix="UPACK_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per feed request (seconds).",
    )
    user_agent: str = Field(
        default=f"upack-cli/{__version__}",
        min_length=1,
        description="User-Agent sent to feeds.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Root logging level (DEBUG, INFO, WARNING, ...).",
    )
    program_name: str = Field(
        default="upack",
        min_length=1,
        description="Program name shown in usage text.",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown logging level: {value!r}")
        return level
