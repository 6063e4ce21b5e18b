"""Configuration management for recordkit."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging_utils import LogProfile, configure_logging


class Settings(BaseSettings):
    """Process-level settings, read from ``RECORDKIT_*`` variables or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_prefix="RECORDKIT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    log_level: str = Field(default="WARNING", description="Log level")
    log_profile: LogProfile = Field(default="default", description="Log output profile (default, console)")


def get_settings(env_file: Optional[Path] = None) -> Settings:
    """Get settings and apply their logging configuration.

    Args:
        env_file: Optional ``.env`` path override

    Returns:
        Settings instance
    """
    settings = Settings(_env_file=env_file) if env_file is not None else Settings()

    configure_logging(profile=settings.log_profile, level=settings.log_level)

    return settings
