"""
Shared settings base.

Every config module reads the same ``.env`` file, ignores unknown keys and
matches variable names case-insensitively. Subclasses add their own
``env_prefix``.

Dependencies: pydantic_settings
System role: Common loader behaviour for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Settings base with the shared ``.env`` loader."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level passed to configure_logging",
    )
