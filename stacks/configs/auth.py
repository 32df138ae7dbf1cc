"""
Identity provider configuration settings.

Clerk credentials used to verify bearer session tokens.

Dependencies: pydantic, pydantic_settings
System role: Authentication boundary configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """Clerk configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CLERK_",
        case_sensitive=False,
        extra="ignore",
    )

    secret_key: str | None = Field(default=None, description="Clerk secret key")
    authorized_parties: list[str] = Field(
        default_factory=list,
        description="Allowed 'azp' origins for session tokens (empty allows any)",
    )
