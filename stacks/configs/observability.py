"""
Langfuse tracing settings.

Tracing of model calls turns on only when both keys are present.

Dependencies: pydantic_settings
System role: Tracing configuration for the AI layer
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from stacks.configs.base import BaseSettings


class ObservabilitySettings(BaseSettings):
    """Langfuse project credentials (LANGFUSE_*)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LANGFUSE_",
        case_sensitive=False,
        extra="ignore",
    )

    public_key: str | None = Field(default=None, description="Project public key")
    secret_key: str | None = Field(default=None, description="Project secret key")
    host: str = Field(default="https://cloud.langfuse.com", description="Langfuse API host")
    enable_tracing: bool = Field(
        default=True,
        description="Set false to keep tracing off even with keys configured",
    )

    @property
    def tracing_configured(self) -> bool:
        return bool(self.enable_tracing and self.public_key and self.secret_key)
