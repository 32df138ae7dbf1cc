"""
Language model configuration settings.

Anthropic chat model parameters used for Stack guidance turns and
insight reports.

Dependencies: pydantic, pydantic_settings
System role: LLM client configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Anthropic model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ANTHROPIC_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Anthropic API key")
    model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Anthropic model identifier",
    )

    guidance_temperature: float = Field(
        default=0.7,
        description="Sampling temperature for Stack guidance turns",
    )
    question_max_tokens: int = Field(
        default=512,
        description="Token budget for acknowledgement + next question",
    )
    summary_max_tokens: int = Field(
        default=3072,
        description="Token budget for the closing Stack summary",
    )

    insights_temperature: float = Field(
        default=0.3,
        description="Sampling temperature for structured insight reports",
    )
    insights_max_tokens: int = Field(
        default=4096,
        description="Token budget for the full cognitive insights report",
    )
