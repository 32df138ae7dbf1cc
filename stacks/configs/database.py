"""
PostgreSQL settings.

The engine URL is either given whole (``POSTGRES_URL``, as hosted
providers hand it out) or assembled from its parts. Both are normalized
to the asyncpg driver.

Dependencies: pydantic, pydantic_settings
System role: Relational store configuration for the session and message tables
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from stacks.configs.base import BaseSettings

ASYNC_SCHEME = "postgresql+asyncpg://"


class DatabaseSettings(BaseSettings):
    """Connection and pool settings (POSTGRES_*)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(default=None, description="Full connection URL; overrides the parts below")
    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    user: str = Field(default="postgres")
    password: str = Field(default="postgres")
    db: str = Field(default="stacks", description="Database name")
    sslmode: str = Field(default="prefer", description="'disable' drops the ssl parameter")

    pool_size: int = Field(default=10)
    max_overflow: int = Field(default=20)
    pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False)

    @property
    def async_database_url(self) -> str:
        """
        SQLAlchemy URL for the asyncpg driver.

        Returns:
            str: ``postgresql+asyncpg://`` URL
        """
        if self.url:
            for prefix in ("postgres://", "postgresql://"):
                if self.url.startswith(prefix):
                    return ASYNC_SCHEME + self.url[len(prefix):]
            return self.url

        ssl_param = f"?ssl={self.sslmode}" if self.sslmode != "disable" else ""
        return (
            f"{ASYNC_SCHEME}{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.db}{ssl_param}"
        )
