"""
Test suite for configuration settings.

System role: Verification of env-derived connection settings
"""

from stacks.configs.database import DatabaseSettings
from stacks.configs.observability import ObservabilitySettings


class TestDatabaseSettings:
    """Test suite for DatabaseSettings.async_database_url."""

    def test_parts_should_build_asyncpg_url(self) -> None:
        """Test the URL is assembled from its parts."""
        # Arrange
        settings = DatabaseSettings(url=None, host="db", port=6543, user="u", password="p", db="x", sslmode="disable")

        # Act
        url = settings.async_database_url

        # Assert
        assert url == "postgresql+asyncpg://u:p@db:6543/x"

    def test_hosted_url_should_switch_driver(self) -> None:
        """Test postgres:// URLs are rewritten to the async driver."""
        # Arrange
        settings = DatabaseSettings(url="postgres://u:p@host/db?ssl=require")

        # Act
        url = settings.async_database_url

        # Assert
        assert url == "postgresql+asyncpg://u:p@host/db?ssl=require"


class TestObservabilitySettings:
    """Test suite for ObservabilitySettings.tracing_configured."""

    def test_tracing_requires_both_keys(self) -> None:
        """Test tracing stays off until both keys are set."""
        assert not ObservabilitySettings(public_key="pk", secret_key=None).tracing_configured
        assert ObservabilitySettings(public_key="pk", secret_key="sk").tracing_configured
        assert not ObservabilitySettings(public_key="pk", secret_key="sk", enable_tracing=False).tracing_configured
