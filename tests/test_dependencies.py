"""
Test suite for dependency injection container.

Tests factory functions for service creation and the lazy service cache.

System role: Verification of DI container
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from stacks.api.deps import (
    get_analytics_service,
    get_insights_service,
    get_progression_service,
    get_search_service,
    get_settings_dependency,
    get_stack_service,
)
from stacks.api.deps.dependencies import ServiceCache
from stacks.application.services import (
    AnalyticsService,
    InsightsService,
    ProgressionService,
    SearchService,
    StackService,
)
from stacks.configs import Settings


@pytest.fixture
def mock_db_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def fake_cache():
    """Patch the global service cache with mocks."""
    cache = MagicMock()
    cache.vector_store = None
    with patch("stacks.api.deps.dependencies.get_service_cache", return_value=cache):
        yield cache


class TestServiceFactories:
    """Test suite for per-request service factories."""

    def test_get_stack_service_should_bind_db(self, mock_db_session) -> None:
        """Test get_stack_service returns a StackService over the session."""
        # Act
        service = get_stack_service(db=mock_db_session)

        # Assert
        assert isinstance(service, StackService)
        assert service.db is mock_db_session

    def test_get_progression_service_should_use_cached_generator(
        self, mock_db_session, fake_cache
    ) -> None:
        """Test the response generator comes from the cache."""
        # Act
        service = get_progression_service(db=mock_db_session)

        # Assert
        assert isinstance(service, ProgressionService)
        assert service._generator is fake_cache.response_generator

    def test_get_search_service_should_accept_missing_store(self, mock_db_session, fake_cache) -> None:
        """Test search works without a configured vector store."""
        # Act
        service = get_search_service(db=mock_db_session)

        # Assert
        assert isinstance(service, SearchService)
        assert service._vector_store is None

    def test_get_analytics_service_should_wrap_insights(self, mock_db_session, fake_cache) -> None:
        """Test analytics receives the insights service."""
        # Arrange
        insights = get_insights_service(db=mock_db_session)

        # Act
        service = get_analytics_service(db=mock_db_session, insights_service=insights)

        # Assert
        assert isinstance(insights, InsightsService)
        assert isinstance(service, AnalyticsService)
        assert service._insights is insights


class TestServiceCache:
    """Test suite for ServiceCache lazy properties."""

    def test_vector_store_should_resolve_once(self) -> None:
        """Test an unconfigured store is resolved a single time."""
        # Arrange
        cache = ServiceCache()

        # Act
        with patch(
            "stacks.api.deps.dependencies.resolve_vector_store", return_value=None
        ) as resolve:
            first = cache.vector_store
            second = cache.vector_store

        # Assert
        assert first is None and second is None
        resolve.assert_called_once()

    def test_clear_should_reset_instances(self) -> None:
        """Test clear forces re-resolution."""
        # Arrange
        cache = ServiceCache()
        with patch("stacks.api.deps.dependencies.resolve_vector_store", return_value=None) as resolve:
            cache.vector_store

            # Act
            cache.clear()
            cache.vector_store

        # Assert
        assert resolve.call_count == 2


def test_get_settings_dependency_should_return_settings() -> None:
    """Test the cached settings dependency."""
    assert isinstance(get_settings_dependency(), Settings)
