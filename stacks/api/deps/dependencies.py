"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: stacks.configs, stacks.application, stacks.boundary
System role: DI container for service injection
"""

from functools import lru_cache, partial

from fastapi import Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from stacks.application.services import (
    AnalyticsService,
    InsightsService,
    ProgressionService,
    SearchService,
    StackService,
)
from stacks.application.services.search_service import resolve_vector_store, search_reflections
from stacks.boundary.auth import verify_request
from stacks.boundary.db import get_async_db
from stacks.boundary.vdb.mongo_vector_store import MongoVectorStore
from stacks.configs import Settings, get_settings
from stacks.core.ai import StackResponseGenerator
from stacks.core.insights import CognitiveInsightsAnalyzer


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._vector_store = None
        self._vector_store_resolved = False
        self._response_generator = None
        self._insights_analyzer = None

    @property
    def vector_store(self) -> MongoVectorStore | None:
        """Get cached vector store (None when not configured)."""
        if not self._vector_store_resolved:
            self._vector_store = resolve_vector_store()
            self._vector_store_resolved = True
        return self._vector_store

    @property
    def response_generator(self) -> StackResponseGenerator:
        """Get cached Stack response generator."""
        if self._response_generator is None:
            self._response_generator = StackResponseGenerator()
        return self._response_generator

    @property
    def insights_analyzer(self) -> CognitiveInsightsAnalyzer:
        """Get cached insights analyzer bound to the vector store."""
        if self._insights_analyzer is None:
            self._insights_analyzer = CognitiveInsightsAnalyzer(
                search=partial(search_reflections, self.vector_store),
            )
        return self._insights_analyzer

    def clear(self) -> None:
        """Clear all cached instances."""
        self._vector_store = None
        self._vector_store_resolved = False
        self._response_generator = None
        self._insights_analyzer = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


async def get_current_owner_id(request: Request) -> str:
    """
    Resolve the bearer token to the requesting user's id.

    Raises:
        HTTPException(401): Missing, invalid or expired token
    """
    owner_id = await run_in_threadpool(verify_request, request)
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return owner_id


def get_stack_service(db: AsyncSession = Depends(get_async_db)) -> StackService:
    """
    Get stack service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        StackService: Stack service instance
    """
    return StackService(db=db)


def get_progression_service(db: AsyncSession = Depends(get_async_db)) -> ProgressionService:
    """
    Get progression service instance with the cached response generator.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        ProgressionService: Progression engine for one request
    """
    cache = get_service_cache()
    return ProgressionService(db=db, generator=cache.response_generator)


def get_search_service(db: AsyncSession = Depends(get_async_db)) -> SearchService:
    """Get search service instance."""
    return SearchService(db=db, vector_store=get_service_cache().vector_store)


def get_insights_service(db: AsyncSession = Depends(get_async_db)) -> InsightsService:
    """Get insights service instance."""
    cache = get_service_cache()
    return InsightsService(
        db=db,
        vector_store=cache.vector_store,
        analyzer=cache.insights_analyzer,
    )


def get_analytics_service(
    db: AsyncSession = Depends(get_async_db),
    insights_service: InsightsService = Depends(get_insights_service),
) -> AnalyticsService:
    """Get analytics service instance."""
    return AnalyticsService(db=db, insights_service=insights_service)
