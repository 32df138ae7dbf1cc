"""
Search service orchestrator.

Semantic search over a user's reflections, similar-message lookup and
theme pattern analysis. Vector store calls are blocking and run in the
thread pool; an unavailable store yields empty results.

Dependencies: fastapi.concurrency, stacks.boundary.vdb, stacks.boundary.db
System role: Retrieval use case orchestration
"""

import logging
from collections.abc import Callable
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from stacks.application.services.stack_service import load_owned_session
from stacks.boundary.db.CRUD.stack_message_crud import stack_message_crud
from stacks.boundary.vdb.mongo_vector_store import MongoVectorStore
from stacks.boundary.vdb.vector_schemas import PatternMatch, SemanticMatch
from stacks.boundary.vdb.vector_store_factory import get_vector_store
from stacks.core.exceptions import MessageNotFoundError, ValidationError, VectorStoreError

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 100


def resolve_vector_store(
    factory: Callable[[], MongoVectorStore] = get_vector_store,
) -> MongoVectorStore | None:
    """Build the vector store, or None when it is not configured."""
    try:
        return factory()
    except VectorStoreError as e:
        logger.warning(f"{__name__}:resolve_vector_store - Vector store unavailable: {e}")
        return None


async def search_reflections(
    vector_store: MongoVectorStore | None,
    owner_id: str,
    query: str,
    top_k: int,
) -> list[SemanticMatch]:
    """Owner-scoped semantic search off the event loop."""
    if vector_store is None:
        return []
    return await run_in_threadpool(vector_store.semantic_search, owner_id, query, top_k)


class SearchService:
    """Search service orchestrator."""

    def __init__(self, db: AsyncSession, vector_store: MongoVectorStore | None) -> None:
        """
        Initialize search service.

        Args:
            db: Async SQLAlchemy session (ownership checks)
            vector_store: Message vector store, None when unavailable
        """
        self.db = db
        self._vector_store = vector_store

    async def search(
        self,
        owner_id: str,
        query: str,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[SemanticMatch]:
        """
        Search the owner's reflections.

        Raises:
            ValidationError: If the query is empty or limit is out of range
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query is required", field="query")
        if not 1 <= limit <= MAX_SEARCH_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_SEARCH_LIMIT}", field="limit")
        return await search_reflections(self._vector_store, owner_id, query, limit)

    async def find_similar(
        self,
        owner_id: str,
        session_id: UUID,
        message_id: UUID,
    ) -> list[SemanticMatch]:
        """
        Messages from other sessions that resemble the given message.

        Raises:
            SessionNotFoundError / AccessDeniedError: On lookup failure
            MessageNotFoundError: If the message is not in that session
        """
        session = await load_owned_session(self.db, session_id, owner_id)
        message = await stack_message_crud.get_in_session(self.db, session.id, message_id)
        if message is None:
            raise MessageNotFoundError(str(message_id), str(session_id))

        if self._vector_store is None:
            return []
        return await run_in_threadpool(
            self._vector_store.find_similar_messages,
            owner_id,
            message.content,
            str(session.id),
        )

    async def analyze_patterns(self, owner_id: str, theme: str) -> list[PatternMatch]:
        """
        Reflections matching a theme, flattened.

        Raises:
            ValidationError: If theme is empty
        """
        theme = (theme or "").strip()
        if not theme:
            raise ValidationError("Theme is required", field="theme")
        if self._vector_store is None:
            return []
        return await run_in_threadpool(self._vector_store.analyze_patterns, owner_id, theme)
