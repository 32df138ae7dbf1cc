"""
MongoDB Atlas vector store for message embeddings.

Writes one document per message with its Cohere embedding and queries
them through Atlas $vectorSearch. Every query is scoped to a single owner.

The Atlas search index must be created out of band:
index "vector_index", path "embedding", 1024 dimensions, dotProduct
similarity, with userId and sessionId declared as filter fields.

Dependencies: pymongo, langchain_mongodb, tenacity
System role: Semantic retrieval over a user's reflections
"""

import logging
from datetime import datetime, timezone
from typing import Any

from langchain_mongodb import MongoDBAtlasVectorSearch
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from stacks.boundary.vdb.embeddings import FixedDimensionEmbeddings
from stacks.boundary.vdb.vector_schemas import (
    MessageEmbeddingDocument,
    PatternMatch,
    SemanticMatch,
)
from stacks.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)


def _iso(value: Any) -> str | None:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return value


class MongoVectorStore:
    """
    Message embedding store backed by MongoDB Atlas Vector Search.

    Writes go straight to the collection so the stored preview can be
    shorter than the embedded text; reads go through LangChain's
    MongoDBAtlasVectorSearch with the owner filter always applied.
    """

    def __init__(
        self,
        client: MongoClient,
        embeddings: FixedDimensionEmbeddings,
        database_name: str = "mindgrowth",
        collection_name: str = "message_embeddings",
        index_name: str = "vector_index",
        preview_chars: int = 500,
        candidate_multiplier: int = 10,
    ) -> None:
        """
        Initialize the store.

        Args:
            client: Connected pymongo client
            embeddings: Embedding model wrapper
            database_name: MongoDB database name
            collection_name: Collection holding message embeddings
            index_name: Atlas vector search index name
            preview_chars: Stored content preview length
            candidate_multiplier: numCandidates = top_k * multiplier
        """
        self._client = client
        self._collection = client[database_name][collection_name]
        self._embeddings = embeddings
        self._preview_chars = preview_chars
        self._candidate_multiplier = candidate_multiplier

        self._vector_store = MongoDBAtlasVectorSearch(
            collection=self._collection,
            embedding=embeddings,
            index_name=index_name,
            text_key="content",
            embedding_key="embedding",
            relevance_score_fn="dotProduct",
        )
        logger.info(
            f"{__name__}:__init__ - Using {database_name}.{collection_name} index={index_name}"
        )

    def upsert_message_embedding(
        self,
        message_id: str,
        owner_id: str,
        session_id: str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """
        Embed a message and write it under the message id.

        Raises:
            EmbeddingError: If embedding fails
            VectorStoreError: If the write fails
        """
        document = MessageEmbeddingDocument(
            id=message_id,
            embedding=self._embeddings.generate_embedding(content),
            user_id=owner_id,
            session_id=session_id,
            content=content[: self._preview_chars],
            metadata=metadata or {},
            created_at=datetime.now(timezone.utc),
        )

        try:
            self._collection.update_one(
                {"_id": message_id},
                {"$set": document.model_dump(by_alias=True)},
                upsert=True,
            )
        except PyMongoError as e:
            raise VectorStoreError(
                f"Failed to upsert embedding: {e}",
                operation="upsert",
                details={"message_id": message_id},
            ) from e

        logger.info(f"{__name__}:upsert_message_embedding - Upserted message {message_id}")

    def delete_message_embeddings(self, message_ids: list[str]) -> int:
        """
        Remove stored embeddings for the given message ids.

        Raises:
            VectorStoreError: If the delete fails
        """
        if not message_ids:
            return 0
        try:
            result = self._collection.delete_many({"_id": {"$in": message_ids}})
        except PyMongoError as e:
            raise VectorStoreError(
                f"Failed to delete embeddings: {e}",
                operation="delete",
                details={"count": len(message_ids)},
            ) from e

        logger.info(
            f"{__name__}:delete_message_embeddings - Deleted {result.deleted_count} embeddings"
        )
        return result.deleted_count

    @retry(
        retry=retry_if_exception_type(PyMongoError),
        stop=stop_after_attempt(3),
        wait=wait_exponential_jitter(initial=1, max=10, jitter=2),
        before_sleep=lambda retry_state: logger.warning(
            f"{__name__}:semantic_search - Retry {retry_state.attempt_number}/3 after transient error"
        ),
        reraise=True,
    )
    def _search_with_retry(
        self,
        query: str,
        k: int,
        pre_filter: dict[str, Any],
    ) -> list[tuple]:
        """Execute $vectorSearch with retry on transient driver errors."""
        return self._vector_store.similarity_search_with_score(
            query=query,
            k=k,
            pre_filter=pre_filter,
            oversampling_factor=self._candidate_multiplier,
        )

    def semantic_search(
        self,
        owner_id: str,
        query: str,
        top_k: int = 10,
        filter: dict[str, Any] | None = None,
    ) -> list[SemanticMatch]:
        """
        Nearest-neighbour search over one owner's messages.

        The userId filter is always applied; ``filter`` adds conditions
        on the stored document fields.

        Returns:
            list[SemanticMatch]: Matches, best first. Empty on any failure.
        """
        pre_filter: dict[str, Any] = {"userId": owner_id}
        if filter:
            pre_filter.update(filter)

        try:
            results = self._search_with_retry(query=query, k=top_k, pre_filter=pre_filter)
        except Exception as e:
            logger.error(
                f"{__name__}:semantic_search - {type(e).__name__}: {e}",
                extra={"owner_id": owner_id, "top_k": top_k},
            )
            return []

        matches = []
        for doc, score in results:
            stored = dict(doc.metadata)
            extra_metadata = stored.get("metadata") or {}
            matches.append(
                SemanticMatch(
                    id=str(stored.get("_id", "")),
                    score=float(score),
                    metadata={
                        "userId": stored.get("userId"),
                        "sessionId": stored.get("sessionId"),
                        "content": doc.page_content,
                        **extra_metadata,
                        "timestamp": _iso(stored.get("createdAt")),
                    },
                )
            )

        logger.info(
            f"{__name__}:semantic_search - Found {len(matches)} results",
            extra={"owner_id": owner_id, "top_k": top_k},
        )
        return matches

    def find_similar_messages(
        self,
        owner_id: str,
        content: str,
        session_id: str | None = None,
        top_k: int = 5,
    ) -> list[SemanticMatch]:
        """Search for messages like ``content`` outside the given session."""
        filter = {"sessionId": {"$ne": session_id}} if session_id else None
        return self.semantic_search(owner_id, content, top_k, filter)

    def analyze_patterns(self, owner_id: str, theme: str) -> list[PatternMatch]:
        """Top 20 matches for a theme, flattened."""
        return [
            PatternMatch(
                session_id=match.metadata.get("sessionId"),
                content=match.metadata.get("content"),
                similarity=match.score,
                timestamp=match.metadata.get("timestamp"),
            )
            for match in self.semantic_search(owner_id, theme, 20)
        ]

    def close(self) -> None:
        """Close the underlying MongoDB client."""
        self._client.close()
        logger.info(f"{__name__}:close - MongoDB connection closed")
