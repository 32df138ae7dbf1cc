"""
Vector store factory.

Builds the process-wide MongoVectorStore on first use from settings.

Dependencies: pymongo, stacks.boundary.vdb, stacks.configs
System role: Vector store instantiation
"""

import logging
from functools import lru_cache

from pymongo import MongoClient

from stacks.boundary.vdb.embeddings import FixedDimensionEmbeddings
from stacks.boundary.vdb.mongo_vector_store import MongoVectorStore
from stacks.configs import get_settings
from stacks.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)


@lru_cache
def get_vector_store() -> MongoVectorStore:
    """
    Get the memoized vector store.

    Returns:
        MongoVectorStore: Configured store

    Raises:
        VectorStoreError: If no MongoDB URI is configured
    """
    settings = get_settings().vector_store
    if not settings.mongodb_uri:
        raise VectorStoreError(
            "VECTOR_STORE_MONGODB_URI is not set",
            operation="connect",
        )

    logger.info(f"{__name__}:get_vector_store - Creating MongoDB Atlas vector store")
    embeddings = FixedDimensionEmbeddings(
        model=settings.embedding_model,
        dimension=settings.embedding_dimension,
        max_chars=settings.max_embedding_chars,
        cohere_api_key=settings.cohere_api_key,
    )
    return MongoVectorStore(
        client=MongoClient(settings.mongodb_uri, tz_aware=True),
        embeddings=embeddings,
        database_name=settings.database_name,
        collection_name=settings.collection_name,
        index_name=settings.index_name,
        preview_chars=settings.preview_chars,
        candidate_multiplier=settings.candidate_multiplier,
    )


def close_vector_store() -> None:
    """Close the memoized store if one was created."""
    if get_vector_store.cache_info().currsize:
        get_vector_store().close()
        get_vector_store.cache_clear()
