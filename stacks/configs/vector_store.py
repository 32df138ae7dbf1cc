"""
Vector store configuration settings.

Manages MongoDB Atlas Vector Search and Cohere embedding configuration
for semantic retrieval over past Stack messages.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for semantic search
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """MongoDB Atlas vector store and Cohere embedding configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    mongodb_uri: str | None = Field(
        default=None,
        description="MongoDB Atlas connection string",
    )
    database_name: str = Field(default="mindgrowth", description="MongoDB database name")
    collection_name: str = Field(
        default="message_embeddings",
        description="Collection holding message vectors",
    )
    index_name: str = Field(default="vector_index", description="Atlas vector search index name")

    cohere_api_key: str | None = Field(default=None, description="Cohere API key")
    embedding_model: str = Field(
        default="embed-english-v3.0",
        description="Cohere embedding model ID",
    )
    embedding_dimension: int = Field(
        default=1024,
        description="Embedding vector dimension (must match the Atlas index definition)",
    )
    max_embedding_chars: int = Field(
        default=8000,
        description="Input text is truncated to this many characters before embedding",
    )
    preview_chars: int = Field(
        default=500,
        description="Characters of message content stored alongside the vector",
    )

    top_k: int = Field(default=10, description="Default number of results to retrieve")
    candidate_multiplier: int = Field(
        default=10,
        description="numCandidates = top_k * candidate_multiplier",
    )
