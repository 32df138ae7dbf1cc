"""
Vector database schemas.

Pydantic models for stored message embeddings and search results.
Serialized field names are camelCase to match the document layout in
the Atlas collection and the API responses.

Dependencies: pydantic, stacks.models.common
System role: Type definitions for vector operations
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from stacks.models.common import CamelModel


class MessageEmbeddingDocument(CamelModel):
    """
    One document in the message_embeddings collection.

    The primary key is the relational message id, so re-indexing a
    message overwrites its previous vector.
    """

    id: str = Field(alias="_id", description="Message ID")
    embedding: list[float] = Field(description="Message embedding vector")
    user_id: str = Field(description="Owner of the message")
    session_id: str = Field(description="Session the message belongs to")
    content: str = Field(description="Preview of the message text")
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class SemanticMatch(CamelModel):
    """Single result from semantic search."""

    id: str = Field(description="Message ID")
    score: float = Field(description="Vector search score")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="userId, sessionId, content, stored metadata and timestamp",
    )


class PatternMatch(CamelModel):
    """Theme match flattened for pattern analysis."""

    session_id: str | None = None
    content: str | None = None
    similarity: float
    timestamp: str | None = None
