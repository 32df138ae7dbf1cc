"""
Background embedding indexer.

Keeps the message vector index in step with the relational transcript.
Scheduled as FastAPI background tasks after the response is sent; any
failure is logged and dropped so it can never reach the caller.

Dependencies: stacks.boundary.vdb
System role: Fire-and-forget vector index maintenance
"""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from stacks.boundary.db.models import StackMessageModel, StackSessionModel
from stacks.boundary.vdb.vector_store_factory import get_vector_store
from stacks.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


def message_metadata(session: StackSessionModel, message: StackMessageModel) -> dict[str, Any]:
    """Metadata stored next to a message embedding."""
    metadata: dict[str, Any] = {
        "role": message.role.value,
        "stackType": session.stack_type.value,
        "core4Domain": session.domain.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message.question_number is not None:
        metadata["questionNumber"] = message.question_number
    return metadata


def index_message(
    owner_id: str,
    session_id: UUID,
    message_id: UUID,
    content: str,
    metadata: dict[str, Any],
) -> None:
    """
    Embed and upsert one message. Never raises.

    Args:
        owner_id: Owner of the session
        session_id: Session UUID
        message_id: Message UUID (vector document id)
        content: Full message text
        metadata: Extra fields stored with the vector
    """
    try:
        get_vector_store().upsert_message_embedding(
            message_id=str(message_id),
            owner_id=owner_id,
            session_id=str(session_id),
            content=content,
            metadata=metadata,
        )
    except Exception as e:
        log_exception_with_context(
            logger,
            "Error upserting message embedding",
            e,
            message_id=str(message_id),
            session_id=str(session_id),
            content_len=len(content),
        )


def remove_messages(message_ids: list[UUID]) -> None:
    """Drop embeddings of deleted messages. Never raises."""
    if not message_ids:
        return
    try:
        get_vector_store().delete_message_embeddings([str(m) for m in message_ids])
    except Exception as e:
        log_exception_with_context(
            logger, "Error deleting message embeddings", e, message_ids=message_ids
        )
