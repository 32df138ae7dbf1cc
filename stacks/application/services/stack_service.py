"""
Stack service orchestrator.

Coordinates the Stack session lifecycle outside of answering: setup,
reads, forced completion, deletion, export and per-owner statistics.

Dependencies: stacks.boundary.db.CRUD, stacks.boundary.db.models, stacks.core
System role: Session use case orchestration
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from stacks.boundary.db.CRUD.stack_message_crud import stack_message_crud
from stacks.boundary.db.CRUD.stack_session_crud import stack_session_crud
from stacks.boundary.db.models import MessageRole, StackMessageModel, StackSessionModel, StackStatus
from stacks.core.exceptions import AccessDeniedError, SessionNotFoundError, ValidationError
from stacks.core.question_flows import (
    FIRST_CHAT_QUESTION_INDEX,
    opening_question,
    parse_domain,
    parse_stack_type,
)
from stacks.core.transcript import export_filename, render_transcript

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


@dataclass(frozen=True)
class TranscriptExport:
    """Rendered transcript plus its download filename."""

    filename: str
    content: str


async def load_owned_session(
    db: AsyncSession,
    session_id: UUID,
    owner_id: str,
    for_update: bool = False,
) -> StackSessionModel:
    """
    Load a session and check that ``owner_id`` owns it.

    Args:
        db: Async database session
        session_id: Session UUID
        owner_id: Requesting user id
        for_update: Lock the row until the transaction ends

    Returns:
        StackSessionModel: The owned session

    Raises:
        SessionNotFoundError: If no such session exists
        AccessDeniedError: If the session belongs to someone else
    """
    if for_update:
        session = await stack_session_crud.get_for_update(db, session_id)
    else:
        session = await stack_session_crud.get_by_id(db, session_id)

    if session is None:
        raise SessionNotFoundError(str(session_id))
    if session.owner_id != owner_id:
        logger.warning(
            f"{__name__}:load_owned_session - Ownership mismatch",
            extra={"session_id": str(session_id), "owner_id": owner_id},
        )
        raise AccessDeniedError(str(session_id), owner_id)
    return session


def _required(value: str | None, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError("All fields are required", field=field)
    return cleaned


class StackService:
    """Stack session service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize stack service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def create_session(
        self,
        owner_id: str,
        title: str,
        stack_type: str,
        domain: str,
        subject: str,
    ) -> StackSessionModel:
        """
        Create a session from the setup form.

        The form answers the first three questions, so the session starts
        with its cursor at index 3 and one assistant message asking that
        question.

        Args:
            owner_id: Requesting user id
            title: Stack title
            stack_type: Stack type tag
            domain: CORE 4 domain tag
            subject: Who/what is being stacked

        Returns:
            StackSessionModel: Created session

        Raises:
            ValidationError: If a field is empty or a tag is unknown
        """
        title = _required(title, "title")
        subject = _required(subject, "subject")
        stack_type = parse_stack_type(_required(stack_type, "stackType"))
        domain = parse_domain(_required(domain, "domain"))

        session = await stack_session_crud.create(
            self.db,
            owner_id=owner_id,
            title=title,
            stack_type=stack_type,
            domain=domain,
            subject=subject,
            current_question_index=FIRST_CHAT_QUESTION_INDEX,
            status=StackStatus.IN_PROGRESS,
        )
        await stack_message_crud.append(
            self.db,
            session.id,
            MessageRole.ASSISTANT,
            opening_question(stack_type, subject),
            question_number=FIRST_CHAT_QUESTION_INDEX + 1,
        )
        await self.db.commit()

        logger.info(
            f"{__name__}:create_session - Created session",
            extra={"session_id": str(session.id), "stack_type": stack_type.value},
        )
        return session

    async def get_session(self, session_id: UUID, owner_id: str) -> StackSessionModel:
        """
        Get an owned session.

        Raises:
            SessionNotFoundError: If not found
            AccessDeniedError: If not owned by owner_id
        """
        return await load_owned_session(self.db, session_id, owner_id)

    async def get_messages(self, session_id: UUID, owner_id: str) -> list[StackMessageModel]:
        """
        Get an owned session's transcript, oldest first.

        Raises:
            SessionNotFoundError: If not found
            AccessDeniedError: If not owned by owner_id
        """
        session = await load_owned_session(self.db, session_id, owner_id)
        return list(await stack_message_crud.list_for_session(self.db, session.id))

    async def get_message(
        self,
        session_id: UUID,
        message_id: UUID,
        owner_id: str,
    ) -> StackMessageModel | None:
        """Get one message of an owned session, or None if it is not in that session."""
        session = await load_owned_session(self.db, session_id, owner_id)
        return await stack_message_crud.get_in_session(self.db, session.id, message_id)

    async def complete_session(self, session_id: UUID, owner_id: str) -> StackSessionModel:
        """
        Force-complete a session regardless of its cursor.

        A session that is already completed keeps its original completion time.

        Raises:
            SessionNotFoundError: If not found
            AccessDeniedError: If not owned by owner_id
        """
        session = await load_owned_session(self.db, session_id, owner_id, for_update=True)
        if session.status != StackStatus.COMPLETED:
            session = await stack_session_crud.mark_completed(self.db, session.id)
        await self.db.commit()

        logger.info(
            f"{__name__}:complete_session - Completed",
            extra={"session_id": str(session_id), "cursor": session.current_question_index},
        )
        return session

    async def delete_session(self, session_id: UUID, owner_id: str) -> list[UUID]:
        """
        Delete a session and its transcript.

        Returns:
            list[UUID]: Ids of the deleted messages

        Raises:
            SessionNotFoundError: If not found
            AccessDeniedError: If not owned by owner_id
        """
        session = await load_owned_session(self.db, session_id, owner_id, for_update=True)
        messages = await stack_message_crud.list_for_session(self.db, session.id)
        await stack_session_crud.delete_with_messages(self.db, session.id)
        await self.db.commit()

        logger.info(
            f"{__name__}:delete_session - Deleted",
            extra={"session_id": str(session_id), "messages": len(messages)},
        )
        return [m.id for m in messages]

    async def export_transcript(self, session_id: UUID, owner_id: str) -> TranscriptExport:
        """
        Render an owned session as a plain-text transcript.

        Raises:
            SessionNotFoundError: If not found
            AccessDeniedError: If not owned by owner_id
        """
        session = await load_owned_session(self.db, session_id, owner_id)
        messages = await stack_message_crud.list_for_session(self.db, session.id)
        return TranscriptExport(
            filename=export_filename(session.title),
            content=render_transcript(session, messages),
        )

    async def list_sessions(self, owner_id: str) -> list[StackSessionModel]:
        """All sessions of an owner, newest first."""
        return list(await stack_session_crud.list_by_owner(self.db, owner_id))

    async def recent_sessions(self, owner_id: str, limit: int = RECENT_LIMIT) -> list[StackSessionModel]:
        """The owner's most recent sessions."""
        return list(await stack_session_crud.list_by_owner(self.db, owner_id, limit=limit))

    async def get_stats(self, owner_id: str) -> dict[str, int]:
        """
        Count an owner's sessions.

        Returns:
            dict: totalStacks, completedStacks, inProgressStacks
        """
        counts = await stack_session_crud.count_by_status(self.db, owner_id)
        return {
            "totalStacks": sum(counts.values()),
            "completedStacks": counts[StackStatus.COMPLETED],
            "inProgressStacks": counts[StackStatus.IN_PROGRESS],
        }
