"""
Stack message CRUD operations.

Transcript reads and appends for StackMessageModel. Appends assign
creation timestamps that are strictly increasing within a session so the
transcript order is total even when two rows land in the same clock tick.

Dependencies: sqlalchemy, stacks.boundary.db.models
System role: Transcript persistence operations
"""

from datetime import timedelta
from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stacks.boundary.db.base import as_utc, utcnow
from stacks.boundary.db.CRUD.base_crud import BaseCRUD
from stacks.boundary.db.models.stack_message_model import MessageRole, StackMessageModel

_TICK = timedelta(microseconds=1)


class StackMessageCRUD(BaseCRUD[StackMessageModel]):
    """CRUD operations for StackMessageModel, always scoped to one session."""

    def __init__(self) -> None:
        """Initialize StackMessageCRUD with StackMessageModel."""
        super().__init__(StackMessageModel)

    async def list_for_session(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> Sequence[StackMessageModel]:
        """
        Retrieve a session transcript in creation order.

        Args:
            session: Async database session
            session_id: Owning session UUID

        Returns:
            Sequence of StackMessageModels, oldest first
        """
        stmt = (
            select(StackMessageModel)
            .where(StackMessageModel.session_id == session_id)
            .order_by(StackMessageModel.created_at.asc(), StackMessageModel.id.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_in_session(
        self,
        session: AsyncSession,
        session_id: UUID,
        message_id: UUID,
    ) -> StackMessageModel | None:
        """
        Retrieve a message only if it belongs to the given session.

        Returns:
            StackMessageModel if found in that session, None otherwise
        """
        stmt = select(StackMessageModel).where(
            StackMessageModel.id == message_id,
            StackMessageModel.session_id == session_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_last(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> StackMessageModel | None:
        """Retrieve the most recent message of a session."""
        stmt = (
            select(StackMessageModel)
            .where(StackMessageModel.session_id == session_id)
            .order_by(StackMessageModel.created_at.desc(), StackMessageModel.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def append(
        self,
        session: AsyncSession,
        session_id: UUID,
        role: MessageRole,
        content: str,
        question_number: int | None = None,
    ) -> StackMessageModel:
        """
        Append a message to the end of a session transcript.

        Args:
            session: Async database session
            session_id: Owning session UUID
            role: Message author
            content: Message text
            question_number: 1-based question number for assistant questions

        Returns:
            Created StackMessageModel
        """
        created_at = utcnow()
        last = await self.get_last(session, session_id)
        if last is not None and as_utc(last.created_at) >= created_at:
            created_at = as_utc(last.created_at) + _TICK

        return await self.create(
            session,
            session_id=session_id,
            role=role,
            content=content,
            question_number=question_number,
            created_at=created_at,
        )


stack_message_crud = StackMessageCRUD()
