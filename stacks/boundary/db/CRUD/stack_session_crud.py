"""
Stack session CRUD operations.

Provides Create, Read, Update, Delete operations for StackSessionModel
with owner-scoped listing and status statistics.

Dependencies: sqlalchemy, stacks.boundary.db.models
System role: Session persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stacks.boundary.db.base import utcnow
from stacks.boundary.db.CRUD.base_crud import BaseCRUD
from stacks.boundary.db.models.stack_message_model import StackMessageModel
from stacks.boundary.db.models.stack_session_model import StackSessionModel, StackStatus


class StackSessionCRUD(BaseCRUD[StackSessionModel]):
    """
    CRUD operations for StackSessionModel.

    Extends BaseCRUD with owner-scoped listing, status counts and
    completion helpers.
    """

    def __init__(self) -> None:
        """Initialize StackSessionCRUD with StackSessionModel."""
        super().__init__(StackSessionModel)

    async def list_by_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        limit: int | None = None,
    ) -> Sequence[StackSessionModel]:
        """
        Retrieve an owner's sessions, newest first.

        Args:
            session: Async database session
            owner_id: Identity provider user id
            limit: Maximum number of sessions to return (None for all)

        Returns:
            Sequence of StackSessionModels ordered by created_at descending
        """
        stmt = (
            select(StackSessionModel)
            .where(StackSessionModel.owner_id == owner_id)
            .order_by(StackSessionModel.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_status(
        self,
        session: AsyncSession,
        owner_id: str,
    ) -> dict[StackStatus, int]:
        """
        Count an owner's sessions grouped by status.

        Returns:
            dict mapping every StackStatus to its count (0 when absent)
        """
        stmt = (
            select(StackSessionModel.status, func.count())
            .where(StackSessionModel.owner_id == owner_id)
            .group_by(StackSessionModel.status)
        )
        result = await session.execute(stmt)
        counts = {status: 0 for status in StackStatus}
        for status, count in result.all():
            counts[StackStatus(status)] = count
        return counts

    async def mark_completed(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> StackSessionModel | None:
        """
        Mark a session completed with the current time, leaving the cursor as is.

        Returns:
            Updated StackSessionModel if found, None otherwise
        """
        return await self.update_by_id(
            session,
            id,
            status=StackStatus.COMPLETED,
            completed_at=utcnow(),
        )

    async def delete_with_messages(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a session and its transcript.

        Messages are removed explicitly so the cascade also holds on
        databases that do not enforce foreign keys.

        Returns:
            True if the session was deleted, False if not found
        """
        await session.execute(
            delete(StackMessageModel).where(StackMessageModel.session_id == id)
        )
        return await self.delete_by_id(session, id)


stack_session_crud = StackSessionCRUD()
