"""
Generic async CRUD for UUID-keyed models.

Every method flushes and never commits: the service that opened the
transaction decides whether the unit of work is kept or rolled back.

Dependencies: sqlalchemy
System role: Shared persistence primitives for session and message CRUD
"""

from typing import Generic, Iterable, TypeVar
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from stacks.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Primary-key operations shared by all Stack models.

    Attributes:
        model: Mapped class the queries target
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values) -> ModelT:
        """Insert a row and return it with server defaults loaded."""
        instance = self.model(**values)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_for_update(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """
        Load a row and hold its lock until the transaction ends.

        Emits SELECT ... FOR UPDATE on PostgreSQL. SQLite has no row locks
        and drops the clause. Identity-map state is overwritten with the
        locked row so a stale cursor is never read.
        """
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_by_id(self, session: AsyncSession, id: UUID, **values) -> ModelT | None:
        """
        Apply column values to one row.

        Returns:
            The refreshed row, or None when the id does not exist
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**values)
            .returning(self.model)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    async def delete_many(self, session: AsyncSession, ids: Iterable[UUID]) -> int:
        """
        Delete rows by primary key.

        Returns:
            Number of rows deleted (0 for an empty id list)
        """
        ids = list(ids)
        if not ids:
            return 0
        result = await session.execute(
            delete(self.model)
            .where(self.model.id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
