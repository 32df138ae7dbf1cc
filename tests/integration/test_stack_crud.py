"""
Test suite for Stack session and message CRUD operations.

Runs against an in-memory SQLite database.

System role: Verification of Stack persistence layer
"""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from stacks.boundary.db.base import as_utc
from stacks.boundary.db.CRUD import stack_message_crud, stack_session_crud
from stacks.boundary.db.models import MessageRole, StackStatus
from stacks.core.question_flows import Core4Domain, StackType


async def _create_session(db: AsyncSession, owner_id: str = "owner", **overrides):
    values = dict(
        owner_id=owner_id,
        title="Morning",
        stack_type=StackType.GRATITUDE,
        domain=Core4Domain.BEING,
        subject="my sister",
        current_question_index=3,
        status=StackStatus.IN_PROGRESS,
    )
    values.update(overrides)
    return await stack_session_crud.create(db, **values)


class TestStackSessionCRUD:
    """Test suite for StackSessionCRUD."""

    @pytest.mark.asyncio
    async def test_create_should_set_defaults(self, test_async_db: AsyncSession) -> None:
        """Test id and timestamps are generated on insert."""
        # Act
        session = await _create_session(test_async_db)

        # Assert
        assert isinstance(session.id, uuid.UUID)
        assert session.created_at is not None
        assert session.completed_at is None
        assert session.status == StackStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_list_by_owner_should_filter_and_order_newest_first(
        self, test_async_db: AsyncSession
    ) -> None:
        """Test only the owner's sessions are listed, newest first."""
        # Arrange
        older = await _create_session(test_async_db, title="older")
        newer = await _create_session(
            test_async_db, title="newer", created_at=as_utc(older.created_at) + timedelta(seconds=5)
        )
        await _create_session(test_async_db, owner_id="other")

        # Act
        sessions = await stack_session_crud.list_by_owner(test_async_db, "owner")
        limited = await stack_session_crud.list_by_owner(test_async_db, "owner", limit=1)

        # Assert
        assert [s.id for s in sessions] == [newer.id, older.id]
        assert [s.id for s in limited] == [newer.id]

    @pytest.mark.asyncio
    async def test_count_by_status_should_default_to_zero(self, test_async_db: AsyncSession) -> None:
        """Test every status is present in the counts."""
        # Arrange
        await _create_session(test_async_db)
        await _create_session(test_async_db)

        # Act
        counts = await stack_session_crud.count_by_status(test_async_db, "owner")

        # Assert
        assert counts == {StackStatus.IN_PROGRESS: 2, StackStatus.COMPLETED: 0}

    @pytest.mark.asyncio
    async def test_mark_completed_should_keep_cursor(self, test_async_db: AsyncSession) -> None:
        """Test forced completion sets status and time only."""
        # Arrange
        session = await _create_session(test_async_db, current_question_index=7)

        # Act
        updated = await stack_session_crud.mark_completed(test_async_db, session.id)

        # Assert
        assert updated.status == StackStatus.COMPLETED
        assert updated.completed_at is not None
        assert updated.current_question_index == 7

    @pytest.mark.asyncio
    async def test_delete_with_messages_should_remove_transcript(
        self, test_async_db: AsyncSession
    ) -> None:
        """Test deleting a session deletes its messages."""
        # Arrange
        session = await _create_session(test_async_db)
        await stack_message_crud.append(test_async_db, session.id, MessageRole.ASSISTANT, "Q", 4)
        await stack_message_crud.append(test_async_db, session.id, MessageRole.USER, "A")

        # Act
        deleted = await stack_session_crud.delete_with_messages(test_async_db, session.id)

        # Assert
        assert deleted is True
        assert await stack_session_crud.get_by_id(test_async_db, session.id) is None
        assert list(await stack_message_crud.list_for_session(test_async_db, session.id)) == []


class TestStackMessageCRUD:
    """Test suite for StackMessageCRUD."""

    @pytest.mark.asyncio
    async def test_append_should_keep_strict_order(self, test_async_db: AsyncSession) -> None:
        """Test appended messages get strictly increasing timestamps."""
        # Arrange
        session = await _create_session(test_async_db)

        # Act
        for i in range(5):
            await stack_message_crud.append(test_async_db, session.id, MessageRole.USER, f"m{i}")
        messages = await stack_message_crud.list_for_session(test_async_db, session.id)

        # Assert
        assert [m.content for m in messages] == [f"m{i}" for i in range(5)]
        stamps = [as_utc(m.created_at) for m in messages]
        assert all(a < b for a, b in zip(stamps, stamps[1:]))

    @pytest.mark.asyncio
    async def test_get_in_session_should_scope_to_session(self, test_async_db: AsyncSession) -> None:
        """Test a message is not found through another session."""
        # Arrange
        first = await _create_session(test_async_db)
        second = await _create_session(test_async_db)
        message = await stack_message_crud.append(test_async_db, first.id, MessageRole.USER, "A")

        # Act
        found = await stack_message_crud.get_in_session(test_async_db, first.id, message.id)
        missing = await stack_message_crud.get_in_session(test_async_db, second.id, message.id)

        # Assert
        assert found.id == message.id
        assert missing is None

    @pytest.mark.asyncio
    async def test_get_last_should_return_newest(self, test_async_db: AsyncSession) -> None:
        """Test get_last returns the most recent message or None."""
        # Arrange
        session = await _create_session(test_async_db)
        assert await stack_message_crud.get_last(test_async_db, session.id) is None
        await stack_message_crud.append(test_async_db, session.id, MessageRole.ASSISTANT, "Q", 4)
        last = await stack_message_crud.append(test_async_db, session.id, MessageRole.USER, "A")

        # Act
        found = await stack_message_crud.get_last(test_async_db, session.id)

        # Assert
        assert found.id == last.id

    @pytest.mark.asyncio
    async def test_delete_many_should_return_rowcount(self, test_async_db: AsyncSession) -> None:
        """Test bulk delete by ids."""
        # Arrange
        session = await _create_session(test_async_db)
        a = await stack_message_crud.append(test_async_db, session.id, MessageRole.USER, "a")
        b = await stack_message_crud.append(test_async_db, session.id, MessageRole.USER, "b")
        await stack_message_crud.append(test_async_db, session.id, MessageRole.USER, "c")

        # Act
        deleted = await stack_message_crud.delete_many(test_async_db, [a.id, b.id])
        empty = await stack_message_crud.delete_many(test_async_db, [])
        remaining = await stack_message_crud.list_for_session(test_async_db, session.id)

        # Assert
        assert deleted == 2
        assert empty == 0
        assert [m.content for m in remaining] == ["c"]
