"""
Test suite for StackService.

System role: Verification of session lifecycle, export and statistics
"""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from stacks.application.services import ProgressionService, StackService
from stacks.boundary.db.base import as_utc
from stacks.boundary.db.models import StackStatus
from stacks.core.exceptions import AccessDeniedError, SessionNotFoundError, ValidationError
from stacks.core.progression import SessionLockRegistry

OWNER = "user_owner"


@pytest.fixture
def stack_service(test_async_db: AsyncSession) -> StackService:
    return StackService(test_async_db)


async def _create(stack_service: StackService, owner_id: str = OWNER, stack_type: str = "angry"):
    return await stack_service.create_session(
        owner_id=owner_id,
        title="Traffic Jam",
        stack_type=stack_type,
        domain="Balance",
        subject="the commute",
    )


class TestCreateSession:
    """Test suite for StackService.create_session()."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,kwargs",
        [
            ("title", {"title": "  "}),
            ("subject", {"subject": ""}),
            ("stackType", {"stack_type": "joy"}),
            ("domain", {"domain": "soul"}),
        ],
    )
    async def test_invalid_setup_should_raise(
        self, stack_service: StackService, field: str, kwargs: dict
    ) -> None:
        """Test every setup field is validated."""
        # Arrange
        values = dict(
            owner_id=OWNER, title="t", stack_type="idea", domain="mind", subject="s"
        )
        values.update(kwargs)

        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            await stack_service.create_session(**values)
        assert exc_info.value.details["field"] == field


class TestReads:
    """Test suite for ownership checks on reads."""

    @pytest.mark.asyncio
    async def test_get_session_unknown_should_raise_not_found(self, stack_service: StackService) -> None:
        """Test missing sessions raise SessionNotFoundError."""
        with pytest.raises(SessionNotFoundError):
            await stack_service.get_session(uuid.uuid4(), OWNER)

    @pytest.mark.asyncio
    async def test_get_messages_other_owner_should_be_denied(self, stack_service: StackService) -> None:
        """Test another user cannot read the transcript."""
        # Arrange
        session = await _create(stack_service)

        # Act & Assert
        with pytest.raises(AccessDeniedError):
            await stack_service.get_messages(session.id, "intruder")


class TestCompleteAndDelete:
    """Test suite for forced completion and deletion."""

    @pytest.mark.asyncio
    async def test_complete_should_be_idempotent(self, stack_service: StackService) -> None:
        """Test completing twice keeps the first completion time and the cursor."""
        # Arrange
        session = await _create(stack_service)

        # Act
        first = await stack_service.complete_session(session.id, OWNER)
        completed_at = as_utc(first.completed_at)
        second = await stack_service.complete_session(session.id, OWNER)

        # Assert
        assert second.status == StackStatus.COMPLETED
        assert as_utc(second.completed_at) == completed_at
        assert second.current_question_index == 3

    @pytest.mark.asyncio
    async def test_delete_should_return_message_ids(self, stack_service: StackService) -> None:
        """Test deletion removes the session and reports its message ids."""
        # Arrange
        session = await _create(stack_service)
        session_id = session.id
        messages = await stack_service.get_messages(session_id, OWNER)

        # Act
        removed = await stack_service.delete_session(session_id, OWNER)

        # Assert
        assert removed == [m.id for m in messages]
        with pytest.raises(SessionNotFoundError):
            await stack_service.get_session(session_id, OWNER)


class TestExportAndStats:
    """Test suite for export, listing and statistics."""

    @pytest.mark.asyncio
    async def test_export_should_be_byte_identical_without_writes(
        self, test_async_db: AsyncSession, stack_service: StackService, fake_generator
    ) -> None:
        """Test two exports with no intervening writes match."""
        # Arrange
        session = await _create(stack_service)
        progression = ProgressionService(test_async_db, fake_generator, locks=SessionLockRegistry())
        await progression.advance(session.id, OWNER, "I was cut off")

        # Act
        first = await stack_service.export_transcript(session.id, OWNER)
        second = await stack_service.export_transcript(session.id, OWNER)

        # Assert
        assert first == second
        assert first.filename == "traffic-jam-transcript.txt"
        assert "Stack Type: Angry" in first.content
        assert "CORE 4 Domain: Balance" in first.content
        assert "Your Response:\nI was cut off\n" in first.content

    @pytest.mark.asyncio
    async def test_stats_and_recent_should_be_scoped_to_owner(self, stack_service: StackService) -> None:
        """Test counts and listings only include the caller's sessions."""
        # Arrange
        ids = [(await _create(stack_service)).id for _ in range(6)]
        await _create(stack_service, owner_id="other")
        await stack_service.complete_session(ids[0], OWNER)

        # Act
        stats = await stack_service.get_stats(OWNER)
        recent = await stack_service.recent_sessions(OWNER)
        everything = await stack_service.list_sessions(OWNER)

        # Assert
        assert stats == {"totalStacks": 6, "completedStacks": 1, "inProgressStacks": 5}
        assert len(recent) == 5
        assert len(everything) == 6
        assert all(s.owner_id == OWNER for s in everything)
