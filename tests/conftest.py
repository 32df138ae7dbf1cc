"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, fake response generator, session builders
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

OWNER_ID = "user_test_owner"
OTHER_OWNER_ID = "user_someone_else"


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from stacks.boundary.db.base import Base

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Create session for test
    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


class FakeResponseGenerator:
    """Deterministic stand-in for the Anthropic-backed generator."""

    def __init__(self, fail_on_cursor: int | None = None) -> None:
        self.calls: list[dict] = []
        self.fail_on_cursor = fail_on_cursor

    async def generate(self, stack_type, cursor, answer, history, subject):
        from stacks.core.exceptions import GenerationError

        self.calls.append({
            "stack_type": stack_type,
            "cursor": cursor,
            "answer": answer,
            "history": list(history),
            "subject": subject,
        })
        if self.fail_on_cursor is not None and cursor == self.fail_on_cursor:
            raise GenerationError("model unavailable")
        return f"reply to question {cursor + 1}"


@pytest.fixture
def fake_generator() -> FakeResponseGenerator:
    """Provide a fake response generator."""
    return FakeResponseGenerator()


def make_snapshot(
    stack_type: str,
    created_at: datetime,
    status: str = "completed",
) -> SimpleNamespace:
    """Lightweight session stand-in for pure analytics and export code."""
    return SimpleNamespace(
        id=uuid.uuid4(),
        stack_type=stack_type,
        status=status,
        created_at=created_at,
    )


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time for time-window calculations."""
    return datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def snapshot_factory():
    """Provide the session snapshot builder."""
    return make_snapshot


@pytest.fixture
def generator_factory():
    """Provide the fake generator class (for failure injection)."""
    return FakeResponseGenerator
