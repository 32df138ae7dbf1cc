"""
Test suite for per-session locks.

System role: Verification of in-process serialization
"""

import asyncio

import pytest

from stacks.core.progression import SessionLockRegistry


class TestSessionLockRegistry:
    """Test suite for SessionLockRegistry."""

    @pytest.mark.asyncio
    async def test_same_key_should_serialize(self) -> None:
        """Test two holders of the same key never overlap."""
        # Arrange
        locks = SessionLockRegistry()
        events: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold("session-1"):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        # Act
        await asyncio.gather(worker("a"), worker("b"))

        # Assert
        assert events in (
            ["a-start", "a-end", "b-start", "b-end"],
            ["b-start", "b-end", "a-start", "a-end"],
        )

    @pytest.mark.asyncio
    async def test_different_keys_should_not_block(self) -> None:
        """Test holders of different keys run concurrently."""
        # Arrange
        locks = SessionLockRegistry()
        inside = asyncio.Event()

        async def first() -> None:
            async with locks.hold("a"):
                await asyncio.wait_for(inside.wait(), timeout=1)

        async def second() -> None:
            async with locks.hold("b"):
                inside.set()

        # Act & Assert
        await asyncio.gather(first(), second())

    @pytest.mark.asyncio
    async def test_locks_should_be_released_after_use(self) -> None:
        """Test idle keys are dropped from the registry."""
        # Arrange
        locks = SessionLockRegistry()

        # Act
        async with locks.hold("a"):
            assert len(locks) == 1

        # Assert
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_lock_should_be_released_on_error(self) -> None:
        """Test an exception inside the block frees the key."""
        # Arrange
        locks = SessionLockRegistry()

        # Act
        with pytest.raises(RuntimeError):
            async with locks.hold("a"):
                raise RuntimeError("boom")

        # Assert
        assert len(locks) == 0
