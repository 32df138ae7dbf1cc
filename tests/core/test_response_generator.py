"""
Test suite for StackResponseGenerator.

The LangChain chains are replaced with async mocks.

System role: Verification of turn selection and failure mapping
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from stacks.core.ai import ConversationTurn, StackResponseGenerator
from stacks.core.exceptions import GenerationError


@pytest.fixture
def generator() -> StackResponseGenerator:
    generator = StackResponseGenerator(model_id="claude-test", api_key="test-key")
    generator._question_chain = MagicMock()
    generator._question_chain.ainvoke = AsyncMock(return_value="Thanks. Next question?")
    generator._summary_chain = MagicMock()
    generator._summary_chain.ainvoke = AsyncMock(return_value="Summary text")
    return generator


class TestGenerate:
    """Test suite for StackResponseGenerator.generate()."""

    @pytest.mark.asyncio
    async def test_mid_flow_should_ask_next_templated_question(self, generator) -> None:
        """Test the question chain receives the next question with the subject filled in."""
        # Arrange
        history = [ConversationTurn("assistant", "Why grateful?")]

        # Act
        text = await generator.generate("gratitude", 3, "She helped", history, "my sister")

        # Assert
        assert text == "Thanks. Next question?"
        inputs = generator._question_chain.ainvoke.await_args.args[0]
        assert "question 4" in inputs["guidance"]
        assert "about my sister and the situation" in inputs["guidance"]
        assert inputs["answer"] == "She helped"
        assert len(inputs["history"]) == 1
        generator._summary_chain.ainvoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_last_question_should_use_summary_chain(self, generator) -> None:
        """Test the final answer produces the closing summary."""
        # Act
        text = await generator.generate("discover", 13, "Act now", [], "work")

        # Assert
        assert text == "Summary text"
        inputs = generator._summary_chain.ainvoke.await_args.args[0]
        assert "final question of this discover Stack" in inputs["guidance"]

    @pytest.mark.asyncio
    async def test_model_failure_should_raise_generation_error(self, generator) -> None:
        """Test upstream errors are wrapped."""
        # Arrange
        generator._question_chain.ainvoke.side_effect = RuntimeError("overloaded")

        # Act & Assert
        with pytest.raises(GenerationError):
            await generator.generate("idea", 3, "x", [], "y")

    @pytest.mark.asyncio
    async def test_empty_completion_should_raise_generation_error(self, generator) -> None:
        """Test blank output is treated as a failure."""
        # Arrange
        generator._question_chain.ainvoke.return_value = "   "

        # Act & Assert
        with pytest.raises(GenerationError):
            await generator.generate("idea", 3, "x", [], "y")
