"""
Test suite for CognitiveInsightsAnalyzer.

Search results are faked and the structured-output chains are mocked.

System role: Verification of reflection filtering and report assembly
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from stacks.boundary.vdb.vector_schemas import SemanticMatch
from stacks.core.exceptions import InsightsError
from stacks.core.insights import CognitiveInsightsAnalyzer
from stacks.core.insights.cognitive_insights import (
    format_reflections,
    months_before,
    user_reflections,
)
from stacks.core.insights.insights_schema import (
    BeliefPattern,
    BeliefPatternList,
    CognitiveInsightsReport,
    ThemeAnalysis,
)

NOW = datetime(2025, 5, 31, 12, 0, tzinfo=timezone.utc)


def _match(content: str, role: str = "user", days_ago: int = 1, stack_type: str = "gratitude") -> SemanticMatch:
    return SemanticMatch(
        id=content,
        score=0.8,
        metadata={
            "role": role,
            "content": content,
            "sessionId": "s1",
            "stackType": stack_type,
            "timestamp": (NOW - timedelta(days=days_ago)).isoformat(),
        },
    )


def _analyzer(matches: list[SemanticMatch]) -> CognitiveInsightsAnalyzer:
    search = AsyncMock(return_value=matches)
    analyzer = CognitiveInsightsAnalyzer(search=search, model_id="claude-test", api_key="test-key")
    for name in ("_report_chain", "_theme_chain", "_belief_chain", "_trigger_chain", "_recommendation_chain"):
        chain = MagicMock()
        chain.ainvoke = AsyncMock()
        setattr(analyzer, name, chain)
    return analyzer


class TestHelpers:
    """Test suite for reflection helpers."""

    def test_months_before_should_clamp_day(self) -> None:
        """Test month arithmetic clamps to the last valid day."""
        assert months_before(NOW, 3) == datetime(2025, 2, 28, 12, 0, tzinfo=timezone.utc)

    def test_user_reflections_should_drop_assistant_messages(self) -> None:
        """Test only user-authored matches are analyzed."""
        # Act
        reflections = user_reflections([_match("mine"), _match("coach", role="assistant")])

        # Assert
        assert [r["content"] for r in reflections] == ["mine"]

    def test_format_reflections_should_number_and_label(self) -> None:
        """Test the prompt block layout."""
        # Act
        text = format_reflections(user_reflections([_match("one"), _match("two", stack_type="angry")]))

        # Assert
        assert text == "[1] (gratitude Stack): one\n\n[2] (angry Stack): two"


class TestGenerateCognitiveInsights:
    """Test suite for generate_cognitive_insights()."""

    @pytest.mark.asyncio
    async def test_no_matches_should_return_empty_report(self) -> None:
        """Test users without indexed messages get a starter report."""
        # Arrange
        analyzer = _analyzer([])

        # Act
        report = await analyzer.generate_cognitive_insights("u1", now=NOW)

        # Assert
        assert report.themes == []
        assert "No Stack sessions found yet" in report.overall_growth_narrative
        analyzer._report_chain.ainvoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_old_reflections_should_be_outside_timeframe(self) -> None:
        """Test reflections older than the window are excluded."""
        # Arrange
        analyzer = _analyzer([_match("ancient", days_ago=200)])

        # Act
        report = await analyzer.generate_cognitive_insights("u1", timeframe_months=3, now=NOW)

        # Assert
        assert "past 3 months" in report.overall_growth_narrative
        analyzer._report_chain.ainvoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_report_themes_should_be_enriched_with_key_messages(self) -> None:
        """Test every theme gets its supporting reflections."""
        # Arrange
        analyzer = _analyzer([_match("I am grateful for family")])
        analyzer._report_chain.ainvoke.return_value = CognitiveInsightsReport(
            themes=[
                ThemeAnalysis(
                    theme="Family",
                    frequency=1,
                    stack_types=["gratitude"],
                    emotional_tone="positive",
                    interpretation="Family matters.",
                )
            ],
            overall_growth_narrative="Growing.",
        )

        # Act
        report = await analyzer.generate_cognitive_insights("u1", now=NOW)

        # Assert
        assert report.themes[0].theme == "Family"
        assert report.themes[0].key_messages[0].content == "I am grateful for family"
        assert report.overall_growth_narrative == "Growing."

    @pytest.mark.asyncio
    async def test_model_failure_should_raise_insights_error(self) -> None:
        """Test chain errors are wrapped."""
        # Arrange
        analyzer = _analyzer([_match("text")])
        analyzer._report_chain.ainvoke.side_effect = RuntimeError("overloaded")

        # Act & Assert
        with pytest.raises(InsightsError):
            await analyzer.generate_cognitive_insights("u1", now=NOW)


class TestPatternsAndRecommendations:
    """Test suite for beliefs, themes and recommendations."""

    @pytest.mark.asyncio
    async def test_belief_patterns_should_unwrap_list(self) -> None:
        """Test the structured wrapper is unwrapped."""
        # Arrange
        analyzer = _analyzer([_match("I never finish things")])
        pattern = BeliefPattern(pattern="I never finish", type="limiting", occurrences=2, evolution="steady")
        analyzer._belief_chain.ainvoke.return_value = BeliefPatternList(patterns=[pattern])

        # Act
        patterns = await analyzer.identify_belief_patterns("u1")

        # Assert
        assert patterns == [pattern]

    @pytest.mark.asyncio
    async def test_theme_without_user_messages_should_not_call_model(self) -> None:
        """Test themes with only assistant matches short-circuit."""
        # Arrange
        analyzer = _analyzer([_match("coach", role="assistant")])

        # Act
        insight = await analyzer.analyze_specific_theme("u1", "work")

        # Assert
        assert insight.frequency == 0
        assert insight.interpretation == "No user messages found related to this theme."
        analyzer._theme_chain.ainvoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_triggers_without_reflections_should_be_empty(self) -> None:
        """Test no reflections means no triggers."""
        assert await _analyzer([]).identify_emotional_triggers("u1") == []
