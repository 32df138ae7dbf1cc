"""
Test suite for growth analytics calculations.

System role: Verification of pure analytics formulas
"""

from datetime import datetime, timedelta

from stacks.core.insights import analytics
from stacks.core.insights.insights_schema import BeliefPattern, CognitiveInsights


def _insights(empowering: int = 0, limiting: int = 0) -> CognitiveInsights:
    patterns = [
        BeliefPattern(pattern=f"e{i}", type="empowering", occurrences=1, evolution="new")
        for i in range(empowering)
    ] + [
        BeliefPattern(pattern=f"l{i}", type="limiting", occurrences=1, evolution="new")
        for i in range(limiting)
    ]
    return CognitiveInsights(belief_patterns=patterns, overall_growth_narrative="")


class TestRoundHalfUp:
    """Test suite for round_half_up()."""

    def test_should_round_halves_up(self) -> None:
        """Test .5 always rounds towards positive infinity."""
        assert analytics.round_half_up(2.5) == 3
        assert analytics.round_half_up(3.5) == 4
        assert analytics.round_half_up(2.49) == 2


class TestEmotionalRegulation:
    """Test suite for emotional_regulation()."""

    def test_no_recent_sessions_should_return_defaults(self, fixed_now: datetime) -> None:
        """Test empty history yields a neutral score."""
        # Act
        metrics = analytics.emotional_regulation([], fixed_now)

        # Assert
        assert metrics.current_score == 50
        assert metrics.trend == "stable"
        assert metrics.emotional_balance.positive == 0

    def test_balance_should_split_by_stack_type(self, fixed_now: datetime, snapshot_factory) -> None:
        """Test gratitude/idea count as positive, angry negative, discover neutral."""
        # Arrange
        sessions = [
            snapshot_factory("gratitude", fixed_now - timedelta(days=10)),
            snapshot_factory("angry", fixed_now - timedelta(days=8)),
            snapshot_factory("idea", fixed_now - timedelta(days=6)),
            snapshot_factory("discover", fixed_now - timedelta(days=4)),
        ]

        # Act
        metrics = analytics.emotional_regulation(sessions, fixed_now)

        # Assert
        assert metrics.emotional_balance.positive == 50
        assert metrics.emotional_balance.negative == 25
        assert metrics.emotional_balance.neutral == 25
        assert metrics.average_response_time == 2

    def test_sessions_older_than_ninety_days_should_be_ignored(
        self, fixed_now: datetime, snapshot_factory
    ) -> None:
        """Test the 90-day window."""
        # Arrange
        sessions = [snapshot_factory("angry", fixed_now - timedelta(days=120))]

        # Act
        metrics = analytics.emotional_regulation(sessions, fixed_now)

        # Assert
        assert metrics.current_score == 50


class TestResilience:
    """Test suite for resilience()."""

    def test_streaks_should_break_on_gaps_over_a_week(
        self, fixed_now: datetime, snapshot_factory
    ) -> None:
        """Test longest and current streaks."""
        # Arrange
        sessions = [
            snapshot_factory("gratitude", fixed_now - timedelta(days=40)),
            snapshot_factory("gratitude", fixed_now - timedelta(days=35)),
            snapshot_factory("idea", fixed_now - timedelta(days=30)),
            snapshot_factory("angry", fixed_now - timedelta(days=3), status="in_progress"),
            snapshot_factory("discover", fixed_now - timedelta(days=1)),
        ]

        # Act
        metrics = analytics.resilience(sessions, fixed_now)

        # Assert
        assert metrics.longest_streak == 3
        assert metrics.consistency_streak == 2
        assert metrics.completion_rate == 80
        assert metrics.recovery_time == 2
        assert metrics.challenge_processing_rate == 0
        assert metrics.adaptability_score == 100

    def test_no_sessions_should_be_zero(self, fixed_now: datetime) -> None:
        """Test empty history."""
        assert analytics.resilience([], fixed_now).resilience_score == 0


class TestWeeklyProgress:
    """Test suite for weekly_progress()."""

    def test_current_week_should_count_recent_completions(
        self, fixed_now: datetime, snapshot_factory
    ) -> None:
        """Test a Stack completed yesterday lands in the newest bucket."""
        # Arrange
        sessions = [
            snapshot_factory("gratitude", fixed_now - timedelta(days=1)),
            snapshot_factory("idea", fixed_now - timedelta(days=2), status="in_progress"),
            snapshot_factory("angry", fixed_now - timedelta(days=9)),
        ]

        # Act
        weeks = analytics.weekly_progress(sessions, fixed_now)

        # Assert
        assert len(weeks) == 12
        assert weeks[-1].stacks_completed == 1
        assert weeks[-1].score == 25
        assert weeks[-2].stacks_completed == 1
        assert weeks[0].week == (fixed_now - timedelta(weeks=12)).date().isoformat()


class TestSelfAwareness:
    """Test suite for self_awareness()."""

    def test_scores_should_combine_inputs(self, fixed_now: datetime, snapshot_factory) -> None:
        """Test depth, pattern recognition, quality and consistency."""
        # Arrange
        sessions = [snapshot_factory("gratitude", fixed_now - timedelta(days=d)) for d in (1, 2)]
        insights = _insights(empowering=1, limiting=1)

        # Act
        score = analytics.self_awareness(sessions, [100, 300], insights, fixed_now)

        # Assert
        assert score.reflection_depth == 100
        assert score.pattern_recognition == 40
        assert score.insight_quality == 50
        assert score.consistency_score == 40
        assert score.overall_score == 58

    def test_no_sessions_should_be_zero(self, fixed_now: datetime) -> None:
        """Test empty history."""
        assert analytics.self_awareness([], [], None, fixed_now).overall_score == 0


class TestGrowthTrajectory:
    """Test suite for growth_trajectory() and advanced_analytics()."""

    def test_no_sessions_should_plateau(self, fixed_now: datetime) -> None:
        """Test the starter trajectory."""
        # Act
        trajectory = analytics.growth_trajectory([], None, fixed_now)

        # Assert
        assert trajectory.trajectory_direction == "plateauing"
        assert trajectory.weekly_progress == []

    def test_milestones_should_include_first_stack(self, fixed_now: datetime, snapshot_factory) -> None:
        """Test the first-Stack milestone and empowering belief milestone."""
        # Arrange
        first = fixed_now - timedelta(days=20)
        sessions = [snapshot_factory("gratitude", first + timedelta(days=i)) for i in range(3)]

        # Act
        trajectory = analytics.growth_trajectory(sessions, _insights(empowering=3), fixed_now)

        # Assert
        assert trajectory.milestones[0].date == first.date().isoformat()
        assert trajectory.milestones[-1].achievement == "Developed 3 empowering belief patterns"
        assert "Strong engagement with gratitude Stacks" in trajectory.strength_areas

    def test_advanced_analytics_should_summarize(self, fixed_now: datetime, snapshot_factory) -> None:
        """Test the combined report serializes with camelCase keys."""
        # Arrange
        sessions = [snapshot_factory("gratitude", fixed_now - timedelta(days=1))]

        # Act
        report = analytics.advanced_analytics(
            analytics.emotional_regulation(sessions, fixed_now),
            analytics.self_awareness(sessions, [], None, fixed_now),
            analytics.resilience(sessions, fixed_now),
            analytics.growth_trajectory(sessions, None, fixed_now),
        )
        data = report.model_dump(by_alias=True)

        # Assert
        assert "overallWellbeingScore" in data["summary"]
        assert data["summary"]["recommendedFocus"].startswith("Focus on ")
