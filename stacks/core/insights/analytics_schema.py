"""
Advanced analytics schemas.

Score breakdowns returned by the analytics endpoint. Scores are integers
in 0-100 unless noted otherwise.

Dependencies: pydantic
System role: Analytics report schema definitions
"""

from typing import Literal

from pydantic import Field

from stacks.models.common import CamelModel


class EmotionalBalance(CamelModel):
    positive: int = 0
    negative: int = 0
    neutral: int = 0


class EmotionalRegulationMetrics(CamelModel):
    current_score: int
    trend: Literal["improving", "stable", "declining"]
    average_response_time: int = Field(description="Days from an angry Stack to the next Stack")
    emotional_balance: EmotionalBalance
    regulation_strategies: list[str]


class SelfAwarenessBreakdown(CamelModel):
    cognitive_clarity: int = 0
    emotional_intelligence: int = 0
    behavioral_awareness: int = 0


class SelfAwarenessScore(CamelModel):
    overall_score: int
    reflection_depth: int
    pattern_recognition: int
    insight_quality: int
    consistency_score: int
    breakdown: SelfAwarenessBreakdown


class ResilienceMetrics(CamelModel):
    resilience_score: int
    completion_rate: int = Field(description="Percentage of started Stacks completed")
    consistency_streak: int = Field(description="Current run of Stacks at most 7 days apart")
    longest_streak: int
    recovery_time: int = Field(description="Average days from an angry Stack to the next Stack")
    challenge_processing_rate: int = Field(description="Percentage of angry Stacks completed")
    adaptability_score: int = Field(description="Share of the four stack types used")


class Milestone(CamelModel):
    date: str
    achievement: str
    impact: Literal["major", "moderate", "minor"]


class WeeklyProgress(CamelModel):
    week: str = Field(description="Start date of the week (YYYY-MM-DD)")
    score: int
    stacks_completed: int


class GrowthTrajectory(CamelModel):
    overall_growth: int
    trajectory_direction: Literal["accelerating", "steady", "plateauing", "declining"]
    milestones: list[Milestone]
    strength_areas: list[str]
    growth_areas: list[str]
    predicted_next_breakthrough: str
    weekly_progress: list[WeeklyProgress]


class AnalyticsSummary(CamelModel):
    overall_wellbeing_score: int
    key_insight: str
    recommended_focus: str


class AdvancedAnalytics(CamelModel):
    emotional_regulation: EmotionalRegulationMetrics
    self_awareness: SelfAwarenessScore
    resilience: ResilienceMetrics
    growth_trajectory: GrowthTrajectory
    summary: AnalyticsSummary
