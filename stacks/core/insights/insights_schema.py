"""
Cognitive insight schemas.

Structured output schemas for the insight reports the language model
produces, plus the enriched shapes returned to clients. Fields dump as
camelCase.

Dependencies: pydantic
System role: Insight report schema definitions
"""

from typing import Literal

from pydantic import Field

from stacks.models.common import CamelModel


class KeyMessage(CamelModel):
    """A user reflection that supports a theme."""

    content: str
    session_id: str
    similarity: float
    timestamp: str


class ThemeAnalysis(CamelModel):
    """Recurring theme as identified by the model."""

    theme: str = Field(description="Brief theme title")
    frequency: int = Field(description="Number of reflections mentioning the theme")
    stack_types: list[str] = Field(
        default_factory=list,
        description="Stack types the theme appears in (gratitude, idea, discover, angry)",
    )
    emotional_tone: str = Field(description="positive, negative, mixed or neutral")
    interpretation: str = Field(description="2-3 sentence interpretation of what this theme reveals")


class ThemeInsight(ThemeAnalysis):
    """Theme enriched with the reflections that support it."""

    key_messages: list[KeyMessage] = Field(default_factory=list)


class BeliefPattern(CamelModel):
    """A belief the person holds, classified by its effect."""

    pattern: str = Field(description="The specific belief pattern observed")
    type: Literal["limiting", "empowering", "neutral"]
    occurrences: int = Field(description="Number of times observed")
    evolution: str = Field(description="How this belief has evolved over time")
    recommendations: list[str] = Field(
        default_factory=list,
        description="Specific cognitive restructuring actions",
    )


class EmotionalTrigger(CamelModel):
    """Something that reliably provokes an emotion."""

    trigger: str = Field(description="What triggers this emotion")
    emotion: str = Field(description="The emotion triggered")
    contexts: list[str] = Field(default_factory=list)
    frequency: int = Field(description="Estimated number of occurrences")
    suggested_response: str = Field(description="A healthier way to respond to this trigger")


class CognitiveInsightsReport(CamelModel):
    """Structured output for the full insights report."""

    themes: list[ThemeAnalysis] = Field(default_factory=list)
    belief_patterns: list[BeliefPattern] = Field(default_factory=list)
    emotional_triggers: list[EmotionalTrigger] = Field(default_factory=list)
    overall_growth_narrative: str = Field(
        description="2-3 paragraph narrative of the growth journey and transformation arc",
    )
    actionable_recommendations: list[str] = Field(default_factory=list)


class CognitiveInsights(CognitiveInsightsReport):
    """Insights report with themes enriched by supporting reflections."""

    themes: list[ThemeInsight] = Field(default_factory=list)


class BeliefPatternList(CamelModel):
    """Structured output wrapper for belief pattern identification."""

    patterns: list[BeliefPattern] = Field(default_factory=list)


class EmotionalTriggerList(CamelModel):
    """Structured output wrapper for trigger identification."""

    triggers: list[EmotionalTrigger] = Field(default_factory=list)


class TransformationOpportunity(CamelModel):
    area: str
    current_pattern: str
    desired_pattern: str
    specific_actions: list[str] = Field(default_factory=list)
    difficulty: Literal["easy", "moderate", "challenging"]
    expected_impact: Literal["low", "medium", "high"]
    related_themes: list[str] = Field(default_factory=list)


class PriorityAction(CamelModel):
    action: str
    rationale: str
    timeframe: str
    resources: list[str] = Field(default_factory=list)


class GrowthMetrics(CamelModel):
    belief_shift_potential: int = Field(ge=0, le=100, description="0-100")
    emotional_regulation_improvement: int = Field(ge=0, le=100, description="0-100")
    overall_growth_trajectory: str = Field(description="accelerating, steady or emerging, with a short note")


class NextStackRecommendation(CamelModel):
    stack_type: Literal["gratitude", "idea", "discover", "angry"]
    focus: str
    reason: str


class PersonalizedRecommendations(CamelModel):
    """Next steps derived from stack history and the insights report."""

    transformation_opportunities: list[TransformationOpportunity] = Field(default_factory=list)
    priority_actions: list[PriorityAction] = Field(default_factory=list)
    growth_metrics: GrowthMetrics
    next_stack_recommendation: NextStackRecommendation
