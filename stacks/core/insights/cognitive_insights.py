"""
Cognitive insights analyzer.

Pulls a user's reflections out of the vector index by semantic search and
asks the language model for structured reports: recurring themes, belief
patterns, emotional triggers and personalized next steps. Only
user-authored messages are analyzed.

Dependencies: langchain_anthropic, langchain_core, stacks.configs
System role: Insight report generation
"""

import asyncio
import calendar
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, Sequence, TypeVar

from langchain_anthropic import ChatAnthropic
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel

from stacks.boundary.vdb.vector_schemas import SemanticMatch
from stacks.configs import get_settings
from stacks.core.exceptions import InsightsError
from stacks.core.insights.insights_prompt import (
    BELIEF_PATTERNS_PROMPT,
    COGNITIVE_INSIGHTS_PROMPT,
    EMOTIONAL_TRIGGERS_PROMPT,
    RECOMMENDATIONS_PROMPT,
    THEME_ANALYSIS_PROMPT,
)
from stacks.core.insights.insights_schema import (
    BeliefPattern,
    BeliefPatternList,
    CognitiveInsights,
    CognitiveInsightsReport,
    EmotionalTrigger,
    EmotionalTriggerList,
    GrowthMetrics,
    KeyMessage,
    NextStackRecommendation,
    PersonalizedRecommendations,
    PriorityAction,
    ThemeAnalysis,
    ThemeInsight,
)
from stacks.observability.langfuse_tracer import get_langfuse_callbacks

logger = logging.getLogger(__name__)

SearchFn = Callable[[str, str, int], Awaitable[list[SemanticMatch]]]
SchemaT = TypeVar("SchemaT", bound=BaseModel)

BROAD_QUERY = "personal growth insights beliefs emotions patterns challenges goals"
BELIEF_QUERY = "beliefs thoughts assumptions stories I tell myself limiting beliefs empowering beliefs"
EMOTION_QUERY = "feelings emotions triggered angry frustrated grateful happy sad anxious"

BROAD_SEARCH_LIMIT = 100
MAX_REFLECTIONS = 30
THEME_SEARCH_LIMIT = 15
THEME_KEY_MESSAGES = 5
PATTERN_SEARCH_LIMIT = 30


def months_before(now: datetime, months: int) -> datetime:
    """Same wall-clock time ``months`` calendar months earlier, day clamped to month end."""
    month_index = now.month - 1 - months
    year = now.year + month_index // 12
    month = month_index % 12 + 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a stored ISO timestamp to aware UTC; None if missing or malformed."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def user_reflections(matches: Sequence[SemanticMatch]) -> list[dict[str, Any]]:
    """Keep user-authored matches and flatten them."""
    return [
        {
            "content": str(match.metadata.get("content") or ""),
            "session_id": str(match.metadata.get("sessionId") or ""),
            "stack_type": match.metadata.get("stackType"),
            "timestamp": str(match.metadata.get("timestamp") or ""),
            "similarity": match.score or 0,
        }
        for match in matches
        if match.metadata.get("role") == "user"
    ]


def _short_date(timestamp: str) -> str:
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return "unknown date"
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def format_reflections(
    reflections: Sequence[dict[str, Any]],
    with_type: bool = True,
    with_date: bool = False,
) -> str:
    """Number reflections as ``[n] (type Stack, date): content`` blocks."""
    blocks = []
    for idx, reflection in enumerate(reflections, start=1):
        labels = []
        if with_type:
            labels.append(f"{reflection['stack_type']} Stack")
        if with_date:
            labels.append(_short_date(reflection["timestamp"]))
        prefix = f"[{idx}] ({', '.join(labels)})" if labels else f"[{idx}]"
        blocks.append(f"{prefix}: {reflection['content']}")
    return "\n\n".join(blocks)


def _key_messages(reflections: Sequence[dict[str, Any]]) -> list[KeyMessage]:
    return [
        KeyMessage(
            content=r["content"],
            session_id=r["session_id"],
            similarity=r["similarity"],
            timestamp=r["timestamp"],
        )
        for r in reflections
    ]


def empty_insights(message: str, recommendation: str) -> CognitiveInsights:
    """Report returned when there is nothing to analyze."""
    return CognitiveInsights(
        themes=[],
        belief_patterns=[],
        emotional_triggers=[],
        overall_growth_narrative=message,
        actionable_recommendations=[recommendation],
    )


def starter_recommendations() -> PersonalizedRecommendations:
    """Recommendations for someone with no Stacks yet."""
    return PersonalizedRecommendations(
        transformation_opportunities=[],
        priority_actions=[
            PriorityAction(
                action="Complete your first Stack session",
                rationale="Personalized guidance is drawn from patterns in your own reflections",
                timeframe="This week",
                resources=[],
            )
        ],
        growth_metrics=GrowthMetrics(
            belief_shift_potential=0,
            emotional_regulation_improvement=0,
            overall_growth_trajectory="emerging",
        ),
        next_stack_recommendation=NextStackRecommendation(
            stack_type="gratitude",
            focus="Someone or something you appreciate right now",
            reason="A Gratitude Stack is a grounded way to start building your reflection practice",
        ),
    )


class CognitiveInsightsAnalyzer:
    """
    Structured insight reports over a user's reflections.

    Args:
        search: Async callable (owner_id, query, top_k) -> semantic matches
        model_id: Anthropic model identifier (defaults to settings)
        api_key: Anthropic API key (defaults to settings)
        temperature: Sampling temperature (defaults to settings, 0.3)
    """

    def __init__(
        self,
        search: SearchFn,
        model_id: str | None = None,
        api_key: str | None = None,
        temperature: float | None = None,
    ) -> None:
        llm_settings = get_settings().llm
        self._search = search

        model_kwargs: dict[str, Any] = {
            "model": model_id or llm_settings.model,
            "temperature": llm_settings.insights_temperature if temperature is None else temperature,
        }
        if api_key or llm_settings.api_key:
            model_kwargs["api_key"] = api_key or llm_settings.api_key

        def structured(prompt: ChatPromptTemplate, schema: type[BaseModel], max_tokens: int):
            llm = ChatAnthropic(max_tokens=max_tokens, **model_kwargs)
            return prompt | llm.with_structured_output(schema)

        report_tokens = llm_settings.insights_max_tokens
        self._report_chain = structured(COGNITIVE_INSIGHTS_PROMPT, CognitiveInsightsReport, report_tokens)
        self._theme_chain = structured(THEME_ANALYSIS_PROMPT, ThemeAnalysis, 1024)
        self._belief_chain = structured(BELIEF_PATTERNS_PROMPT, BeliefPatternList, 2048)
        self._trigger_chain = structured(EMOTIONAL_TRIGGERS_PROMPT, EmotionalTriggerList, 2048)
        self._recommendation_chain = structured(
            RECOMMENDATIONS_PROMPT, PersonalizedRecommendations, report_tokens
        )

    async def _invoke(
        self,
        chain,
        inputs: dict[str, Any],
        run_name: str,
        failure: str,
    ) -> Any:
        try:
            result = await chain.ainvoke(
                inputs,
                config={"callbacks": get_langfuse_callbacks(), "run_name": run_name},
            )
        except Exception as e:
            logger.exception(
                f"{__name__}:{run_name} - FAILED",
                extra={"error_type": type(e).__name__},
            )
            raise InsightsError(failure) from e

        if result is None:
            logger.error(f"{__name__}:{run_name} - No structured output in AI response")
            raise InsightsError(failure)
        return result

    async def generate_cognitive_insights(
        self,
        owner_id: str,
        timeframe_months: int = 3,
        now: datetime | None = None,
    ) -> CognitiveInsights:
        """
        Full insights report over the last ``timeframe_months`` months.

        Args:
            owner_id: User whose reflections are analyzed
            timeframe_months: Window size in calendar months
            now: Reference time (defaults to current UTC time)

        Returns:
            CognitiveInsights: Report with themes enriched by key messages

        Raises:
            InsightsError: If the model call fails
        """
        now = now or datetime.now(timezone.utc)
        logger.info(
            f"{__name__}:generate_cognitive_insights - START timeframe_months={timeframe_months}"
        )

        matches = await self._search(owner_id, BROAD_QUERY, BROAD_SEARCH_LIMIT)
        if not matches:
            return empty_insights(
                "No Stack sessions found yet. Start your first Stack to begin your growth journey!",
                "Complete your first Stack session to begin tracking patterns",
            )

        cutoff = months_before(now, timeframe_months)
        reflections = [
            r for r in user_reflections(matches)
            if (ts := parse_timestamp(r["timestamp"])) is not None and ts >= cutoff
        ]
        if not reflections:
            return empty_insights(
                f"No Stack sessions found in the past {timeframe_months} months. "
                "Complete some Stacks to see your insights!",
                "Complete more Stack sessions to begin tracking patterns",
            )

        report: CognitiveInsightsReport = await self._invoke(
            self._report_chain,
            {"reflections": format_reflections(reflections[:MAX_REFLECTIONS], with_date=True)},
            run_name="generate_cognitive_insights",
            failure="Failed to generate cognitive insights",
        )

        theme_matches = await asyncio.gather(*(
            self._search(owner_id, theme.theme, THEME_KEY_MESSAGES) for theme in report.themes
        ))
        themes = [
            ThemeInsight(**theme.model_dump(), key_messages=_key_messages(user_reflections(found)))
            for theme, found in zip(report.themes, theme_matches)
        ]

        logger.info(
            f"{__name__}:generate_cognitive_insights - DONE themes={len(themes)}, "
            f"beliefs={len(report.belief_patterns)}, triggers={len(report.emotional_triggers)}"
        )
        return CognitiveInsights(
            themes=themes,
            belief_patterns=report.belief_patterns,
            emotional_triggers=report.emotional_triggers,
            overall_growth_narrative=report.overall_growth_narrative,
            actionable_recommendations=report.actionable_recommendations,
        )

    async def analyze_specific_theme(self, owner_id: str, theme: str) -> ThemeInsight:
        """
        Analyze one theme across the user's reflections.

        Raises:
            InsightsError: If the model call fails
        """
        matches = await self._search(owner_id, theme, THEME_SEARCH_LIMIT)
        if not matches:
            return ThemeInsight(
                theme=theme,
                frequency=0,
                stack_types=[],
                emotional_tone="neutral",
                key_messages=[],
                interpretation="No messages found related to this theme.",
            )

        reflections = user_reflections(matches)
        if not reflections:
            return ThemeInsight(
                theme=theme,
                frequency=0,
                stack_types=[],
                emotional_tone="neutral",
                key_messages=[],
                interpretation="No user messages found related to this theme.",
            )

        analysis: ThemeAnalysis = await self._invoke(
            self._theme_chain,
            {
                "theme": theme,
                "frequency": len(reflections),
                "reflections": format_reflections(reflections),
            },
            run_name="analyze_specific_theme",
            failure="Failed to analyze theme",
        )
        return ThemeInsight(**analysis.model_dump(), key_messages=_key_messages(reflections))

    async def identify_belief_patterns(self, owner_id: str) -> list[BeliefPattern]:
        """
        Recurring beliefs classified as limiting, empowering or neutral.

        Raises:
            InsightsError: If the model call fails
        """
        reflections = user_reflections(await self._search(owner_id, BELIEF_QUERY, PATTERN_SEARCH_LIMIT))
        if not reflections:
            return []

        result: BeliefPatternList = await self._invoke(
            self._belief_chain,
            {"reflections": format_reflections(reflections, with_type=False, with_date=True)},
            run_name="identify_belief_patterns",
            failure="Failed to identify belief patterns",
        )
        return result.patterns

    async def identify_emotional_triggers(self, owner_id: str) -> list[EmotionalTrigger]:
        """
        Recurring emotional triggers with healthier responses.

        Raises:
            InsightsError: If the model call fails
        """
        reflections = user_reflections(await self._search(owner_id, EMOTION_QUERY, PATTERN_SEARCH_LIMIT))
        if not reflections:
            return []

        result: EmotionalTriggerList = await self._invoke(
            self._trigger_chain,
            {"reflections": format_reflections(reflections)},
            run_name="identify_emotional_triggers",
            failure="Failed to identify emotional triggers",
        )
        return result.triggers

    async def generate_personalized_recommendations(
        self,
        stats: dict[str, int],
        type_counts: dict[str, int],
        insights: CognitiveInsights,
    ) -> PersonalizedRecommendations:
        """
        Recommend next steps from stack statistics and an insights report.

        Args:
            stats: totalStacks, completedStacks, inProgressStacks
            type_counts: Number of sessions per stack type
            insights: Recent cognitive insights

        Raises:
            InsightsError: If the model call fails
        """
        if stats.get("totalStacks", 0) == 0:
            return starter_recommendations()

        return await self._invoke(
            self._recommendation_chain,
            {
                "total_stacks": stats.get("totalStacks", 0),
                "completed_stacks": stats.get("completedStacks", 0),
                "in_progress_stacks": stats.get("inProgressStacks", 0),
                "type_counts": ", ".join(f"{k}: {v}" for k, v in sorted(type_counts.items())) or "none",
                "narrative": insights.overall_growth_narrative,
                "themes": "; ".join(f"{t.theme} ({t.emotional_tone})" for t in insights.themes) or "none identified",
                "beliefs": "; ".join(f"{b.pattern} ({b.type})" for b in insights.belief_patterns) or "none identified",
                "triggers": "; ".join(f"{t.trigger} -> {t.emotion}" for t in insights.emotional_triggers) or "none identified",
            },
            run_name="generate_personalized_recommendations",
            failure="Failed to generate recommendations",
        )
