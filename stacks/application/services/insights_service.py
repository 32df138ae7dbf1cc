"""
Insights service orchestrator.

Binds the cognitive insights analyzer to one owner's vector-indexed
reflections and session statistics.

Dependencies: stacks.core.insights, stacks.application.services
System role: Insight use case orchestration
"""

import logging
from collections import Counter

from sqlalchemy.ext.asyncio import AsyncSession

from stacks.application.services.search_service import search_reflections
from stacks.application.services.stack_service import StackService
from stacks.boundary.vdb.mongo_vector_store import MongoVectorStore
from stacks.core.exceptions import ValidationError
from stacks.core.insights.cognitive_insights import CognitiveInsightsAnalyzer, starter_recommendations
from stacks.core.insights.insights_schema import (
    BeliefPattern,
    CognitiveInsights,
    EmotionalTrigger,
    PersonalizedRecommendations,
    ThemeInsight,
)

logger = logging.getLogger(__name__)

MIN_TIMEFRAME_MONTHS = 1
MAX_TIMEFRAME_MONTHS = 24


class InsightsService:
    """Insights service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        vector_store: MongoVectorStore | None,
        analyzer: CognitiveInsightsAnalyzer | None = None,
    ) -> None:
        """
        Initialize insights service.

        Args:
            db: Async SQLAlchemy session
            vector_store: Message vector store, None when unavailable
            analyzer: Insight analyzer (built over vector_store if None)
        """
        self.db = db
        self._vector_store = vector_store
        self._analyzer = analyzer or CognitiveInsightsAnalyzer(search=self.search)

    async def search(self, owner_id: str, query: str, top_k: int):
        """Semantic search callable handed to the analyzer."""
        return await search_reflections(self._vector_store, owner_id, query, top_k)

    async def cognitive_insights(self, owner_id: str, timeframe_months: int = 3) -> CognitiveInsights:
        """
        Raises:
            ValidationError: If timeframe is out of range
            InsightsError: If the model call fails
        """
        if not MIN_TIMEFRAME_MONTHS <= timeframe_months <= MAX_TIMEFRAME_MONTHS:
            raise ValidationError(
                f"timeframe must be between {MIN_TIMEFRAME_MONTHS} and {MAX_TIMEFRAME_MONTHS} months",
                field="timeframe",
            )
        return await self._analyzer.generate_cognitive_insights(owner_id, timeframe_months)

    async def analyze_theme(self, owner_id: str, theme: str) -> ThemeInsight:
        """
        Raises:
            ValidationError: If theme is empty
            InsightsError: If the model call fails
        """
        theme = (theme or "").strip()
        if not theme:
            raise ValidationError("Theme is required", field="theme")
        return await self._analyzer.analyze_specific_theme(owner_id, theme)

    async def belief_patterns(self, owner_id: str) -> list[BeliefPattern]:
        return await self._analyzer.identify_belief_patterns(owner_id)

    async def emotional_triggers(self, owner_id: str) -> list[EmotionalTrigger]:
        return await self._analyzer.identify_emotional_triggers(owner_id)

    async def recommendations(self, owner_id: str) -> PersonalizedRecommendations:
        """
        Personalized next steps from stack history and recent insights.

        Raises:
            InsightsError: If the model call fails
        """
        stack_service = StackService(self.db)
        stats = await stack_service.get_stats(owner_id)
        if stats["totalStacks"] == 0:
            return starter_recommendations()

        sessions = await stack_service.list_sessions(owner_id)
        type_counts = Counter(s.stack_type.value for s in sessions)

        insights = await self._analyzer.generate_cognitive_insights(owner_id, 3)
        return await self._analyzer.generate_personalized_recommendations(
            stats=stats,
            type_counts=dict(type_counts),
            insights=insights,
        )
