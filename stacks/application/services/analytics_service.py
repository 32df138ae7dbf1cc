"""
Analytics service orchestrator.

Gathers session history, sampled reflections and insight reports, then
hands them to the pure analytics calculations.

Dependencies: stacks.core.insights, stacks.application.services
System role: Analytics use case orchestration
"""

import asyncio
import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from stacks.application.services.insights_service import InsightsService
from stacks.boundary.db.CRUD.stack_session_crud import stack_session_crud
from stacks.core.insights import analytics
from stacks.core.insights.analytics_schema import AdvancedAnalytics
from stacks.core.insights.cognitive_insights import user_reflections

logger = logging.getLogger(__name__)

REFLECTION_SAMPLE_QUERY = "reflection insight learning growth"
REFLECTION_SAMPLE_SIZE = 50


class AnalyticsService:
    """Analytics service orchestrator."""

    def __init__(self, db: AsyncSession, insights_service: InsightsService) -> None:
        """
        Initialize analytics service.

        Args:
            db: Async SQLAlchemy session
            insights_service: Source of insight reports and reflection samples
        """
        self.db = db
        self._insights = insights_service

    async def advanced_analytics(
        self,
        owner_id: str,
        now: datetime | None = None,
    ) -> AdvancedAnalytics:
        """
        Full analytics report for one owner.

        Insight reports are only requested when the owner has sessions.

        Raises:
            InsightsError: If an insight report fails
        """
        now = now or datetime.now(timezone.utc)
        sessions = list(await stack_session_crud.list_by_owner(self.db, owner_id))

        recent_insights = long_insights = None
        reflection_lengths: list[int] = []
        if sessions:
            recent_insights, long_insights, sample = await asyncio.gather(
                self._insights.cognitive_insights(owner_id, 3),
                self._insights.cognitive_insights(owner_id, 6),
                self._insights.search(owner_id, REFLECTION_SAMPLE_QUERY, REFLECTION_SAMPLE_SIZE),
            )
            reflection_lengths = [len(r["content"]) for r in user_reflections(sample)]

        logger.info(
            f"{__name__}:advanced_analytics - Computing",
            extra={"owner_id": owner_id, "sessions": len(sessions)},
        )
        return analytics.advanced_analytics(
            analytics.emotional_regulation(sessions, now),
            analytics.self_awareness(sessions, reflection_lengths, recent_insights, now),
            analytics.resilience(sessions, now),
            analytics.growth_trajectory(sessions, long_insights, now),
        )
