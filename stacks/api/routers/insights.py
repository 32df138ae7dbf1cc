"""
Insights API endpoints.

Routes:
- GET /insights/cognitive?timeframe=3 - Cognitive insights report
- POST /insights/theme - Deep dive into one theme
- GET /insights/beliefs - Belief patterns
- GET /insights/triggers - Emotional triggers
- GET /insights/recommendations - Personalized next steps

Dependencies: stacks.application.services.insights_service
System role: Insight HTTP API
"""

from fastapi import APIRouter, Depends, Query

from stacks.api.deps.dependencies import get_current_owner_id, get_insights_service
from stacks.application.services import InsightsService
from stacks.core.insights.insights_schema import (
    BeliefPattern,
    CognitiveInsights,
    EmotionalTrigger,
    PersonalizedRecommendations,
    ThemeInsight,
)
from stacks.models.search import ThemeRequest

from .stacks.stack_error_handling import handle_stack_errors

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/cognitive", response_model=CognitiveInsights)
@handle_stack_errors
async def cognitive_insights(
    timeframe: int = Query(default=3, description="Look-back window in months"),
    owner_id: str = Depends(get_current_owner_id),
    insights_service: InsightsService = Depends(get_insights_service),
) -> CognitiveInsights:
    return await insights_service.cognitive_insights(owner_id, timeframe)


@router.post("/theme", response_model=ThemeInsight)
@handle_stack_errors
async def theme_insight(
    request: ThemeRequest,
    owner_id: str = Depends(get_current_owner_id),
    insights_service: InsightsService = Depends(get_insights_service),
) -> ThemeInsight:
    return await insights_service.analyze_theme(owner_id, request.theme)


@router.get("/beliefs", response_model=list[BeliefPattern])
@handle_stack_errors
async def belief_patterns(
    owner_id: str = Depends(get_current_owner_id),
    insights_service: InsightsService = Depends(get_insights_service),
) -> list[BeliefPattern]:
    return await insights_service.belief_patterns(owner_id)


@router.get("/triggers", response_model=list[EmotionalTrigger])
@handle_stack_errors
async def emotional_triggers(
    owner_id: str = Depends(get_current_owner_id),
    insights_service: InsightsService = Depends(get_insights_service),
) -> list[EmotionalTrigger]:
    return await insights_service.emotional_triggers(owner_id)


@router.get("/recommendations", response_model=PersonalizedRecommendations)
@handle_stack_errors
async def recommendations(
    owner_id: str = Depends(get_current_owner_id),
    insights_service: InsightsService = Depends(get_insights_service),
) -> PersonalizedRecommendations:
    return await insights_service.recommendations(owner_id)
