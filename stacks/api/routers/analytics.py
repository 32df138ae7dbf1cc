"""
Analytics API endpoints.

Routes: GET /analytics/advanced

Dependencies: stacks.application.services.analytics_service
System role: Growth analytics HTTP API
"""

from fastapi import APIRouter, Depends

from stacks.api.deps.dependencies import get_analytics_service, get_current_owner_id
from stacks.application.services import AnalyticsService
from stacks.core.insights.analytics_schema import AdvancedAnalytics

from .stacks.stack_error_handling import handle_stack_errors

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/advanced", response_model=AdvancedAnalytics)
@handle_stack_errors
async def advanced_analytics(
    owner_id: str = Depends(get_current_owner_id),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> AdvancedAnalytics:
    """Emotional regulation, self-awareness, resilience and growth trajectory."""
    return await analytics_service.advanced_analytics(owner_id)
