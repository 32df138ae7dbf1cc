"""
Application services.

Use case orchestrators that combine the core rules with the database,
vector store and language model boundaries.
"""

from stacks.application.services.analytics_service import AnalyticsService
from stacks.application.services.insights_service import InsightsService
from stacks.application.services.progression_service import (
    AdvanceResult,
    ProgressionService,
    RollbackResult,
)
from stacks.application.services.search_service import SearchService
from stacks.application.services.stack_service import StackService, TranscriptExport

__all__ = [
    "AdvanceResult",
    "AnalyticsService",
    "InsightsService",
    "ProgressionService",
    "RollbackResult",
    "SearchService",
    "StackService",
    "TranscriptExport",
]
