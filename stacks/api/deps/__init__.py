"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_analytics_service,
    get_current_owner_id,
    get_insights_service,
    get_progression_service,
    get_search_service,
    get_service_cache,
    get_settings_dependency,
    get_stack_service,
)

__all__ = [
    "get_analytics_service",
    "get_current_owner_id",
    "get_insights_service",
    "get_progression_service",
    "get_search_service",
    "get_service_cache",
    "get_settings_dependency",
    "get_stack_service",
]
