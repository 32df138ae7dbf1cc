"""API routers."""

from .analytics import router as analytics_router
from .health import router as health_router
from .insights import router as insights_router
from .search import router as search_router
from .stacks import router as stacks_router

__all__ = [
    "analytics_router",
    "health_router",
    "insights_router",
    "search_router",
    "stacks_router",
]
