"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, stacks.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stacks.api.deps.dependencies import get_service_cache
from stacks.boundary.db import create_tables, dispose_engine
from stacks.boundary.vdb import close_vector_store
from stacks.configs import get_settings
from stacks.observability import configure_logging
from stacks.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import (
    analytics_router,
    health_router,
    insights_router,
    search_router,
    stacks_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    # Startup
    await create_tables()
    logger.info(f"{__name__}:lifespan - Database schema ready")

    yield

    # Shutdown
    get_service_cache().clear()
    close_vector_store()
    await dispose_engine()
    logger.info(f"{__name__}:lifespan - Connections closed")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()
    app = FastAPI(
        title="Stacks Reflection API",
        description="Guided reflection sessions with AI follow-up, search and insights",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    # Search routes share the /stacks prefix and must precede /stacks/{id}
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(search_router, prefix="/api/v1")
    app.include_router(stacks_router, prefix="/api/v1")
    app.include_router(insights_router, prefix="/api/v1")
    app.include_router(analytics_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "stacks.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
