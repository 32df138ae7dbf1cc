"""
Search API endpoints.

Routes:
- POST /stacks/search - Semantic search over the caller's messages
- GET /stacks/similar/{message_id}?sessionId= - Similar messages in other Stacks
- POST /stacks/patterns - Reflections matching a theme

Dependencies: stacks.application.services.search_service, stacks.models
System role: Retrieval HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from stacks.api.deps.dependencies import get_current_owner_id, get_search_service
from stacks.application.services import SearchService
from stacks.boundary.vdb.vector_schemas import PatternMatch, SemanticMatch
from stacks.models.search import SearchRequest, ThemeRequest

from .stacks.stack_error_handling import handle_stack_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stacks", tags=["search"])


@router.post("/search", response_model=list[SemanticMatch])
@handle_stack_errors
async def search_messages(
    request: SearchRequest,
    owner_id: str = Depends(get_current_owner_id),
    search_service: SearchService = Depends(get_search_service),
) -> list[SemanticMatch]:
    """
    Semantic search over the caller's Stack messages.

    Raises:
        HTTPException(400): Empty query
    """
    matches = await search_service.search(owner_id, request.query, request.limit)
    logger.info("Search completed", extra={"results": len(matches)})
    return matches


@router.get("/similar/{message_id}", response_model=list[SemanticMatch])
@handle_stack_errors
async def similar_messages(
    message_id: UUID,
    session_id: UUID = Query(alias="sessionId"),
    owner_id: str = Depends(get_current_owner_id),
    search_service: SearchService = Depends(get_search_service),
) -> list[SemanticMatch]:
    """
    Messages from the caller's other Stacks that resemble this one.

    Raises:
        HTTPException(404): Message not in that Stack
    """
    return await search_service.find_similar(owner_id, session_id, message_id)


@router.post("/patterns", response_model=list[PatternMatch])
@handle_stack_errors
async def theme_patterns(
    request: ThemeRequest,
    owner_id: str = Depends(get_current_owner_id),
    search_service: SearchService = Depends(get_search_service),
) -> list[PatternMatch]:
    """Reflections matching a theme."""
    return await search_service.analyze_patterns(owner_id, request.theme)
