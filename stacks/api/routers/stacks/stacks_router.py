"""
Stack API endpoints.

Routes:
- POST /stacks - Start a new Stack
- GET /stacks - List the caller's Stacks, newest first
- GET /stacks/recent - Five most recent Stacks
- GET /stacks/stats - Stack counts
- GET /stacks/{id} - Get one Stack
- GET /stacks/{id}/messages - Get the transcript
- POST /stacks/{id}/message - Answer the current question
- PATCH /stacks/{id}/message/{message_id} - Edit an answer and roll back
- POST /stacks/{id}/complete - Force completion
- DELETE /stacks/{id} - Delete a Stack and its transcript
- GET /stacks/{id}/export - Plain-text transcript download

Embedding maintenance is scheduled as background tasks after the
response is sent.

Dependencies: stacks.application.services, stacks.models
System role: Stack session HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from fastapi.responses import PlainTextResponse

from stacks.api.deps.dependencies import (
    get_current_owner_id,
    get_progression_service,
    get_stack_service,
)
from stacks.application.services import ProgressionService, StackService
from stacks.application.services.embedding_indexer import (
    index_message,
    message_metadata,
    remove_messages,
)
from stacks.boundary.db.models import StackMessageModel, StackSessionModel
from stacks.models.stack import (
    AdvanceResponse,
    CreateStackRequest,
    CreateStackResponse,
    RollbackResponse,
    SendMessageRequest,
    StackMessageResponse,
    StackSessionResponse,
    StatsResponse,
)

from .stack_error_handling import handle_stack_errors
from .stack_responses import (
    map_advance_to_response,
    map_messages_to_response,
    map_rollback_to_response,
    map_session_to_response,
    map_sessions_to_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stacks", tags=["stacks"])


def _schedule_index(
    background_tasks: BackgroundTasks,
    owner_id: str,
    session: StackSessionModel,
    message: StackMessageModel,
) -> None:
    background_tasks.add_task(
        index_message,
        owner_id,
        session.id,
        message.id,
        message.content,
        message_metadata(session, message),
    )


@router.post("", response_model=CreateStackResponse, status_code=201)
@handle_stack_errors
async def create_stack(
    request: CreateStackRequest,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_current_owner_id),
    stack_service: StackService = Depends(get_stack_service),
) -> CreateStackResponse:
    """
    Start a Stack and ask its first chat question.

    Raises:
        HTTPException(400): Missing title/subject, unknown type or domain
    """
    session = await stack_service.create_session(
        owner_id=owner_id,
        title=request.title,
        stack_type=request.stack_type,
        domain=request.domain,
        subject=request.subject,
    )
    opening = await stack_service.get_messages(session.id, owner_id)
    for message in opening:
        _schedule_index(background_tasks, owner_id, session, message)

    return CreateStackResponse(session_id=session.id)


@router.get("", response_model=list[StackSessionResponse])
@handle_stack_errors
async def list_stacks(
    owner_id: str = Depends(get_current_owner_id),
    stack_service: StackService = Depends(get_stack_service),
) -> list[StackSessionResponse]:
    """List all of the caller's Stacks, newest first."""
    return map_sessions_to_response(await stack_service.list_sessions(owner_id))


@router.get("/recent", response_model=list[StackSessionResponse])
@handle_stack_errors
async def recent_stacks(
    owner_id: str = Depends(get_current_owner_id),
    stack_service: StackService = Depends(get_stack_service),
) -> list[StackSessionResponse]:
    """The caller's five most recent Stacks."""
    return map_sessions_to_response(await stack_service.recent_sessions(owner_id))


@router.get("/stats", response_model=StatsResponse)
@handle_stack_errors
async def stack_stats(
    owner_id: str = Depends(get_current_owner_id),
    stack_service: StackService = Depends(get_stack_service),
) -> StatsResponse:
    """Total, completed and in-progress counts."""
    return StatsResponse.model_validate(await stack_service.get_stats(owner_id))


@router.get("/{session_id}", response_model=StackSessionResponse)
@handle_stack_errors
async def get_stack(
    session_id: UUID,
    owner_id: str = Depends(get_current_owner_id),
    stack_service: StackService = Depends(get_stack_service),
) -> StackSessionResponse:
    """
    Get one Stack.

    Raises:
        HTTPException(404): Stack not found
        HTTPException(403): Stack owned by someone else
    """
    return map_session_to_response(await stack_service.get_session(session_id, owner_id))


@router.get("/{session_id}/messages", response_model=list[StackMessageResponse])
@handle_stack_errors
async def get_stack_messages(
    session_id: UUID,
    owner_id: str = Depends(get_current_owner_id),
    stack_service: StackService = Depends(get_stack_service),
) -> list[StackMessageResponse]:
    """Get the transcript, oldest first."""
    return map_messages_to_response(await stack_service.get_messages(session_id, owner_id))


@router.post("/{session_id}/message", response_model=AdvanceResponse)
@handle_stack_errors
async def send_message(
    session_id: UUID,
    request: SendMessageRequest,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_current_owner_id),
    progression_service: ProgressionService = Depends(get_progression_service),
) -> AdvanceResponse:
    """
    Answer the current question.

    Raises:
        HTTPException(400): Empty content or Stack already completed
        HTTPException(404/403): Lookup failure
        HTTPException(500): Assistant reply could not be generated
    """
    result = await progression_service.advance(session_id, owner_id, request.content)

    _schedule_index(background_tasks, owner_id, result.session, result.user_message)
    _schedule_index(background_tasks, owner_id, result.session, result.assistant_message)

    logger.info(
        "Stack answer recorded",
        extra={
            "session_id": str(session_id),
            "cursor": result.session.current_question_index,
            "status": result.session.status.value,
        },
    )
    return map_advance_to_response(result)


@router.patch("/{session_id}/message/{message_id}", response_model=RollbackResponse)
@handle_stack_errors
async def edit_message(
    session_id: UUID,
    message_id: UUID,
    request: SendMessageRequest,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_current_owner_id),
    progression_service: ProgressionService = Depends(get_progression_service),
) -> RollbackResponse:
    """
    Edit an earlier answer and discard everything after it.

    Raises:
        HTTPException(400): Empty content or not a user message
        HTTPException(404): Message not found in this Stack
    """
    result = await progression_service.edit_and_rollback(
        session_id, owner_id, message_id, request.content
    )

    _schedule_index(background_tasks, owner_id, result.session, result.edited_message)
    background_tasks.add_task(remove_messages, result.removed_message_ids)

    return map_rollback_to_response(result)


@router.post("/{session_id}/complete", response_model=StackSessionResponse)
@handle_stack_errors
async def complete_stack(
    session_id: UUID,
    owner_id: str = Depends(get_current_owner_id),
    stack_service: StackService = Depends(get_stack_service),
) -> StackSessionResponse:
    """Mark a Stack completed regardless of its cursor."""
    return map_session_to_response(await stack_service.complete_session(session_id, owner_id))


@router.delete("/{session_id}", status_code=204)
@handle_stack_errors
async def delete_stack(
    session_id: UUID,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_current_owner_id),
    stack_service: StackService = Depends(get_stack_service),
) -> Response:
    """
    Delete a Stack, its transcript and its message embeddings.

    Returns:
        204 No Content on success
    """
    removed = await stack_service.delete_session(session_id, owner_id)
    background_tasks.add_task(remove_messages, removed)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{session_id}/export", response_class=PlainTextResponse)
@handle_stack_errors
async def export_stack(
    session_id: UUID,
    owner_id: str = Depends(get_current_owner_id),
    stack_service: StackService = Depends(get_stack_service),
) -> PlainTextResponse:
    """Download the transcript as plain text."""
    export = await stack_service.export_transcript(session_id, owner_id)
    return PlainTextResponse(
        content=export.content,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
