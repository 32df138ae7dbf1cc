"""
Stack response mapping utilities.

Transforms ORM models and service results into Pydantic response models.

Dependencies: stacks.models.stack, stacks.application.services
System role: Stack response transformation
"""

from typing import Sequence

from stacks.application.services import AdvanceResult, RollbackResult
from stacks.boundary.db.models import StackMessageModel, StackSessionModel
from stacks.models.stack import (
    AdvanceResponse,
    RollbackResponse,
    StackMessageResponse,
    StackSessionResponse,
)


def map_session_to_response(session: StackSessionModel) -> StackSessionResponse:
    return StackSessionResponse.model_validate(session)


def map_sessions_to_response(sessions: Sequence[StackSessionModel]) -> list[StackSessionResponse]:
    return [map_session_to_response(s) for s in sessions]


def map_messages_to_response(messages: Sequence[StackMessageModel]) -> list[StackMessageResponse]:
    return [StackMessageResponse.model_validate(m) for m in messages]


def map_advance_to_response(result: AdvanceResult) -> AdvanceResponse:
    return AdvanceResponse(
        session=map_session_to_response(result.session),
        user_message=StackMessageResponse.model_validate(result.user_message),
        assistant_message=StackMessageResponse.model_validate(result.assistant_message),
    )


def map_rollback_to_response(result: RollbackResult) -> RollbackResponse:
    return RollbackResponse(
        session=map_session_to_response(result.session),
        edited_message=StackMessageResponse.model_validate(result.edited_message),
        removed_message_ids=result.removed_message_ids,
    )
