"""
Stack domain models and schemas.

Request/response schemas for Stack session operations. Field names are
camelCase on the wire.

Dependencies: pydantic
System role: Stack API contracts
"""

import uuid
from datetime import datetime

from pydantic import Field

from stacks.boundary.db.models import MessageRole, StackStatus
from stacks.core.question_flows import Core4Domain, StackType
from stacks.models.common import CamelModel


class CreateStackRequest(CamelModel):
    """
    Request schema for starting a new Stack.

    Values are checked by the service so that bad input maps to 400.
    """

    title: str = Field(default="", description="Stack title")
    stack_type: str = Field(default="", description="Question flow to run")
    domain: str = Field(default="", description="CORE 4 domain (case-insensitive)")
    subject: str = Field(default="", description="Who or what is being stacked")


class CreateStackResponse(CamelModel):
    """Response schema for a newly created Stack."""

    session_id: uuid.UUID


class SendMessageRequest(CamelModel):
    """Answer text or replacement text for an edited answer."""

    content: str = Field(description="Message text")


class StackSessionResponse(CamelModel):
    """Response schema for a Stack session."""

    id: uuid.UUID
    owner_id: str
    title: str
    stack_type: StackType
    domain: Core4Domain
    subject: str
    current_question_index: int
    status: StackStatus
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None


class StackMessageResponse(CamelModel):
    """Response schema for one transcript message."""

    id: uuid.UUID
    session_id: uuid.UUID
    role: MessageRole
    content: str
    question_number: int | None = None
    created_at: datetime


class AdvanceResponse(CamelModel):
    """The answer just recorded, the assistant reply and the updated session."""

    session: StackSessionResponse
    user_message: StackMessageResponse
    assistant_message: StackMessageResponse


class RollbackResponse(CamelModel):
    """State of a session after an edit."""

    session: StackSessionResponse
    edited_message: StackMessageResponse
    removed_message_ids: list[uuid.UUID]


class StatsResponse(CamelModel):
    """Per-owner Stack counts."""

    total_stacks: int
    completed_stacks: int
    in_progress_stacks: int
