"""API request/response contracts."""

from stacks.models.common import CamelModel, ErrorResponse
from stacks.models.search import SearchRequest, ThemeRequest
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

__all__ = [
    "AdvanceResponse",
    "CamelModel",
    "CreateStackRequest",
    "CreateStackResponse",
    "ErrorResponse",
    "RollbackResponse",
    "SearchRequest",
    "SendMessageRequest",
    "StackMessageResponse",
    "StackSessionResponse",
    "StatsResponse",
    "ThemeRequest",
]
