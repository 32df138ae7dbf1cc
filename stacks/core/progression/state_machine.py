"""
Stack progression state machine.

A session is ``in_progress(k)`` where k is the cursor (index of the
question currently awaiting an answer) or ``completed``. Answering moves
``k -> k + 1`` while a question remains and completes the session once the
last question has been answered; the cursor is not advanced past
``total - 1``. Editing an earlier answer truncates the transcript and
moves the cursor back.

Pure functions only; persistence lives in the progression service.

Dependencies: stacks.core.question_flows, stacks.core.exceptions
System role: Transition rules for advance and edit-and-rollback
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol, Sequence, TypeVar

from stacks.core.exceptions import (
    InvalidRoleError,
    SessionAlreadyCompletedError,
    ValidationError,
)
from stacks.core.question_flows import format_question, total_questions

COMPLETED = "completed"
USER = "user"


class TranscriptEntry(Protocol):
    id: object
    role: object
    created_at: datetime


EntryT = TypeVar("EntryT", bound=TranscriptEntry)


@dataclass(frozen=True)
class AdvancePlan:
    """
    Outcome of answering the question at ``cursor``.

    Attributes:
        next_index: cursor + 1
        completes: True when no question remains at next_index
        question_number: 1-based number of the next question, None for the summary
        question_text: Templated next question, None for the summary
        new_cursor: Cursor after the transition
    """

    next_index: int
    completes: bool
    question_number: int | None
    question_text: str | None
    new_cursor: int


def _value(tag: object) -> str:
    return getattr(tag, "value", tag)


def normalize_text(text: str | None, field: str = "content") -> str:
    """
    Trim an answer and reject it if nothing is left.

    Raises:
        ValidationError: If text is None or blank
    """
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Message content is required", field=field)
    return cleaned


def ensure_in_progress(session_id: object, status: object) -> None:
    """
    Raises:
        SessionAlreadyCompletedError: If the session is completed
    """
    if _value(status) == COMPLETED:
        raise SessionAlreadyCompletedError(str(session_id))


def ensure_user_message(message_id: object, role: object) -> None:
    """
    Raises:
        InvalidRoleError: If the message was not written by the user
    """
    if _value(role) != USER:
        raise InvalidRoleError(str(message_id), str(_value(role)))


def plan_advance(stack_type: str, cursor: int, subject: str | None) -> AdvancePlan:
    """
    Decide the transition for an answer to the question at ``cursor``.

    Args:
        stack_type: Stack type tag
        cursor: Current question index
        subject: Session subject for [X] substitution

    Returns:
        AdvancePlan: Either the next question or the completion summary
    """
    total = total_questions(stack_type)
    next_index = cursor + 1

    if next_index < total:
        return AdvancePlan(
            next_index=next_index,
            completes=False,
            question_number=next_index + 1,
            question_text=format_question(stack_type, next_index, subject),
            new_cursor=next_index,
        )

    return AdvancePlan(
        next_index=next_index,
        completes=True,
        question_number=None,
        question_text=None,
        new_cursor=cursor,
    )


def rollback_cursor(remaining_assistant_count: int) -> int:
    """Cursor after a rollback: one less than the assistant turns left, never negative."""
    return max(0, remaining_assistant_count - 1)


def split_transcript(
    messages: Sequence[EntryT],
    target_id: object,
) -> tuple[list[EntryT], list[EntryT]]:
    """
    Partition a transcript around the edited message.

    Args:
        messages: Session transcript, oldest first
        target_id: Id of the message being edited

    Returns:
        (kept, removed): kept holds every message up to and including the
        target; removed holds every message created strictly after it.

    Raises:
        ValueError: If target_id is not in messages
    """
    target = next((m for m in messages if m.id == target_id), None)
    if target is None:
        raise ValueError(f"Message {target_id} is not part of the transcript")

    cutoff = _as_comparable(target.created_at)
    kept = [m for m in messages if _as_comparable(m.created_at) <= cutoff]
    removed = [m for m in messages if _as_comparable(m.created_at) > cutoff]
    return kept, removed


def _as_comparable(value: datetime) -> datetime:
    # SQLite hands back naive values for timezone-aware columns; both are UTC
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
