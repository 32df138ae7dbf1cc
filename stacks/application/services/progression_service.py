"""
Progression service.

Runs the two transcript-mutating operations of a Stack session:
answering the current question (advance) and editing an earlier answer
(edit and rollback). Each runs under the session's in-process lock, inside
one database transaction with the session row locked, so concurrent
requests on the same session are serialized and a failure leaves no
partial writes.

Dependencies: stacks.boundary.db.CRUD, stacks.core.progression, stacks.core.ai
System role: Progression engine orchestration
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from stacks.application.services.stack_service import load_owned_session
from stacks.boundary.db.base import utcnow
from stacks.boundary.db.CRUD.stack_message_crud import stack_message_crud
from stacks.boundary.db.CRUD.stack_session_crud import stack_session_crud
from stacks.boundary.db.models import MessageRole, StackMessageModel, StackSessionModel, StackStatus
from stacks.core.ai.response_generator import ConversationTurn
from stacks.core.exceptions import MessageNotFoundError
from stacks.core.progression import (
    SessionLockRegistry,
    ensure_in_progress,
    ensure_user_message,
    normalize_text,
    plan_advance,
    rollback_cursor,
    session_locks,
    split_transcript,
)

logger = logging.getLogger(__name__)


class ResponseGenerator(Protocol):
    async def generate(
        self,
        stack_type: str,
        cursor: int,
        answer: str,
        history: Sequence[ConversationTurn],
        subject: str | None,
    ) -> str: ...


@dataclass
class AdvanceResult:
    """Rows written by one answer."""

    session: StackSessionModel
    user_message: StackMessageModel
    assistant_message: StackMessageModel


@dataclass
class RollbackResult:
    """State after an edit: the edited message and the ids that were removed."""

    session: StackSessionModel
    edited_message: StackMessageModel
    removed_message_ids: list[UUID] = field(default_factory=list)


class ProgressionService:
    """Progression engine over the relational session store."""

    def __init__(
        self,
        db: AsyncSession,
        generator: ResponseGenerator,
        locks: SessionLockRegistry = session_locks,
    ) -> None:
        """
        Initialize progression service.

        Args:
            db: Async SQLAlchemy session
            generator: Produces assistant turns
            locks: Per-session lock registry
        """
        self.db = db
        self._generator = generator
        self._locks = locks

    async def advance(self, session_id: UUID, owner_id: str, content: str) -> AdvanceResult:
        """
        Record an answer to the current question and produce the next turn.

        If the transcript already ends with a user message (left there by an
        edit), that message is rewritten with the new answer instead of
        appending a second one.

        Args:
            session_id: Session UUID
            owner_id: Requesting user id
            content: Answer text

        Returns:
            AdvanceResult: Updated session, the user message and the assistant reply

        Raises:
            ValidationError: If content is empty
            SessionNotFoundError / AccessDeniedError: On lookup failure
            SessionAlreadyCompletedError: If the session is completed
            GenerationError: If the model fails; nothing is persisted
        """
        answer = normalize_text(content)

        async with self._locks.hold(session_id):
            try:
                session = await load_owned_session(self.db, session_id, owner_id, for_update=True)
                ensure_in_progress(session.id, session.status)

                transcript = list(await stack_message_crud.list_for_session(self.db, session.id))
                cursor = session.current_question_index

                if transcript and transcript[-1].role == MessageRole.USER:
                    history = transcript[:-1]
                    user_message = await stack_message_crud.update_by_id(
                        self.db, transcript[-1].id, content=answer
                    )
                else:
                    history = transcript
                    user_message = await stack_message_crud.append(
                        self.db, session.id, MessageRole.USER, answer
                    )

                plan = plan_advance(session.stack_type, cursor, session.subject)
                reply = await self._generator.generate(
                    stack_type=session.stack_type.value,
                    cursor=cursor,
                    answer=answer,
                    history=[ConversationTurn(m.role.value, m.content) for m in history],
                    subject=session.subject,
                )

                assistant_message = await stack_message_crud.append(
                    self.db,
                    session.id,
                    MessageRole.ASSISTANT,
                    reply,
                    question_number=plan.question_number,
                )

                if plan.completes:
                    session = await stack_session_crud.update_by_id(
                        self.db,
                        session.id,
                        status=StackStatus.COMPLETED,
                        completed_at=utcnow(),
                    )
                else:
                    session = await stack_session_crud.update_by_id(
                        self.db,
                        session.id,
                        current_question_index=plan.new_cursor,
                    )

                await self.db.commit()
            except Exception:
                await self.db.rollback()
                raise

        logger.info(
            f"{__name__}:advance - Advanced",
            extra={
                "session_id": str(session_id),
                "cursor": session.current_question_index,
                "completed": plan.completes,
            },
        )
        return AdvanceResult(
            session=session,
            user_message=user_message,
            assistant_message=assistant_message,
        )

    async def edit_and_rollback(
        self,
        session_id: UUID,
        owner_id: str,
        message_id: UUID,
        new_content: str,
    ) -> RollbackResult:
        """
        Replace an earlier answer and discard everything after it.

        The cursor moves to one less than the number of assistant messages
        left; a completed session is reopened.

        Args:
            session_id: Session UUID
            owner_id: Requesting user id
            message_id: User message to edit
            new_content: Replacement text

        Returns:
            RollbackResult: Updated session, edited message, removed message ids

        Raises:
            ValidationError: If new_content is empty
            SessionNotFoundError / AccessDeniedError: On lookup failure
            MessageNotFoundError: If the message is absent or in another session
            InvalidRoleError: If the message is an assistant message
        """
        text = normalize_text(new_content)

        async with self._locks.hold(session_id):
            try:
                session = await load_owned_session(self.db, session_id, owner_id, for_update=True)

                message = await stack_message_crud.get_in_session(self.db, session.id, message_id)
                if message is None:
                    raise MessageNotFoundError(str(message_id), str(session_id))
                ensure_user_message(message.id, message.role)

                transcript = await stack_message_crud.list_for_session(self.db, session.id)
                kept, removed = split_transcript(transcript, message.id)
                removed_ids = [m.id for m in removed]

                edited = await stack_message_crud.update_by_id(self.db, message.id, content=text)
                await stack_message_crud.delete_many(self.db, removed_ids)

                assistant_count = sum(1 for m in kept if m.role == MessageRole.ASSISTANT)
                values = {"current_question_index": rollback_cursor(assistant_count)}
                if session.status == StackStatus.COMPLETED:
                    values.update(status=StackStatus.IN_PROGRESS, completed_at=None)
                session = await stack_session_crud.update_by_id(self.db, session.id, **values)

                await self.db.commit()
            except Exception:
                await self.db.rollback()
                raise

        logger.info(
            f"{__name__}:edit_and_rollback - Rolled back",
            extra={
                "session_id": str(session_id),
                "removed": len(removed_ids),
                "cursor": session.current_question_index,
            },
        )
        return RollbackResult(session=session, edited_message=edited, removed_message_ids=removed_ids)
