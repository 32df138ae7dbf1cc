"""
Stack message ORM model.

One turn of a session transcript. Assistant turns carry the 1-based
number of the question they ask; the closing summary carries none.

Dependencies: sqlalchemy, stacks.boundary.db.base
System role: Transcript persistence
"""

import enum
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stacks.boundary.db.base import Base, CreatedAtMixin, UUIDMixin


class MessageRole(str, enum.Enum):
    """Author of a transcript message."""

    USER = "user"
    ASSISTANT = "assistant"


class StackMessageModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Stack message ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        session_id: Owning StackSessionModel id (cascade delete)
        role: USER or ASSISTANT
        content: Message text
        question_number: 1-based question number (assistant questions only)
        created_at: Strictly increasing within a session
    """

    __tablename__ = "stack_messages"

    session_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stack_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[MessageRole] = mapped_column(
        Enum(
            MessageRole,
            native_enum=False,
            length=10,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    question_number: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        default=None,
    )

    session = relationship("StackSessionModel", back_populates="messages")
