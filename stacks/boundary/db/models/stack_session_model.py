"""
Stack session ORM model.

Represents one reflection journey: its template, subject, progress cursor
and lifecycle status. Owns its transcript messages.

Dependencies: sqlalchemy, stacks.boundary.db.base
System role: Session persistence for the progression engine
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stacks.boundary.db.base import Base, TimestampMixin, UUIDMixin
from stacks.core.question_flows import Core4Domain, StackType


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class StackStatus(str, enum.Enum):
    """
    Stack session lifecycle states.

    IN_PROGRESS: Awaiting the answer to the question at the cursor
    COMPLETED: Summary delivered (or force-completed); re-opened by an edit
    """

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class StackSessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Stack session ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        owner_id: Opaque user id issued by the identity provider
        title: Stack title (setup question 1)
        stack_type: Reflection template tag
        domain: CORE 4 life domain (setup question 2)
        subject: Who/what is being stacked (setup question 3); fills [X]
        current_question_index: Zero-based index of the next unanswered question
        status: IN_PROGRESS or COMPLETED
        completed_at: Set when the session completes, cleared by rollback
        messages: Transcript rows ordered by creation time (cascade delete)
    """

    __tablename__ = "stack_sessions"

    owner_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        doc="Identity provider user id",
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    stack_type: Mapped[StackType] = mapped_column(
        Enum(StackType, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
    )
    domain: Mapped[Core4Domain] = mapped_column(
        Enum(Core4Domain, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
    )
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    current_question_index: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    status: Mapped[StackStatus] = mapped_column(
        Enum(StackStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=StackStatus.IN_PROGRESS,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    messages = relationship(
        "StackMessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="StackMessageModel.created_at",
    )

    @property
    def is_completed(self) -> bool:
        return self.status == StackStatus.COMPLETED
