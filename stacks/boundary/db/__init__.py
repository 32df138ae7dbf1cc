"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - StackSessionModel, StackMessageModel: Core domain entities
  - StackStatus, MessageRole: Enum types for state tracking
  - stack_session_crud, stack_message_crud: CRUD operation singletons

Dependencies: sqlalchemy, stacks.configs
System role: Database adapter providing persistent storage for Stack
sessions and their transcripts.
"""

from stacks.boundary.db.base import Base, TimestampMixin, UUIDMixin
from stacks.boundary.db.connection import (
    create_tables,
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from stacks.boundary.db.models import (
    MessageRole,
    StackMessageModel,
    StackSessionModel,
    StackStatus,
)
from stacks.boundary.db.CRUD import (
    BaseCRUD,
    StackMessageCRUD,
    StackSessionCRUD,
    stack_message_crud,
    stack_session_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "create_tables",
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "StackSessionModel",
    "StackStatus",
    "StackMessageModel",
    "MessageRole",
    # CRUD classes
    "BaseCRUD",
    "StackSessionCRUD",
    "StackMessageCRUD",
    # CRUD singletons
    "stack_session_crud",
    "stack_message_crud",
]
