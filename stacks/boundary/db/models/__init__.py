"""
Database models package.

Exports:
  - StackSessionModel, StackStatus: Stack session ORM model and lifecycle enum
  - StackMessageModel, MessageRole: Transcript message ORM model and author enum

Dependencies: sqlalchemy, stacks.boundary.db.base
System role: Database model definitions for domain entities
"""

from stacks.boundary.db.models.stack_session_model import StackSessionModel, StackStatus
from stacks.boundary.db.models.stack_message_model import MessageRole, StackMessageModel

__all__ = [
    "StackSessionModel",
    "StackStatus",
    "StackMessageModel",
    "MessageRole",
]
