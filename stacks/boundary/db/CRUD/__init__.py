"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from stacks.boundary.db.CRUD import stack_session_crud, stack_message_crud

    session = await stack_session_crud.get_by_id(db, session_id)
    transcript = await stack_message_crud.list_for_session(db, session_id)
"""

from stacks.boundary.db.CRUD.base_crud import BaseCRUD
from stacks.boundary.db.CRUD.stack_session_crud import StackSessionCRUD, stack_session_crud
from stacks.boundary.db.CRUD.stack_message_crud import StackMessageCRUD, stack_message_crud

__all__ = [
    "BaseCRUD",
    "StackSessionCRUD",
    "stack_session_crud",
    "StackMessageCRUD",
    "stack_message_crud",
]
