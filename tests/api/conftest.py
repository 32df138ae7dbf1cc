"""
Router test fixtures.

Provides: TestClient over the app factory, authenticated owner override,
ORM-shaped response objects
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from stacks.api.deps.dependencies import get_current_owner_id
from stacks.api.main import create_app
from stacks.boundary.db.models import MessageRole, StackStatus
from stacks.core.question_flows import Core4Domain, StackType

OWNER = "user_owner"


@pytest.fixture
def client():
    app = create_app()
    app.dependency_overrides[get_current_owner_id] = lambda: OWNER
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def session_row():
    now = datetime(2025, 4, 1, 8, 0, tzinfo=timezone.utc)
    return SimpleNamespace(
        id=uuid.uuid4(),
        owner_id=OWNER,
        title="Morning",
        stack_type=StackType.GRATITUDE,
        domain=Core4Domain.BEING,
        subject="my sister",
        current_question_index=3,
        status=StackStatus.IN_PROGRESS,
        created_at=now,
        updated_at=now,
        completed_at=None,
    )


@pytest.fixture
def message_factory(session_row):
    def make(role: MessageRole, content: str, question_number=None):
        return SimpleNamespace(
            id=uuid.uuid4(),
            session_id=session_row.id,
            role=role,
            content=content,
            question_number=question_number,
            created_at=datetime(2025, 4, 1, 8, 1, tzinfo=timezone.utc),
        )
    return make
