"""
Test suite for the Stack router.

Services are mocked through dependency overrides.

System role: Verification of routes, status codes and payload shapes
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from stacks.api.deps.dependencies import (
    get_current_owner_id,
    get_progression_service,
    get_stack_service,
)
from stacks.application.services import AdvanceResult, RollbackResult, TranscriptExport
from stacks.boundary.db.models import MessageRole
from stacks.core.exceptions import (
    AccessDeniedError,
    GenerationError,
    InvalidRoleError,
    MessageNotFoundError,
    SessionAlreadyCompletedError,
    SessionNotFoundError,
    ValidationError,
)

ROUTER = "stacks.api.routers.stacks.stacks_router"


@pytest.fixture
def stack_service(client):
    service = AsyncMock()
    client.app.dependency_overrides[get_stack_service] = lambda: service
    return service


@pytest.fixture
def progression_service(client):
    service = AsyncMock()
    client.app.dependency_overrides[get_progression_service] = lambda: service
    return service


class TestCreateAndRead:
    """Test suite for creation and read routes."""

    def test_create_should_return_session_id(self, client, stack_service, session_row, message_factory) -> None:
        """Test POST /stacks returns 201 with the new id and indexes the opening question."""
        # Arrange
        stack_service.create_session.return_value = session_row
        stack_service.get_messages.return_value = [message_factory(MessageRole.ASSISTANT, "Q", 4)]

        # Act
        with patch(f"{ROUTER}.index_message") as index_message:
            response = client.post(
                "/api/v1/stacks",
                json={"title": "Morning", "stackType": "gratitude", "domain": "Being", "subject": "my sister"},
            )

        # Assert
        assert response.status_code == 201
        assert response.json() == {"sessionId": str(session_row.id)}
        assert stack_service.create_session.await_args.kwargs["domain"] == "Being"
        index_message.assert_called_once()

    def test_create_invalid_should_return_400(self, client, stack_service) -> None:
        """Test validation errors map to 400."""
        # Arrange
        stack_service.create_session.side_effect = ValidationError("Unknown stack type", field="stackType")

        # Act
        response = client.post("/api/v1/stacks", json={"title": "t", "stackType": "joy"})

        # Assert
        assert response.status_code == 400

    def test_get_session_should_use_camel_case(self, client, stack_service, session_row) -> None:
        """Test session payload keys are camelCase."""
        # Arrange
        stack_service.get_session.return_value = session_row

        # Act
        response = client.get(f"/api/v1/stacks/{session_row.id}")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["stackType"] == "gratitude"
        assert data["currentQuestionIndex"] == 3
        assert data["status"] == "in_progress"
        assert data["completedAt"] is None

    @pytest.mark.parametrize(
        "error,status",
        [
            (SessionNotFoundError("x"), 404),
            (AccessDeniedError("x", "someone"), 403),
        ],
    )
    def test_get_messages_errors(self, client, stack_service, error, status) -> None:
        """Test lookup failures map to 404 and 403."""
        # Arrange
        stack_service.get_messages.side_effect = error

        # Act
        response = client.get(f"/api/v1/stacks/{uuid.uuid4()}/messages")

        # Assert
        assert response.status_code == status

    def test_recent_and_stats_should_not_be_taken_as_ids(self, client, stack_service, session_row) -> None:
        """Test literal sub-paths resolve before /stacks/{id}."""
        # Arrange
        stack_service.recent_sessions.return_value = [session_row]
        stack_service.get_stats.return_value = {
            "totalStacks": 1,
            "completedStacks": 0,
            "inProgressStacks": 1,
        }

        # Act
        recent = client.get("/api/v1/stacks/recent")
        stats = client.get("/api/v1/stacks/stats")

        # Assert
        assert recent.status_code == 200
        assert len(recent.json()) == 1
        assert stats.json() == {"totalStacks": 1, "completedStacks": 0, "inProgressStacks": 1}


class TestMessages:
    """Test suite for answer and edit routes."""

    def test_send_message_should_schedule_indexing(
        self, client, progression_service, session_row, message_factory
    ) -> None:
        """Test both new messages are indexed after the response."""
        # Arrange
        user = message_factory(MessageRole.USER, "She helped")
        assistant = message_factory(MessageRole.ASSISTANT, "Next?", 5)
        progression_service.advance.return_value = AdvanceResult(session_row, user, assistant)

        # Act
        with patch(f"{ROUTER}.index_message") as index_message:
            response = client.post(
                f"/api/v1/stacks/{session_row.id}/message", json={"content": "She helped"}
            )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["assistantMessage"]["questionNumber"] == 5
        assert body["userMessage"]["role"] == "user"
        assert index_message.call_count == 2

    @pytest.mark.parametrize(
        "error,status",
        [
            (SessionAlreadyCompletedError("x"), 400),
            (ValidationError("Message content is required"), 400),
            (GenerationError("Failed to generate AI response"), 500),
        ],
    )
    def test_send_message_errors(self, client, progression_service, error, status) -> None:
        """Test completed/empty map to 400 and model failures to 500."""
        # Arrange
        progression_service.advance.side_effect = error

        # Act
        response = client.post(f"/api/v1/stacks/{uuid.uuid4()}/message", json={"content": "x"})

        # Assert
        assert response.status_code == status

    def test_edit_should_remove_truncated_embeddings(
        self, client, progression_service, session_row, message_factory
    ) -> None:
        """Test the edit is re-indexed and removed messages are dropped from the index."""
        # Arrange
        edited = message_factory(MessageRole.USER, "new text")
        removed = [uuid.uuid4(), uuid.uuid4()]
        progression_service.edit_and_rollback.return_value = RollbackResult(session_row, edited, removed)

        # Act
        with patch(f"{ROUTER}.index_message") as index_message, \
                patch(f"{ROUTER}.remove_messages") as remove_messages:
            response = client.patch(
                f"/api/v1/stacks/{session_row.id}/message/{edited.id}", json={"content": "new text"}
            )

        # Assert
        assert response.status_code == 200
        assert response.json()["removedMessageIds"] == [str(r) for r in removed]
        index_message.assert_called_once()
        remove_messages.assert_called_once_with(removed)

    @pytest.mark.parametrize(
        "error,status",
        [
            (InvalidRoleError("m", "assistant"), 400),
            (MessageNotFoundError("m", "s"), 404),
        ],
    )
    def test_edit_errors(self, client, progression_service, error, status) -> None:
        """Test role and lookup failures."""
        # Arrange
        progression_service.edit_and_rollback.side_effect = error

        # Act
        response = client.patch(
            f"/api/v1/stacks/{uuid.uuid4()}/message/{uuid.uuid4()}", json={"content": "x"}
        )

        # Assert
        assert response.status_code == status


class TestLifecycle:
    """Test suite for complete, delete and export routes."""

    def test_delete_should_return_204_and_remove_embeddings(self, client, stack_service) -> None:
        """Test deletion drops the session's embeddings in the background."""
        # Arrange
        removed = [uuid.uuid4()]
        stack_service.delete_session.return_value = removed

        # Act
        with patch(f"{ROUTER}.remove_messages") as remove_messages:
            response = client.delete(f"/api/v1/stacks/{uuid.uuid4()}")

        # Assert
        assert response.status_code == 204
        remove_messages.assert_called_once_with(removed)

    def test_complete_should_return_session(self, client, stack_service, session_row) -> None:
        """Test forced completion returns the session."""
        # Arrange
        stack_service.complete_session.return_value = session_row

        # Act
        response = client.post(f"/api/v1/stacks/{session_row.id}/complete")

        # Assert
        assert response.status_code == 200
        assert response.json()["id"] == str(session_row.id)

    def test_export_should_be_plain_text_attachment(self, client, stack_service) -> None:
        """Test the transcript downloads with its filename."""
        # Arrange
        stack_service.export_transcript.return_value = TranscriptExport(
            filename="morning-transcript.txt", content="MindGrowth Stack Transcript\n"
        )

        # Act
        response = client.get(f"/api/v1/stacks/{uuid.uuid4()}/export")

        # Assert
        assert response.status_code == 200
        assert response.text == "MindGrowth Stack Transcript\n"
        assert response.headers["content-type"].startswith("text/plain")
        assert 'filename="morning-transcript.txt"' in response.headers["content-disposition"]


class TestAuthentication:
    """Test suite for the owner dependency."""

    def test_missing_token_should_return_401(self, client) -> None:
        """Test requests that fail verification are rejected."""
        # Arrange
        client.app.dependency_overrides.pop(get_current_owner_id)

        # Act
        with patch("stacks.api.deps.dependencies.verify_request", return_value=None):
            response = client.get("/api/v1/stacks")

        # Assert
        assert response.status_code == 401
