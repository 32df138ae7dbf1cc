"""
Exception hierarchy for the Stacks application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class StacksException(Exception):
    """Base exception for all Stacks application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(StacksException):
    """Raised when input validation fails (missing or empty required fields)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class InvalidRoleError(ValidationError):
    """Raised when an operation targets a message with the wrong author role."""

    def __init__(self, message_id: str, role: str) -> None:
        super().__init__(
            f"Only user messages can be edited (message {message_id} is '{role}')",
            field="role",
            details={"message_id": message_id, "role": role},
        )


class NotFoundError(StacksException):
    """Raised when a requested resource does not exist."""

    pass


class SessionNotFoundError(NotFoundError):
    """Raised when a Stack session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Session not found: {session_id}", details)


class MessageNotFoundError(NotFoundError):
    """Raised when a message is absent or belongs to another session."""

    def __init__(self, message_id: str, session_id: str | None = None) -> None:
        details: dict[str, Any] = {"message_id": message_id}
        if session_id:
            details["session_id"] = session_id
        super().__init__(f"Message not found: {message_id}", details)


class AccessDeniedError(StacksException):
    """Raised when the requester does not own the resource."""

    def __init__(self, session_id: str, owner_id: str) -> None:
        super().__init__(
            "Access denied",
            {"session_id": session_id, "owner_id": owner_id},
        )


class ConflictError(StacksException):
    """Raised when an operation is incompatible with the current resource state."""

    pass


class SessionAlreadyCompletedError(ConflictError):
    """Raised when answering a session that is already completed."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            "Session is already completed",
            {"session_id": session_id},
        )


class UpstreamServiceError(StacksException):
    """Raised when an external service call (LLM, embeddings, vector store) fails."""

    def __init__(
        self,
        message: str,
        service: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream service error.

        Args:
            message: Error message
            service: Name of the failing service
            details: Additional context
        """
        details = details or {}
        if service:
            details["service"] = service
        super().__init__(message, details)


class GenerationError(UpstreamServiceError):
    """Raised when the language model fails to produce an assistant turn."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, service="anthropic", details=details)


class InsightsError(UpstreamServiceError):
    """Raised when an insight report cannot be generated."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, service="anthropic", details=details)


class EmbeddingError(UpstreamServiceError):
    """Raised when embedding generation fails or returns the wrong dimension."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, service="cohere", details=details)


class VectorStoreError(UpstreamServiceError):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (upsert, query)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, service="mongodb", details=details)
