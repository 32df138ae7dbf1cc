"""
Observability module.

Provides structured logging, correlation ID tracking and Langfuse tracing.
"""

from stacks.observability.correlation import correlation_scope, get_correlation_id
from stacks.observability.langfuse_tracer import get_langfuse_callbacks
from stacks.observability.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "get_correlation_id",
    "correlation_scope",
    "get_langfuse_callbacks",
]
