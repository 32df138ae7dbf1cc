"""
Request correlation ids.

Each request runs inside a correlation scope: the id is taken from the
caller's ``X-Correlation-ID`` header when present, generated otherwise,
and reset when the request ends. Log records pick it up through
``CorrelationIdFilter``.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

CORRELATION_HEADER = "X-Correlation-ID"

# Header values longer than this are replaced by a generated id
MAX_CORRELATION_ID_LENGTH = 128

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Current correlation id ("" outside a request)."""
    return _correlation_id.get()


def _accept(incoming: str | None) -> str:
    if incoming and len(incoming) <= MAX_CORRELATION_ID_LENGTH and incoming.isprintable():
        return incoming
    return uuid.uuid4().hex


@contextmanager
def correlation_scope(incoming: str | None = None) -> Iterator[str]:
    """
    Bind a correlation id for the duration of the block.

    Args:
        incoming: Id supplied by the caller, if any

    Yields:
        str: The id bound for this scope
    """
    value = _accept(incoming)
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)
