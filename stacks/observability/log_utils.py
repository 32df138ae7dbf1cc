"""
Structured logging helpers.

Reflection text is personal, so log context never carries it verbatim:
strings are clipped, collections are reduced to their size and
exceptions are summarized by type and a clipped message.

Dependencies: logging (stdlib)
System role: Safe context for error logs
"""

import logging
from typing import Any

MAX_LOGGED_CHARS = 120


def safe_log_value(value: Any, max_length: int = MAX_LOGGED_CHARS) -> str:
    """
    Render a context value for a log record.

    Args:
        value: Any value destined for ``extra=``
        max_length: Characters kept before clipping

    Returns:
        str: Clipped text, or a size summary for collections
    """
    if value is None:
        return "None"
    if isinstance(value, (list, tuple, set)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"

    text = value if isinstance(value, str) else repr(value)
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}... ({len(text)} chars)"


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """
    Log ``exc`` with its traceback and sanitized context.

    Args:
        logger: Module logger
        message: Log message
        exc: The exception being handled
        **context: Fields added to the record via ``extra=``
    """
    extra = {key: safe_log_value(value) for key, value in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)
