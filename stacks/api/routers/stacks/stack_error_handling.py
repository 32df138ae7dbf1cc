"""
Stack error handling utilities.

Decorator that maps the application exception hierarchy onto HTTP errors
for every Stack-related endpoint.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from stacks.core.exceptions import (
    AccessDeniedError,
    ConflictError,
    NotFoundError,
    StacksException,
    UpstreamServiceError,
    ValidationError,
)
from stacks.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_stack_errors(func: F) -> F:
    """
    Decorator to transform application errors into HTTPExceptions.

    - NotFoundError -> 404
    - AccessDeniedError -> 403
    - ValidationError, ConflictError -> 400
    - UpstreamServiceError and anything unexpected -> 500
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except NotFoundError as e:
            logger.warning("Resource not found", extra={"details": e.details, "error": e.message})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except AccessDeniedError as e:
            logger.warning("Access denied", extra={"details": e.details})
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)

        except (ValidationError, ConflictError) as e:
            logger.warning("Invalid stack request", extra={"details": e.details, "error": e.message})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except UpstreamServiceError as e:
            logger.error("Upstream service failure", extra={"details": e.details, "error": e.message})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message,
            )

        except StacksException as e:
            logger.exception("Unhandled application error", extra={"details": e.details})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message,
            )

        except Exception as e:
            log_exception_with_context(
                logger, "Unexpected failure in stack operation", e, endpoint=func.__name__
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred during stack operation",
            )

    return wrapper  # type: ignore
