"""
FastAPI middleware for observability.

Binds a correlation id to every request and logs each request once it
finishes. Health probes are logged at DEBUG so polling does not flood
the stream.

Dependencies: fastapi, starlette, stacks.observability.correlation
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from stacks.observability.correlation import CORRELATION_HEADER, correlation_scope

logger = logging.getLogger(__name__)

HEALTH_PATH_MARKER = "/health"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency for each request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        path = request.url.path
        context = {"method": request.method, "path": path}

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{request.method} {path} failed",
                extra={**context, "duration_ms": _elapsed_ms(started), "error_type": type(e).__name__},
            )
            raise

        level = logging.DEBUG if HEALTH_PATH_MARKER in path else logging.INFO
        logger.log(
            level,
            f"{request.method} {path} - {response.status_code}",
            extra={**context, "status_code": response.status_code, "duration_ms": _elapsed_ms(started)},
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Run the request in a correlation scope and echo the id back."""

    async def dispatch(self, request: Request, call_next) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            response: Response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
