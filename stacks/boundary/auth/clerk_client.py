"""
Clerk session verification.

Resolves an incoming request's bearer token to the Clerk user id. The rest
of the application only ever sees that opaque string.

Dependencies: clerk_backend_api, fastapi, stacks.configs
System role: Identity provider adapter
"""

import logging
from functools import lru_cache

from clerk_backend_api import Clerk
from clerk_backend_api.security.types import AuthenticateRequestOptions
from fastapi import Request

from stacks.configs import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_clerk_client() -> Clerk:
    """Get the memoized Clerk SDK client."""
    settings = get_settings().auth
    if not settings.secret_key:
        logger.warning(f"{__name__}:get_clerk_client - CLERK_SECRET_KEY is not set")
    return Clerk(bearer_auth=settings.secret_key or "")


def verify_request(request: Request) -> str | None:
    """
    Verify the session token carried by a request.

    Blocking (the SDK may fetch signing keys); call from a thread pool.

    Args:
        request: Incoming request (only its headers are read)

    Returns:
        str | None: Clerk user id when signed in, None otherwise
    """
    settings = get_settings().auth
    options = AuthenticateRequestOptions(
        authorized_parties=settings.authorized_parties or None,
    )
    request_state = get_clerk_client().authenticate_request(request, options)

    if not request_state.is_signed_in:
        logger.info(
            f"{__name__}:verify_request - Not signed in",
            extra={"reason": str(request_state.reason)},
        )
        return None

    payload = request_state.payload or {}
    return payload.get("sub")
