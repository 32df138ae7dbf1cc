"""
Identity provider boundary.

Exports:
  - verify_request(): Resolve a request to a Clerk user id
  - get_clerk_client(): Memoized Clerk SDK client
"""

from stacks.boundary.auth.clerk_client import get_clerk_client, verify_request

__all__ = ["get_clerk_client", "verify_request"]
