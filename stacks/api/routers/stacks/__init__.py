"""
Stacks router package.

Exports the router for Stack session endpoints.
"""

from .stacks_router import router

__all__ = ["router"]
