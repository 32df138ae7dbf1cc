"""
Search request schemas.

Dependencies: pydantic
System role: Search and insight API contracts
"""

from pydantic import Field

from stacks.models.common import CamelModel


class SearchRequest(CamelModel):
    """Semantic search request."""

    query: str = Field(description="Free-text query")
    limit: int = Field(default=10, ge=1, le=100, description="Maximum matches")


class ThemeRequest(CamelModel):
    """Theme lookup request."""

    theme: str = Field(description="Theme to analyze")
