"""
Boundary layer for external system integrations.

Handles all interactions with external systems (database, vector store,
identity provider). Provides adapters and clients for infrastructure
dependencies.
"""
