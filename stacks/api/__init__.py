"""HTTP API: app factory, routers and dependencies."""
