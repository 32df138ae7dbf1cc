"""
Stacks reflection backend.

Guided journaling sessions ("Stacks") with AI-generated follow-up questions,
semantic search over past reflections, and insight/analytics reports.
"""
