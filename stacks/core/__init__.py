"""
Core domain logic: question flows, progression rules, prompts and analytics.

Modules here do not touch the database directly; the application layer
wires them to the boundary adapters.
"""
