"""
Language model integration for guided Stack conversations.

Exports:
  - StackResponseGenerator: Produces acknowledgement/question turns and final summaries
  - ConversationTurn: Plain transcript entry passed to the generator
"""

from stacks.core.ai.response_generator import ConversationTurn, StackResponseGenerator

__all__ = ["ConversationTurn", "StackResponseGenerator"]
