"""
Stack progression rules.

Exports:
  - plan_advance(): Decide what the next assistant turn is
  - rollback_cursor(): Cursor value after an edit truncates the transcript
  - split_transcript(): Partition a transcript around an edited message
  - SessionLockRegistry: Per-session asyncio locks
"""

from stacks.core.progression.session_locks import SessionLockRegistry, session_locks
from stacks.core.progression.state_machine import (
    AdvancePlan,
    ensure_in_progress,
    ensure_user_message,
    normalize_text,
    plan_advance,
    rollback_cursor,
    split_transcript,
)

__all__ = [
    "AdvancePlan",
    "SessionLockRegistry",
    "ensure_in_progress",
    "ensure_user_message",
    "normalize_text",
    "plan_advance",
    "rollback_cursor",
    "session_locks",
    "split_transcript",
]
