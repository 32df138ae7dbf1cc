"""
Plain-text transcript export.

Renders a session and its messages into the downloadable transcript.
Every timestamp in the output comes from stored data, so exporting the
same session twice without writes in between yields identical bytes.

Dependencies: None (pure formatting)
System role: Transcript rendering for the export endpoint
"""

import re
from datetime import datetime, timezone
from typing import Iterable, Protocol

RULE = "================================"


class ExportableSession(Protocol):
    title: str
    stack_type: object
    domain: object
    subject: str
    status: object
    created_at: datetime
    completed_at: datetime | None


class ExportableMessage(Protocol):
    role: object
    content: str
    question_number: int | None
    created_at: datetime


def _tag(value: object) -> str:
    return str(getattr(value, "value", value))


def _capitalize(value: object) -> str:
    text = _tag(value)
    return text[:1].upper() + text[1:]


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_iso_timestamp(value: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    value = _utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def generated_at(session: ExportableSession, messages: list[ExportableMessage]) -> datetime:
    """Latest write to the session: newest message, completion, or creation."""
    candidates = [_utc(session.created_at)]
    if session.completed_at is not None:
        candidates.append(_utc(session.completed_at))
    candidates.extend(_utc(m.created_at) for m in messages)
    return max(candidates)


def export_filename(title: str) -> str:
    """Attachment filename: non-alphanumerics become dashes, lowercased."""
    return f"{re.sub(r'[^a-z0-9]', '-', title, flags=re.IGNORECASE).lower()}-transcript.txt"


def render_transcript(
    session: ExportableSession,
    messages: Iterable[ExportableMessage],
) -> str:
    """
    Render the transcript text.

    Args:
        session: Session row
        messages: Transcript, oldest first

    Returns:
        str: Header, one block per message, footer
    """
    messages = list(messages)
    status = "Completed" if _tag(session.status) == "completed" else "In Progress"

    lines = [
        "MindGrowth Stack Transcript",
        RULE,
        "",
        f"Title: {session.title}",
        f"Stack Type: {_capitalize(session.stack_type)}",
        f"CORE 4 Domain: {_capitalize(session.domain)}",
        f"Subject: {session.subject}",
        f"Date: {_utc(session.created_at).date().isoformat()}",
        f"Status: {status}",
        "",
        RULE,
        "",
    ]

    for index, message in enumerate(messages):
        if _tag(message.role) == "assistant":
            lines.append(f"Question {message.question_number or index + 1}:")
            lines.append(message.content)
            lines.append("")
        else:
            lines.append("Your Response:")
            lines.append(message.content)
            lines.append("")
            lines.append("---")
            lines.append("")

    lines.extend([
        "",
        RULE,
        "End of Transcript",
        f"Generated: {format_iso_timestamp(generated_at(session, messages))}",
    ])
    return "\n".join(lines) + "\n"
