"""
Stack question flows.

Immutable per-stack-type question lists. The first three questions of every
flow (title, CORE 4 domain, subject) are answered by the setup form, so the
chat starts at index 3. The ``[X]`` token is replaced by the session subject.

Dependencies: None (pure domain data)
System role: Question table consumed by the progression engine and prompts
"""

import enum
from types import MappingProxyType
from typing import Mapping

from stacks.core.exceptions import ValidationError

SUBJECT_PLACEHOLDER = "[X]"
SUBJECT_FALLBACK = "[subject]"

# Questions 0-2 come from the setup form
FIRST_CHAT_QUESTION_INDEX = 3


class StackType(str, enum.Enum):
    """Reflection templates, each with its own ordered question list."""

    GRATITUDE = "gratitude"
    IDEA = "idea"
    DISCOVER = "discover"
    ANGRY = "angry"


class Core4Domain(str, enum.Enum):
    """Life domain a Stack is filed under."""

    MIND = "mind"
    BODY = "body"
    BEING = "being"
    BALANCE = "balance"


STACK_QUESTION_FLOWS: Mapping[StackType, tuple[str, ...]] = MappingProxyType({
    StackType.GRATITUDE: (
        "What are you going to title this Gratitude Stack?",
        "What domain of CORE 4 are you Stacking? (Mind, Body, Being, or Balance)",
        "Who/What are you stacking?",
        "In this moment, why has [X] triggered you to feel grateful?",
        "What is the story you're telling yourself, created by this trigger, about [X] and the situation?",
        "Describe the single word feelings that arise for you when you tell yourself that story.",
        "Describe the specific thoughts and actions that arise for you when you tell yourself this story.",
        "What are the non-emotional FACTS about the situation with [X] that triggered you to feel grateful?",
        "Empowered by your gratitude trigger with [X] and the original story you are telling yourself, what do you truly want for you in and beyond this situation?",
        "What do you want for [X] in and beyond this situation?",
        "What do you want for [X] and YOU in and beyond this situation?",
        "Stepping back from what you have created so far, why has this gratitude trigger been extremely positive?",
        "Looking at how positive this gratitude trigger has been, what is the singular lesson on life you are taking from this Stack?",
        "What is the most significant REVELATION or INSIGHT you are leaving this Gratitude Stack with, and why do you feel that way?",
        "What immediate ACTIONS are you committed to taking leaving this Stack?",
    ),
    StackType.IDEA: (
        "What are you going to title this Idea Stack?",
        "What domain of CORE 4 are you Stacking? (Mind, Body, Being, or Balance)",
        "Who/What are you stacking?",
        "In this moment, what Idea has [X] activated in you?",
        "What is the story you're telling yourself about this new idea?",
        "Describe the single word feelings that arise for you when you tell yourself that story.",
        "Describe the specific thoughts and actions that arise for you when you tell yourself this story.",
        "If this productive idea is executed on, what are the positive benefits to your world and those you are connected to?",
        "If this productive idea is not executed on, what are the possible negative side effects to your world and those you are connected to?",
        "What is the first measurable FACT?",
        "Why do you feel selecting this FACT is significant?",
        "What is a simple TITLE you could give this FACT?",
        "What is the second measurable FACT?",
        "Why do you feel selecting this FACT is significant?",
        "What is a simple TITLE you could give this FACT?",
        "What is the third measurable FACT?",
        "Why do you feel selecting this FACT is significant?",
        "What is a simple TITLE you could give this FACT?",
        "What is the fourth measurable FACT?",
        "Why do you feel selecting this FACT is significant?",
        "What is a simple TITLE you could give this FACT?",
        "Stepping back from this Idea Stack, why has this productive idea been extremely positive?",
        "Looking at how positive this productive idea has been, what is the singular lesson about life you are taking from this Stack?",
        "What is the most significant REVELATION or INSIGHT you are leaving this Idea Stack with, and why do you feel that way?",
        "What immediate actions are you committed to taking leaving this Stack?",
    ),
    StackType.DISCOVER: (
        "What are you going to title this Discover Stack?",
        "What domain of CORE 4 are you Stacking? (Mind, Body, Being, or Balance)",
        "Who/What are you stacking?",
        "In this moment, what Discovery has [X] activated in you?",
        "What is the story you're telling yourself about this discovery?",
        "Describe the single word feelings that arise for you when you tell yourself that story.",
        "Describe the specific thoughts and actions that arise for you when you tell yourself this story.",
        "Stepping back from what you have discovered, why has this discovery been extremely positive?",
        "Looking at how positive this discovery trigger has been, what is the singular lesson about life you are taking from this Stack?",
        "What Category of life would you like to apply this discovery?",
        "The lesson you learned was: [fill in based on your previous answer]",
        "How does this lesson apply to your chosen CORE 4 domain?",
        "What is the most significant REVELATION, or INSIGHT, that you are leaving this Discover Stack with? Why do you feel that way?",
        "What immediate actions are you committed to taking leaving this Discover Stack?",
    ),
    StackType.ANGRY: (
        "What are you going to title this Angry Stack?",
        "What domain of CORE 4 are you stacking? (Mind, Body, Being, or Balance)",
        "Who/What are you stacking?",
        "In this moment, why has [X] triggered you to feel anger?",
        "What is the story you're telling yourself, created by this trigger, about [X] and the situation?",
        "Describe the single word feelings that arise for you when you tell yourself that story.",
        "Describe the specific thoughts and actions that arise for you when you tell yourself this story.",
        "What evidence do you have to support this story as absolutely true?",
        "What are the non-emotional facts about the situation with [X] that triggered you to feel anger?",
        "Regardless of your anger trigger with [X] and the original story you are telling yourself, what do you truly want for you in and beyond this situation?",
        "What do you want for [X] in and beyond this situation?",
        "What do you want for [X] and YOU in and beyond this situation?",
        "If you keep telling yourself this original story, will it ultimately give you what you want?",
        "Are you ready to let go of the original story, to expand your mind and reality around this trigger and create a new power story that will assure you get what you want?",
        "Letting go of the original story and reviewing what you want, and knowing you can ultimately create any story you desire, what is your new DESIRED VERSION of the story?",
        "What evidence can you see to prove this DESIRED STORY is accurate, so you can weaponize yourself to move forward today?",
        "Stepping back and reviewing what you want, will telling yourself this desired story give you what you want?",
        "Stepping back from what you have created so far, why has this anger trigger been extremely positive?",
        "Looking at how positive this anger trigger has been, what is the singular lesson on life you are taking from this Stack?",
        "What is the most significant revelation or insight you are leaving this Angry Stack with, and why do you feel that way?",
        "Compared to how you felt when you started this Angry Stack, what singular words would you use to describe how you feel now completing it?",
        "What immediate actions are you committed to taking leaving this Stack?",
    ),
})


def parse_stack_type(value: str | StackType) -> StackType:
    """
    Coerce a raw tag into a StackType.

    Raises:
        ValidationError: If the tag is not one of the known stack types
    """
    try:
        return StackType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in StackType)
        raise ValidationError(
            f"Unknown stack type '{value}' (expected one of: {allowed})",
            field="stackType",
        ) from None


def get_questions(stack_type: str | StackType) -> tuple[str, ...]:
    """Return the ordered question templates for a stack type."""
    return STACK_QUESTION_FLOWS[parse_stack_type(stack_type)]


def total_questions(stack_type: str | StackType) -> int:
    """Return the number of questions in a stack type's flow."""
    return len(get_questions(stack_type))


def format_question(stack_type: str | StackType, index: int, subject: str | None) -> str:
    """
    Render the question at ``index`` with the subject substituted.

    Args:
        stack_type: Stack type tag
        index: Zero-based question index
        subject: Session subject string (falls back to "[subject]" when empty)

    Returns:
        str: Question text with every [X] replaced

    Raises:
        IndexError: If index is outside the flow
    """
    template = get_questions(stack_type)[index]
    return template.replace(SUBJECT_PLACEHOLDER, subject or SUBJECT_FALLBACK)


def opening_question(stack_type: str | StackType, subject: str | None) -> str:
    """Return the first question asked in chat (index 3)."""
    return format_question(stack_type, FIRST_CHAT_QUESTION_INDEX, subject)


def parse_domain(value: str | Core4Domain) -> Core4Domain:
    """
    Coerce a raw tag into a Core4Domain.

    Raises:
        ValidationError: If the tag is not one of the CORE 4 domains
    """
    try:
        return Core4Domain(value.lower() if isinstance(value, str) else value)
    except ValueError:
        allowed = ", ".join(d.value for d in Core4Domain)
        raise ValidationError(
            f"Unknown CORE 4 domain '{value}' (expected one of: {allowed})",
            field="domain",
        ) from None
