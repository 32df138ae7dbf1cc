"""
Stack response generator.

Turns the latest answer into the next assistant turn: a brief
acknowledgement plus the next templated question while questions remain,
or a long-form summary once the flow is exhausted.

Dependencies: langchain_anthropic, langchain_core, stacks.configs
System role: Assistant turn generation for the progression engine
"""

import logging
from dataclasses import dataclass
from typing import Literal, Sequence

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.output_parsers import StrOutputParser

from stacks.configs import get_settings
from stacks.core.ai.stack_prompts import (
    STACK_GUIDE_PROMPT,
    STACK_SYSTEM_PROMPTS,
    question_guidance,
    summary_guidance,
)
from stacks.core.exceptions import GenerationError
from stacks.core.question_flows import format_question, parse_stack_type, total_questions
from stacks.observability.langfuse_tracer import get_langfuse_callbacks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversationTurn:
    """One prior transcript entry as seen by the model."""

    role: Literal["user", "assistant"]
    content: str


def _to_messages(history: Sequence[ConversationTurn]) -> list[BaseMessage]:
    return [
        HumanMessage(content=turn.content) if turn.role == "user" else AIMessage(content=turn.content)
        for turn in history
    ]


class StackResponseGenerator:
    """
    Anthropic-backed generator for Stack assistant turns.

    Two chat model instances share the model id and temperature and differ
    only in their token ceiling: short turns for questions, long for the
    closing summary. No retries and no streaming; any non-empty text is
    accepted as the turn.
    """

    def __init__(
        self,
        model_id: str | None = None,
        api_key: str | None = None,
        temperature: float | None = None,
        question_max_tokens: int | None = None,
        summary_max_tokens: int | None = None,
    ) -> None:
        """
        Initialize generator with Anthropic chat models.

        Args:
            model_id: Anthropic model identifier (defaults to settings)
            api_key: Anthropic API key (defaults to settings, then ANTHROPIC_API_KEY)
            temperature: Sampling temperature (defaults to settings, 0.7)
            question_max_tokens: Ceiling for acknowledgement+question turns
            summary_max_tokens: Ceiling for the closing summary
        """
        llm_settings = get_settings().llm
        self._model_id = model_id or llm_settings.model
        temperature = llm_settings.guidance_temperature if temperature is None else temperature
        api_key = api_key or llm_settings.api_key

        model_kwargs = {"model": self._model_id, "temperature": temperature}
        if api_key:
            model_kwargs["api_key"] = api_key

        self._question_chain = STACK_GUIDE_PROMPT | ChatAnthropic(
            max_tokens=question_max_tokens or llm_settings.question_max_tokens,
            **model_kwargs,
        ) | StrOutputParser()
        self._summary_chain = STACK_GUIDE_PROMPT | ChatAnthropic(
            max_tokens=summary_max_tokens or llm_settings.summary_max_tokens,
            **model_kwargs,
        ) | StrOutputParser()

    async def generate(
        self,
        stack_type: str,
        cursor: int,
        answer: str,
        history: Sequence[ConversationTurn],
        subject: str | None,
    ) -> str:
        """
        Produce the assistant turn that follows ``answer``.

        Args:
            stack_type: Stack type tag of the session
            cursor: Index of the question that ``answer`` responds to
            answer: Latest user answer (not included in ``history``)
            history: Transcript before the answer, oldest first
            subject: Session subject used to fill [X] placeholders

        Returns:
            str: Assistant text

        Raises:
            GenerationError: If the model call fails or returns no text
        """
        stack_type = parse_stack_type(stack_type)
        next_index = cursor + 1
        is_summary = next_index >= total_questions(stack_type)

        if is_summary:
            guidance = summary_guidance(stack_type)
            chain = self._summary_chain
        else:
            guidance = question_guidance(
                answered_number=cursor + 1,
                next_question=format_question(stack_type, next_index, subject),
            )
            chain = self._question_chain

        logger.info(
            f"{__name__}:generate - START stack_type={stack_type.value}, cursor={cursor}, "
            f"summary={is_summary}, history_len={len(history)}"
        )

        try:
            text = await chain.ainvoke(
                {
                    "system_prompt": STACK_SYSTEM_PROMPTS[stack_type],
                    "guidance": guidance,
                    "history": _to_messages(history),
                    "answer": answer,
                },
                config={
                    "callbacks": get_langfuse_callbacks(),
                    "run_name": "stack_summary" if is_summary else "stack_question",
                    "metadata": {"stack_type": stack_type.value, "cursor": cursor},
                },
            )
        except Exception as e:
            logger.exception(
                f"{__name__}:generate - FAILED",
                extra={"stack_type": stack_type.value, "cursor": cursor, "error_type": type(e).__name__},
            )
            raise GenerationError(
                "Failed to generate AI response",
                details={"stack_type": stack_type.value, "cursor": cursor},
            ) from e

        if not text or not text.strip():
            logger.error(f"{__name__}:generate - Empty completion stack_type={stack_type.value}")
            raise GenerationError(
                "No text content in AI response",
                details={"stack_type": stack_type.value, "cursor": cursor},
            )

        logger.info(f"{__name__}:generate - DONE response_len={len(text)}")
        return text
