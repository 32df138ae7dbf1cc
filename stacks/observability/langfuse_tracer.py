"""
Langfuse tracing integration.

Builds LangChain callback handlers that report model calls to Langfuse
when keys are configured. Without keys, tracing is silently off.

Dependencies: langfuse, stacks.configs
System role: LLM call tracing
"""

import logging
import os
from functools import lru_cache

from langchain_core.callbacks import BaseCallbackHandler

from stacks.configs import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def _tracing_enabled() -> bool:
    """Export Langfuse credentials to the environment the SDK reads from."""
    settings = get_settings().observability
    if not settings.tracing_configured:
        logger.info(f"{__name__}:_tracing_enabled - Langfuse tracing disabled")
        return False

    os.environ.setdefault("LANGFUSE_PUBLIC_KEY", settings.public_key)
    os.environ.setdefault("LANGFUSE_SECRET_KEY", settings.secret_key)
    os.environ.setdefault("LANGFUSE_HOST", settings.host)
    logger.info(f"{__name__}:_tracing_enabled - Langfuse tracing enabled host={settings.host}")
    return True


def get_langfuse_callbacks() -> list[BaseCallbackHandler]:
    """
    Return callback handlers for a single LangChain invocation.

    Returns:
        list: [CallbackHandler] when tracing is configured, else []
    """
    if not _tracing_enabled():
        return []

    from langfuse.langchain import CallbackHandler

    return [CallbackHandler()]
