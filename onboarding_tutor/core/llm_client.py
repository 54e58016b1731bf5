"""
Streaming LLM client contract and the process-wide client instance.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Literal, Protocol, TypedDict

logger = logging.getLogger(__name__)


class ChatMessage(TypedDict):
    role: Literal["user", "assistant"]
    content: str


@dataclass(frozen=True)
class StreamChunk:
    """One streamed piece of model output. `text` is None for non-text chunks."""

    text: str | None = None


class LLMClient(Protocol):
    def create_message(
        self, system_prompt: str, messages: list[ChatMessage]
    ) -> AsyncIterator[StreamChunk]:
        """Stream the model's reply as text chunks."""
        ...


_llm_client: LLMClient | None = None


def get_llm_client() -> LLMClient:
    """
    Get or create the singleton LLM client.

    Raises:
        ValueError: If no API key is configured
    """
    global _llm_client

    if _llm_client is None:
        from onboarding_tutor.services.groq_service import get_groq_service

        _llm_client = get_groq_service()
        logger.info("LLM client initialized successfully")

    return _llm_client
