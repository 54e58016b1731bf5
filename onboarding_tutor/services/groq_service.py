import json
import logging
import time
from collections.abc import AsyncIterator
from typing import Optional

import httpx

from onboarding_tutor.agents.exceptions import LLMError
from onboarding_tutor.config import settings
from onboarding_tutor.core.llm_client import ChatMessage, StreamChunk

logger = logging.getLogger(__name__)

# Server-sent events framing of the OpenAI-compatible streaming endpoint
SSE_DATA_PREFIX = "data:"
SSE_DONE = "[DONE]"

# Lazy singleton instance
_groq_service_instance = None


def get_groq_service() -> "GroqService":
    """
    Get or create singleton GroqService instance (lazy initialization).

    Returns:
        GroqService: Singleton instance
    """
    global _groq_service_instance

    if _groq_service_instance is None:
        logger.info("🤖 Initializing GroqService (first use)...")
        logger.info(f"   Model: {settings.groq_model}")
        _groq_service_instance = GroqService()
        logger.info("✅ GroqService ready (will reuse for future requests)")

    return _groq_service_instance


def parse_sse_line(line: str) -> Optional[StreamChunk] | str:
    """
    Decode one SSE line of a chat-completions stream.

    Returns:
        SSE_DONE for the end-of-stream sentinel, a StreamChunk for a data line,
        or None for blank lines, comments and keep-alives.
    """
    line = line.strip()
    if not line.startswith(SSE_DATA_PREFIX):
        return None

    data = line[len(SSE_DATA_PREFIX):].strip()
    if data == SSE_DONE:
        return SSE_DONE

    try:
        payload = json.loads(data)
    except json.JSONDecodeError as e:
        raise LLMError(f"Malformed stream event from Groq API: {data[:200]}") from e

    choices = payload.get("choices") or []
    if not choices:
        return StreamChunk(text=None)
    delta = choices[0].get("delta") or {}
    return StreamChunk(text=delta.get("content"))


class GroqService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize GroqService.

        Raises:
            ValueError: If no API key is configured
        """
        api_key = api_key or settings.groq_api_key
        if not api_key:
            raise ValueError(
                "GROQ_API_KEY is not configured. Please set it in your .env file."
            )

        self.api_key = api_key
        self.model = model or settings.groq_model
        self.api_url = api_url or settings.groq_api_url
        self.timeout = timeout or settings.llm_timeout
        self.temperature = settings.llm_temperature
        self.max_tokens = settings.llm_max_tokens

        logger.info("✅ GroqService initialized")
        logger.debug(f"   API URL: {self.api_url}")
        logger.debug(f"   Model: {self.model}")
        logger.debug(f"   Timeout: {self.timeout}s")

    async def create_message(
        self, system_prompt: str, messages: list[ChatMessage]
    ) -> AsyncIterator[StreamChunk]:
        """
        Stream a chat completion from the Groq API.

        Args:
            system_prompt: System instructions for the model
            messages: Conversation turns [{"role": "user|assistant", "content": "..."}]

        Yields:
            StreamChunk for every streamed delta

        Raises:
            LLMError: On HTTP errors, timeouts and transport failures
        """
        start_time = time.time()
        logger.info(f"🤖 Streaming response from Groq API (model: {self.model})")
        logger.debug(f"   System prompt length: {len(system_prompt)} chars")
        logger.debug(f"   Messages: {len(messages)}")

        payload = {
            "model": self.model,
            "messages": [{"role": "system", "content": system_prompt}]
            + [{"role": m["role"], "content": m["content"]} for m in messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": True,
        }

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        received_chars = 0
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                async with client.stream(
                    "POST", self.api_url, json=payload, headers=headers
                ) as response:
                    if response.is_error:
                        await response.aread()
                        raise LLMError(self._describe_http_error(response))

                    async for line in response.aiter_lines():
                        event = parse_sse_line(line)
                        if event is None:
                            continue
                        if event == SSE_DONE:
                            break
                        if event.text:
                            received_chars += len(event.text)
                        yield event

        except httpx.TimeoutException as e:
            error_msg = f"Groq API request timed out after {self.timeout}s"
            logger.error(f"❌ {error_msg}")
            raise LLMError(error_msg) from e

        except httpx.RequestError as e:
            error_msg = f"Groq API request failed: {str(e)}"
            logger.error(f"❌ {error_msg}")
            raise LLMError(error_msg) from e

        duration = time.time() - start_time
        logger.info(f"✅ Streamed response ({received_chars} chars) in {duration:.3f}s")

    @staticmethod
    def _describe_http_error(response: httpx.Response) -> str:
        error_msg = f"Groq API HTTP error: {response.status_code}"
        if response.status_code == 401:
            error_msg += " - Invalid API key"
        elif response.status_code == 429:
            error_msg += " - Rate limit exceeded"
        elif response.status_code >= 500:
            error_msg += " - Groq API server error"

        try:
            error_detail = response.json()
            if isinstance(error_detail, dict) and isinstance(error_detail.get("error"), dict):
                error_msg += f" - {error_detail['error'].get('message', '')}"
        except ValueError:
            error_msg += f" - {response.text[:200]}"

        logger.error(f"❌ {error_msg}")
        return error_msg
