"""LLM client implementations.

This module provides LLM client implementations that conform to the LLMClient protocol.
Currently supports OpenAI and OpenAI-compatible endpoints (via OPENAI_BASE_URL).
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, AsyncIterator, List, Optional, Sequence

from openai import AsyncOpenAI, RateLimitError, APIError

from config import settings
from protocols import Message, ToolSchema


class LLMRateLimitError(Exception):
    """Raised when the LLM API rate limit is exceeded."""
    pass


class LLMAPIError(Exception):
    """Raised when the LLM API returns an error."""
    pass


class OpenAIChatClient:
    """LLM client implementation for the OpenAI Chat Completions API.

    Attributes:
        _client: The underlying AsyncOpenAI client.
        _default_model: Default model to use for completions.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
    ):
        """Initialize the client.

        Args:
            api_key: OpenAI API key (uses settings if None).
            base_url: API base URL (uses settings if None).
            default_model: Default model identifier (uses settings if None).

        Raises:
            ValueError: If API key is not provided or found in settings.
        """
        api_key = api_key or settings.llm.api_key
        if not api_key:
            raise ValueError("OPENAI_API_KEY not set in environment")

        base_url = base_url or settings.llm.base_url
        self._default_model = default_model or settings.llm.default_model

        self._client = AsyncOpenAI(base_url=base_url, api_key=api_key)

    @property
    def default_model(self) -> str:
        return self._default_model

    async def stream_with_tools(
        self,
        messages: Sequence[Message],
        tools: List[ToolSchema],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[Any]:
        """Stream a chat completion with function calling.

        Args:
            messages: Conversation history.
            tools: Tool definitions for function calling.
            model: Model identifier (uses default if None).
            temperature: Sampling temperature (uses settings if None).
            max_tokens: Maximum tokens in response (uses settings if None).

        Yields:
            Chat completion chunks as they arrive.

        Raises:
            LLMRateLimitError: If rate limit is exceeded.
            LLMAPIError: If the API returns an error.
        """
        try:
            stream = await self._client.chat.completions.create(
                model=model or self._default_model,
                messages=list(messages),
                tools=tools,
                tool_choice="auto",
                temperature=settings.llm.default_temperature if temperature is None else temperature,
                max_tokens=max_tokens or settings.llm.default_max_tokens,
                stream=True,
            )
            async for chunk in stream:
                yield chunk
        except RateLimitError as e:
            raise LLMRateLimitError(
                "Rate limit exceeded. The AI service is temporarily unavailable. "
                "Please wait a moment and try again."
            ) from e
        except APIError as e:
            raise LLMAPIError(f"AI service error: {str(e)}") from e


@lru_cache(maxsize=1)
def get_llm_client() -> OpenAIChatClient:
    """Get the singleton LLM client instance.

    Returns:
        Configured OpenAIChatClient instance.
    """
    return OpenAIChatClient()
