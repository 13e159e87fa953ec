"""Abstract protocols (interfaces) for dependency inversion.

This module defines abstract interfaces that decouple components from their
concrete implementations, enabling:
- Easy testing with mock implementations
- Swapping implementations without changing clients
- Clear contracts between components

Note: We use typing.Protocol for structural subtyping (duck typing).
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Sequence


# Type aliases
Message = Dict[str, Any]
ToolResult = Dict[str, Any]
ToolSchema = Dict[str, Any]


class LLMClient(Protocol):
    """Protocol for chat model clients.

    Implementations wrap an OpenAI-compatible Chat Completions API and hand
    back the provider's stream of chunks untouched.
    """

    @abstractmethod
    async def stream_with_tools(
        self,
        messages: Sequence[Message],
        tools: List[ToolSchema],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[Any]:
        """Request a streamed completion with function calling enabled.

        Args:
            messages: Conversation history.
            tools: Tool definitions for function calling.
            model: Model identifier (uses default if None).
            temperature: Sampling temperature (uses default if None).
            max_tokens: Maximum tokens in response (uses default if None).

        Returns:
            Async iterator of chat completion chunks.
        """
        ...


class ChartDisplay(Protocol):
    """Protocol for the session-scoped surface the chart tools write to."""

    @abstractmethod
    def show_chart(self, spec: Any, figure: Any) -> None:
        """Replace the displayed chart."""
        ...

    @abstractmethod
    def append_output(self, text: str) -> None:
        """Append text to the visible conversation."""
        ...
