"""Chat service that lets the model draw charts through tools.

This module runs one conversational turn: it streams the model's reply,
collects any tool calls the model makes, executes them against the session's
chart tools and feeds the results back until the model answers in text.
"""
from __future__ import annotations

import json
from typing import Any, AsyncIterator, Dict, List, Optional

from config import settings
from models.session import PlotSession
from protocols import LLMClient, Message, ToolResult, ToolSchema
from services.llm.client import get_llm_client
from services.llm.tools import PLOT_TOOLS
from services.plots.registry import ToolRegistry

ChatEvent = Dict[str, Any]


class SessionBusyError(Exception):
    """Raised when a session already has a turn in progress."""
    pass


def text_event(content: str) -> ChatEvent:
    return {"type": "text", "content": content}


def chart_event(version: int) -> ChatEvent:
    return {"type": "chart", "version": version}


class _ToolCallBuffer:
    """Reassembles tool calls from streamed deltas.

    The API streams each call as fragments keyed by position: the id and name
    arrive first, the JSON arguments arrive in pieces.
    """

    def __init__(self):
        self._calls: Dict[int, Dict[str, str]] = {}

    def __bool__(self) -> bool:
        return bool(self._calls)

    def add(self, delta: Any) -> None:
        entry = self._calls.setdefault(delta.index, {"id": "", "name": "", "arguments": ""})
        if delta.id:
            entry["id"] = delta.id
        function = getattr(delta, "function", None)
        if function is not None:
            if function.name:
                entry["name"] += function.name
            if function.arguments:
                entry["arguments"] += function.arguments

    def calls(self) -> List[Dict[str, str]]:
        return [self._calls[index] for index in sorted(self._calls)]

    def as_message_entries(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": call["id"],
                "type": "function",
                "function": {"name": call["name"], "arguments": call["arguments"]},
            }
            for call in self.calls()
        ]


def _decode_arguments(raw: str) -> Any:
    """Decode a tool call's JSON arguments, treating an empty string as {}."""
    if not raw.strip():
        return {}
    return json.loads(raw)


class ChatService:
    """Runs streamed, tool-calling chat turns for a session.

    Attributes:
        _client: LLM client for API calls.
        _tools: Tool schemas offered to the model.
        _max_tool_iterations: Upper bound on model requests per turn.
    """

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        tools: Optional[List[ToolSchema]] = None,
        max_tool_iterations: Optional[int] = None,
    ):
        """Initialize the chat service.

        Args:
            client: LLM client instance (uses default if None).
            tools: Tool schemas (uses the chart tools if None).
            max_tool_iterations: Request limit per turn (uses settings if None).
        """
        self._client = client if client is not None else get_llm_client()
        self._tools = tools if tools is not None else PLOT_TOOLS
        self._max_tool_iterations = max_tool_iterations or settings.llm.max_tool_iterations

    async def stream(
        self,
        session: PlotSession,
        user_message: str,
        registry: ToolRegistry,
    ) -> AsyncIterator[ChatEvent]:
        """Stream the reply to one user message.

        Args:
            session: Session holding the conversation and the displayed chart.
            user_message: User's input message.
            registry: Tools bound to this session.

        Yields:
            Text events in arrival order, and a chart event after each
            successful tool call.

        Raises:
            SessionBusyError: If another turn is still streaming.
            LLMRateLimitError: If the provider rate limits the request.
            LLMAPIError: If the provider returns an error.
        """
        if session.busy:
            raise SessionBusyError(f"Session {session.session_id} is already answering a message")

        session.busy = True
        try:
            session.add_message({"role": "user", "content": user_message})
            for _ in range(self._max_tool_iterations):
                content: List[str] = []
                tool_calls = _ToolCallBuffer()

                async for chunk in self._client.stream_with_tools(session.messages, tools=self._tools):
                    if not chunk.choices:
                        continue
                    delta = chunk.choices[0].delta
                    if delta.content:
                        content.append(delta.content)
                        yield text_event(delta.content)
                    for call_delta in delta.tool_calls or []:
                        tool_calls.add(call_delta)

                assistant: Message = {"role": "assistant", "content": "".join(content) or None}
                if tool_calls:
                    assistant["tool_calls"] = tool_calls.as_message_entries()
                session.add_message(assistant)

                if not tool_calls:
                    return

                for call in tool_calls.calls():
                    result = self._execute_tool_call(registry, call)
                    session.add_message({
                        "role": "tool",
                        "tool_call_id": call["id"],
                        "content": json.dumps(result),
                    })
                    for text in session.drain_output():
                        yield text_event(text)
                    if result.get("success"):
                        yield chart_event(session.chart_version)

            print(f"[Chat] Stopped after {self._max_tool_iterations} tool rounds without a final answer")
        finally:
            session.busy = False

    def _execute_tool_call(self, registry: ToolRegistry, call: Dict[str, str]) -> ToolResult:
        """Decode arguments and run one tool call.

        Args:
            registry: Tools bound to the session.
            call: Reassembled call with 'name' and raw JSON 'arguments'.

        Returns:
            Result dictionary to send back to the model.
        """
        name = call["name"]
        try:
            arguments = _decode_arguments(call["arguments"])
        except json.JSONDecodeError as e:
            print(f"[Chat] Could not decode arguments for {name}: {call['arguments']!r}")
            return {"success": False, "error": f"Arguments for {name} are not valid JSON: {e}"}

        print(f"[Chat] Calling function: {name}({arguments})")
        result = registry.execute(name, arguments)
        print(f"[Chat] Result: {result}")
        return result
