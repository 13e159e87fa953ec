"""LLM services package.

This package provides modular LLM functionality:
- client: LLM API client abstraction
- tools: Tool schemas offered to the model
- prompts: System prompt and greeting documents
- chat: Streamed, tool-calling chat turns
"""
from services.llm.client import OpenAIChatClient, get_llm_client
from services.llm.chat import ChatService

__all__ = [
    "OpenAIChatClient",
    "get_llm_client",
    "ChatService",
]
