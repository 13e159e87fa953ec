"""Pytest configuration and fixtures.

This module provides fixtures for:
- The mtcars dataset and column registry
- Sessions with chart tools bound to them
- A scripted fake LLM client producing OpenAI-shaped stream chunks
- A FastAPI test client wired to the fake client
"""
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from api import routes
from dataset import ColumnRegistry, load_dataset
from main import app
from models.session import PlotSession
from repositories.session import SessionRepository
from services.llm.chat import ChatService
from services.plots.registry import build_plot_registry
from services.plots.tools import PlotTools


# =============================================================================
# Stream chunk helpers
# =============================================================================

def text_chunk(content: str) -> SimpleNamespace:
    """A streamed chunk carrying a text fragment."""
    delta = SimpleNamespace(content=content, tool_calls=None)
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta)])


def tool_call_chunk(
    index: int = 0,
    call_id: Optional[str] = None,
    name: Optional[str] = None,
    arguments: Optional[str] = None,
) -> SimpleNamespace:
    """A streamed chunk carrying part of a tool call."""
    call = SimpleNamespace(
        index=index,
        id=call_id,
        function=SimpleNamespace(name=name, arguments=arguments),
    )
    delta = SimpleNamespace(content=None, tool_calls=[call])
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta)])


def tool_call_round(name: str, arguments: Dict[str, Any], call_id: str = "call_1") -> List[SimpleNamespace]:
    """A full model response that is a single tool call, arguments split in two."""
    raw = json.dumps(arguments)
    middle = len(raw) // 2
    return [
        tool_call_chunk(call_id=call_id, name=name, arguments=raw[:middle]),
        tool_call_chunk(arguments=raw[middle:]),
    ]


class FakeLLMClient:
    """LLM client replaying scripted responses, one per request.

    Attributes:
        rounds: Remaining scripted responses (lists of chunks).
        requests: Snapshot of the messages sent with each request.
    """

    def __init__(self, rounds: List[List[Any]], error: Optional[Exception] = None, repeat_last: bool = False):
        self.rounds = list(rounds)
        self.requests: List[List[Dict[str, Any]]] = []
        self._error = error
        self._repeat_last = repeat_last

    async def stream_with_tools(self, messages, tools, model=None, temperature=None, max_tokens=None):
        self.requests.append(list(messages))
        if self._error is not None:
            raise self._error
        if self._repeat_last and len(self.rounds) == 1:
            chunks = self.rounds[0]
        else:
            chunks = self.rounds.pop(0)
        for chunk in chunks:
            yield chunk


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def mtcars():
    """The bundled mtcars dataset."""
    return load_dataset()


@pytest.fixture
def columns() -> ColumnRegistry:
    return ColumnRegistry()


@pytest.fixture
def session() -> PlotSession:
    session = PlotSession(session_id="test-session")
    session.add_message({"role": "system", "content": "You draw charts."})
    return session


@pytest.fixture
def plot_tools(session, mtcars) -> PlotTools:
    return PlotTools(session, df=mtcars)


@pytest.fixture
def tool_registry(session, mtcars):
    return build_plot_registry(session, df=mtcars)


@pytest.fixture
def repository() -> SessionRepository:
    return SessionRepository()


@pytest.fixture
def fake_llm():
    """Fake LLM client; tests assign ``fake_llm.rounds`` before chatting."""
    return FakeLLMClient(rounds=[])


@pytest.fixture
def client(repository, fake_llm):
    """Provide a FastAPI test client backed by the fake LLM client."""
    app.dependency_overrides[routes.get_repository] = lambda: repository
    app.dependency_overrides[routes.get_chat_service] = lambda: ChatService(client=fake_llm)
    yield TestClient(app)
    app.dependency_overrides.clear()


def parse_sse(body: str) -> List[Any]:
    """Decode a Server-Sent Events body into payloads (JSON or raw strings)."""
    events = []
    for block in body.split("\n\n"):
        if not block.startswith("data: "):
            continue
        data = block[len("data: "):]
        try:
            events.append(json.loads(data))
        except json.JSONDecodeError:
            events.append(data)
    return events
