"""API routes for the chart chat.

This module defines all REST API endpoints for:
- Session lifecycle (create with greeting, delete)
- Streamed chat turns in which the model may call the chart tools
- The currently displayed chart
- The dataset column catalog
"""
from __future__ import annotations

import json
from typing import Any, AsyncIterator, Dict, List, Optional

import pandas as pd
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from dataset import get_column_registry, load_dataset
from models.session import PlotSession
from repositories.session import SessionRepository, get_session_repository
from services.llm.chat import ChatService, SessionBusyError
from services.llm.client import LLMAPIError, LLMRateLimitError
from services.llm.prompts import load_greeting, load_system_prompt
from services.plots import build_plot_registry, empty_figure

router = APIRouter()


class ChatMessageRequest(BaseModel):
    """Request body for chat messages."""
    content: str


class SessionResponse(BaseModel):
    """Response body for a newly created session."""
    session_id: str
    greeting: str


class ColumnInfo(BaseModel):
    name: str
    label: str
    kind: str
    value_labels: Dict[str, str] = {}


class PlotResponse(BaseModel):
    """The chart currently displayed in a session."""
    session_id: str
    version: int
    chart: Optional[Dict[str, Any]] = None
    figure: Dict[str, Any]


def get_repository() -> SessionRepository:
    return get_session_repository()


def get_dataset() -> pd.DataFrame:
    return load_dataset()


def get_chat_service() -> ChatService:
    """Build the chat service, failing with 503 if the model is not configured."""
    try:
        return ChatService()
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e))


def _get_session(repo: SessionRepository, session_id: str) -> PlotSession:
    try:
        return repo.get(session_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Session not found")


def _sse(payload: Any) -> str:
    if isinstance(payload, str):
        return f"data: {payload}\n\n"
    return f"data: {json.dumps(payload)}\n\n"


@router.get("/dataset/columns")
async def list_columns() -> List[ColumnInfo]:
    """List the columns the chart tools may reference."""
    return [
        ColumnInfo(
            name=column.name,
            label=column.label,
            kind=column.kind.value,
            value_labels={str(code): label for code, label in column.value_labels.items()},
        )
        for column in get_column_registry()
    ]


@router.post("/sessions")
async def create_session(repo: SessionRepository = Depends(get_repository)) -> SessionResponse:
    """Start a chat session.

    Returns:
        The session ID and the greeting to show as the first assistant message.
    """
    session = repo.create(load_system_prompt())
    greeting = load_greeting()
    print(f"[API] Created session {session.session_id}")
    return SessionResponse(session_id=session.session_id, greeting=greeting)


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str,
    repo: SessionRepository = Depends(get_repository),
) -> Dict[str, str]:
    """Discard a session and its chart.

    Raises:
        HTTPException: If the session is not found.
    """
    if not repo.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"message": f"Session {session_id} deleted"}


@router.post("/chat/{session_id}")
async def chat(
    session_id: str,
    message: ChatMessageRequest,
    repo: SessionRepository = Depends(get_repository),
    df: pd.DataFrame = Depends(get_dataset),
    service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """Send a message and stream the reply as Server-Sent Events.

    Each event is a JSON object: ``{"type": "text", "content": ...}`` for reply
    fragments and tool diagnostics, ``{"type": "chart", "version": ...}`` after
    the displayed chart changed. The stream ends with ``[DONE]``, or with
    ``[ERROR] <message>`` if the model could not be reached.

    Raises:
        HTTPException: 404 if the session is not found, 409 if a reply is
            already streaming, 400 for an empty message.
    """
    session = _get_session(repo, session_id)
    user_msg = message.content.strip()
    if not user_msg:
        raise HTTPException(status_code=400, detail="Message is empty")
    if session.busy:
        raise HTTPException(status_code=409, detail="A reply is already in progress")

    registry = build_plot_registry(session, df=df)

    async def generate() -> AsyncIterator[str]:
        try:
            async for event in service.stream(session, user_msg, registry):
                yield _sse(event)
            yield _sse("[DONE]")
        except SessionBusyError as e:
            yield _sse(f"[ERROR] {e}")
        except (LLMRateLimitError, LLMAPIError) as e:
            print(f"[API] Chat stream failed for {session_id}: {e}")
            yield _sse(f"[ERROR] {e}")
        except Exception as e:
            print(f"[API] Unexpected chat error for {session_id}: {e}")
            yield _sse(f"[ERROR] {e}")

    return StreamingResponse(
        generate(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/plot/{session_id}")
async def get_plot(
    session_id: str,
    repo: SessionRepository = Depends(get_repository),
) -> PlotResponse:
    """Get the chart currently displayed in a session.

    Before the first successful tool call this is an empty figure.
    """
    session = _get_session(repo, session_id)
    figure = session.figure if session.figure is not None else empty_figure()
    return PlotResponse(
        session_id=session.session_id,
        version=session.chart_version,
        chart=session.chart.to_dict() if session.chart else None,
        figure=json.loads(figure.to_json()),
    )
