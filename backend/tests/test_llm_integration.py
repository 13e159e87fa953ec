"""Integration tests against a real chat model.

These tests verify that the model, given only the system prompt and the tool
schemas, picks the chart tools and sensible columns on its own.

Requires: OPENAI_API_KEY environment variable set.
"""
import os

import pytest

from models.chart import Geometry
from repositories.session import SessionRepository
from services.llm.chat import ChatService
from services.llm.prompts import load_system_prompt
from services.plots.registry import build_plot_registry


# Skip all tests if no API key
pytestmark = pytest.mark.skipif(
    not os.environ.get("OPENAI_API_KEY"),
    reason="OPENAI_API_KEY not set - skipping LLM integration tests"
)


async def run_turn(message: str):
    session = SessionRepository().create(load_system_prompt())
    registry = build_plot_registry(session)
    events = [event async for event in ChatService().stream(session, message, registry)]
    return session, events


@pytest.mark.asyncio
async def test_model_draws_requested_scatter_plot():
    session, events = await run_turn(
        "Show me a scatter plot of miles per gallon (x) against horsepower (y), colored by number of gears."
    )

    assert session.chart is not None
    assert session.chart.geometry is Geometry.POINTS
    assert (session.chart.x, session.chart.y) == ("mpg", "hp")
    assert session.chart.color == "gear"
    assert any(event["type"] == "text" for event in events)


@pytest.mark.asyncio
async def test_model_draws_faceted_density():
    session, _ = await run_turn("Plot the distribution of mpg, with a separate panel for each number of gears.")

    assert session.chart is not None
    assert session.chart.geometry is Geometry.DENSITY
    assert session.chart.x == "mpg"
    assert session.chart.facet == "gear"
