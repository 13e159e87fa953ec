"""Tests for the tool registry."""
import pytest

from services.plots.registry import ToolRegistry


def test_execute_success(tool_registry, session):
    result = tool_registry.execute("plot_scatter", {"x": "mpg", "y": "hp", "color": "gear"})

    assert result["success"] is True
    assert "plot_scatter" in result["message"]
    assert session.chart.color == "gear"


def test_execute_unknown_tool(tool_registry):
    result = tool_registry.execute("plot_histogram", {"x": "mpg"})
    assert result == {"success": False, "error": "Unknown function: plot_histogram"}


def test_execute_unexpected_argument(tool_registry, session):
    result = tool_registry.execute("plot_density", {"x": "mpg", "bins": 10})

    assert result["success"] is False
    assert "Invalid arguments for plot_density" in result["error"]
    assert session.chart is None


def test_execute_failing_tool_reports_error(tool_registry, session):
    result = tool_registry.execute("plot_scatter", {"x": "nonexistent", "y": "hp"})

    assert result["success"] is False
    assert "nonexistent" in result["error"]
    assert session.chart is None
    assert len(session.pending_output) == 1


def test_execute_requires_object_arguments(tool_registry):
    result = tool_registry.execute("plot_density", ["mpg"])
    assert result["success"] is False


def test_register_rejects_duplicates():
    registry = ToolRegistry()
    registry.register("noop", lambda: None)
    with pytest.raises(ValueError, match="already registered"):
        registry.register("noop", lambda: None)


def test_registered_names(tool_registry):
    assert tool_registry.names == ["plot_scatter", "plot_density"]
