"""Chart tool services.

This package turns validated tool calls into charts:
- builder: parameter validation and spec derivation
- render: plotly rendering
- tools: the plot_scatter / plot_density tool callbacks
- registry: name-based dispatch of tool calls
"""
from services.plots.builder import build_density_spec, build_scatter_spec
from services.plots.registry import ToolRegistry, build_plot_registry
from services.plots.render import empty_figure, render_chart
from services.plots.tools import PlotTools

__all__ = [
    "build_density_spec",
    "build_scatter_spec",
    "ToolRegistry",
    "build_plot_registry",
    "empty_figure",
    "render_chart",
    "PlotTools",
]
