"""Tool definitions for LLM function calling.

This module declares the two chart tools the model may call. The model never
receives data; it only chooses which columns to map to which chart role.
Column names are listed in the system prompt.
"""
from __future__ import annotations

from typing import List

from protocols import ToolSchema

_COLOR_DESCRIPTION = (
    "The data column name (string) to map to the color aesthetic of the plot, "
    "use NULL if not needed in the plot"
)
_FACET_DESCRIPTION = "The data column (string) used to create facets of the plot. Defaults to NULL."

PLOT_TOOLS: List[ToolSchema] = [
    {
        "type": "function",
        "function": {
            "name": "plot_scatter",
            "description": "Creates a scatter plot of x versus y with optional color and shape aesthetics, optional smoothing line and optional facets.",
            "parameters": {
                "type": "object",
                "properties": {
                    "title": {
                        "type": "string",
                        "description": "A suitable title for the plot, e.g. 'Miles per gallon by horsepower'",
                    },
                    "x": {
                        "type": "string",
                        "description": "The data column name (string) to map to the x coordinate of the plot, e.g. 'mpg'",
                    },
                    "y": {
                        "type": "string",
                        "description": "The data column name (string) to map to the y coordinate of the plot, e.g. 'hp'",
                    },
                    "color": {"type": "string", "description": _COLOR_DESCRIPTION},
                    "shape": {
                        "type": "string",
                        "description": "The data column name (string) to map to the shape aesthetic of the plot, use NULL if not needed in the plot",
                    },
                    "smoothing_line": {
                        "type": "boolean",
                        "description": "Whether to add a smoothing line. Defaults to false.",
                    },
                    "smoothing_method": {
                        "type": "string",
                        "description": "The smoothing method to use if smoothing_line is true ('lm' or 'loess'). Omit for automatic selection.",
                    },
                    "facet": {"type": "string", "description": _FACET_DESCRIPTION},
                },
                "required": ["x", "y"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "plot_density",
            "description": "Creates a density plot for a given column in the data set",
            "parameters": {
                "type": "object",
                "properties": {
                    "x": {
                        "type": "string",
                        "description": "The data column name (string) to generate the density plot for, e.g. 'mpg'",
                    },
                    "color": {"type": "string", "description": _COLOR_DESCRIPTION},
                    "facet": {"type": "string", "description": _FACET_DESCRIPTION},
                },
                "required": ["x"],
            },
        },
    },
]


def tool_names() -> List[str]:
    return [tool["function"]["name"] for tool in PLOT_TOOLS]
