"""Tool registry.

Routes a tool call from the chat model to the host function registered under
its name and turns the outcome into a result message for the model.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from models.session import PlotSession
from protocols import ToolResult
from services.plots.tools import PlotTools


class ToolRegistry:
    """Registry of host functions the chat model may call.

    Attributes:
        _tools: Callables keyed by tool name.
    """

    def __init__(self):
        self._tools: Dict[str, Callable[..., Any]] = {}

    def register(self, name: str, function: Callable[..., Any]) -> None:
        """Register a tool callable under ``name``.

        Raises:
            ValueError: If the name is already taken.
        """
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")
        self._tools[name] = function

    def register_all(self, functions: Dict[str, Callable[..., Any]]) -> None:
        for name, function in functions.items():
            self.register(name, function)

    def execute(self, name: str, arguments: Dict[str, Any]) -> ToolResult:
        """Run a tool and describe the outcome for the model.

        Tools are effects-only; any exception they raise marks the call as
        failed.

        Args:
            name: Tool name from the model's function call.
            arguments: Decoded JSON arguments.

        Returns:
            Dictionary with 'success' and either 'message' or 'error'.
        """
        function = self._tools.get(name)
        if function is None:
            return {"success": False, "error": f"Unknown function: {name}"}
        if not isinstance(arguments, dict):
            return {"success": False, "error": f"Arguments for {name} must be a JSON object"}

        try:
            function(**arguments)
        except TypeError as e:
            # Missing or unexpected parameters
            return {"success": False, "error": f"Invalid arguments for {name}: {e}"}
        except Exception as e:
            return {"success": False, "error": str(e)}

        return {"success": True, "message": f"{name} completed, the chart is now displayed to the user."}

    @property
    def names(self) -> List[str]:
        return list(self._tools)


def build_plot_registry(session: PlotSession, df: Optional[pd.DataFrame] = None) -> ToolRegistry:
    """Create a registry holding the chart tools bound to ``session``."""
    registry = ToolRegistry()
    registry.register_all(PlotTools(session, df=df).as_functions())
    return registry
