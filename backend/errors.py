"""Exceptions raised while turning a tool call into a chart.

Every error a plotting tool can raise derives from ``PlotError`` so the tool
boundary can report it uniformly.
"""
from __future__ import annotations

from typing import Iterable


class PlotError(Exception):
    """Base class for chart tool failures."""
    pass


class UnknownColumnError(PlotError):
    """Raised when a parameter names a column that is not in the dataset."""

    def __init__(self, column: str, available: Iterable[str] = ()):
        self.column = column
        self.available = list(available)
        message = f"Column '{column}' not found"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class InvalidArgumentError(PlotError):
    """Raised when a tool argument has the wrong type or is missing."""
    pass


class InvalidSmoothingMethodError(PlotError):
    """Raised when the requested smoothing method is not supported."""

    def __init__(self, method: str, supported: Iterable[str] = ()):
        self.method = method
        self.supported = list(supported)
        super().__init__(
            f"Unsupported smoothing method '{method}'. Use one of: {', '.join(self.supported)}"
        )


class RenderError(PlotError):
    """Raised when the charting backend fails to draw a chart."""
    pass
