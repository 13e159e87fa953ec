"""Derive chart specifications from tool call parameters.

The functions here do all of the parameter validation: every column name is
resolved against the column registry and the smoothing method is checked
before anything is rendered.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from config import settings
from dataset import ColumnRegistry
from errors import InvalidArgumentError, InvalidSmoothingMethodError
from models.chart import ChartSpec, Geometry, Smoothing

# Smoothing methods a caller may request, mapped to the trendline the
# renderer draws for them.
SMOOTHING_METHODS: Dict[str, str] = {
    "lm": "ols",
    "loess": "lowess",
}

# Values models send when they mean "not set".
_ABSENT_MARKERS = {"", "null", "none", "na", "nil"}


def _optional_text(name: str, value: Any) -> Optional[str]:
    """Normalize an optional string argument, mapping NULL-like values to None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(f"Parameter '{name}' must be a string, got {type(value).__name__}")
    value = value.strip()
    if value.lower() in _ABSENT_MARKERS:
        return None
    return value


def _required_text(name: str, value: Any) -> str:
    text = _optional_text(name, value)
    if text is None:
        raise InvalidArgumentError(f"Parameter '{name}' is required")
    return text


def _flag(name: str, value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise InvalidArgumentError(f"Parameter '{name}' must be true or false, got {value!r}")


def resolve_smoothing(
    smoothing_line: bool,
    smoothing_method: Optional[str],
    row_count: int,
) -> Optional[Smoothing]:
    """Decide which trend line, if any, to overlay.

    An absent method (or "auto") selects loess for small data and a linear
    model once ``row_count`` reaches ``settings.plots.auto_smoothing_threshold``.

    Raises:
        InvalidSmoothingMethodError: If an explicit method is not supported.
    """
    if not smoothing_line:
        return None

    if smoothing_method is None or smoothing_method.lower() == "auto":
        method = "loess" if row_count < settings.plots.auto_smoothing_threshold else "lm"
        return Smoothing(method=method, automatic=True)

    method = smoothing_method.lower()
    if method not in SMOOTHING_METHODS:
        raise InvalidSmoothingMethodError(smoothing_method, SMOOTHING_METHODS)
    return Smoothing(method=method)


def build_scatter_spec(
    registry: ColumnRegistry,
    x: Any,
    y: Any,
    title: Any = None,
    color: Any = None,
    shape: Any = None,
    smoothing_line: Any = False,
    smoothing_method: Any = None,
    facet: Any = None,
    row_count: int = 0,
) -> ChartSpec:
    """Validate scatter parameters and build the chart specification.

    Args:
        registry: Columns the parameters may reference.
        x: Column mapped to the x coordinate.
        y: Column mapped to the y coordinate.
        title: Optional chart title.
        color: Optional column mapped to point color.
        shape: Optional column mapped to point shape.
        smoothing_line: Whether to overlay a fitted trend.
        smoothing_method: "lm", "loess", or None for automatic selection.
        facet: Optional column to split the chart into panels.
        row_count: Number of rows, used for automatic smoothing selection.

    Returns:
        A points ChartSpec.

    Raises:
        PlotError: If any parameter is invalid.
    """
    x = registry.resolve(_required_text("x", x)).name
    y = registry.resolve(_required_text("y", y)).name
    color_col = registry.resolve_optional(_optional_text("color", color))
    shape_col = registry.resolve_optional(_optional_text("shape", shape))
    facet_col = registry.resolve_optional(_optional_text("facet", facet))

    smoothing = resolve_smoothing(
        _flag("smoothing_line", smoothing_line),
        _optional_text("smoothing_method", smoothing_method),
        row_count,
    )

    return ChartSpec(
        geometry=Geometry.POINTS,
        x=x,
        y=y,
        color=color_col.name if color_col else None,
        shape=shape_col.name if shape_col else None,
        smoothing=smoothing,
        facet=facet_col.name if facet_col else None,
        title=_optional_text("title", title),
    )


def build_density_spec(
    registry: ColumnRegistry,
    x: Any,
    color: Any = None,
    facet: Any = None,
) -> ChartSpec:
    """Validate density parameters and build the chart specification."""
    x = registry.resolve(_required_text("x", x)).name
    color_col = registry.resolve_optional(_optional_text("color", color))
    facet_col = registry.resolve_optional(_optional_text("facet", facet))

    return ChartSpec(
        geometry=Geometry.DENSITY,
        x=x,
        color=color_col.name if color_col else None,
        facet=facet_col.name if facet_col else None,
    )
