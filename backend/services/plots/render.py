"""Render chart specifications with plotly.

Grouping columns (color, shape, facet) are always converted with
``dataset.as_categorical`` before plotting so both chart kinds treat them
identically.
"""
from __future__ import annotations

import math
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from scipy.stats import gaussian_kde

from config import settings
from dataset import as_categorical
from errors import PlotError, RenderError
from models.chart import ChartSpec, Geometry
from services.plots.builder import SMOOTHING_METHODS

DENSITY_COLUMN = "density"

# LOWESS span matching the loess default of 0.75.
LOWESS_FRACTION = 0.75


def _group_column_name(column: str, spec: ChartSpec) -> str:
    """Name of the categorical copy of ``column`` in the plotting frame.

    A grouping column that is also plotted on an axis gets a separate copy so
    the axis keeps its numeric scale.
    """
    if column in (spec.x, spec.y):
        return f"{column} (group)"
    return column


def prepare_frame(spec: ChartSpec, df: pd.DataFrame) -> Tuple[pd.DataFrame, Dict[str, str], Dict[str, List[str]]]:
    """Copy the data and coerce every grouping column to categories.

    plotly receives plain string labels; their order is passed separately as
    category orders.

    Returns:
        Tuple of (plotting frame, column -> frame column name, category orders).
    """
    data = df.copy()
    names: Dict[str, str] = {}
    orders: Dict[str, List[str]] = {}
    for column in spec.grouping_columns():
        name = _group_column_name(column, spec)
        categories = as_categorical(df[column])
        data[name] = categories.astype(object)
        names[column] = name
        orders[name] = list(categories.cat.categories)
    return data, names, orders


def facet_wrap_columns(levels: int) -> int:
    """Number of panel columns for ``levels`` facets (a near-square grid)."""
    return max(1, math.ceil(math.sqrt(levels)))


def _mapped(names: Dict[str, str], column: Optional[str]) -> Optional[str]:
    return names[column] if column is not None else None


def _facet_kwargs(spec: ChartSpec, names: Dict[str, str], orders: Dict[str, List[str]]) -> dict:
    if spec.facet is None:
        return {}
    facet_name = names[spec.facet]
    return {
        "facet_col": facet_name,
        "facet_col_wrap": facet_wrap_columns(len(orders[facet_name])),
    }


def _render_scatter(spec: ChartSpec, df: pd.DataFrame) -> go.Figure:
    data, names, orders = prepare_frame(spec, df)

    kwargs = _facet_kwargs(spec, names, orders)
    if spec.smoothing is not None:
        trendline = SMOOTHING_METHODS[spec.smoothing.method]
        kwargs["trendline"] = trendline
        if trendline == "lowess":
            kwargs["trendline_options"] = {"frac": LOWESS_FRACTION}

    return px.scatter(
        data,
        x=spec.x,
        y=spec.y,
        color=_mapped(names, spec.color),
        symbol=_mapped(names, spec.shape),
        category_orders=orders,
        hover_name=data.index,
        title=spec.title,
        **kwargs,
    )


def _kde_bandwidth(values: np.ndarray) -> Optional[float]:
    """Silverman's rule-of-thumb bandwidth factor for ``gaussian_kde``.

    Returns None when the values are too degenerate for a density estimate.
    """
    if len(values) < 2:
        return None
    sd = float(np.std(values, ddof=1))
    if sd == 0:
        return None
    q75, q25 = np.percentile(values, [75, 25])
    spread = min(sd, (q75 - q25) / 1.34)
    if spread <= 0:
        spread = sd
    bandwidth = 0.9 * spread * len(values) ** -0.2
    return bandwidth / sd


def density_frame(spec: ChartSpec, df: pd.DataFrame) -> Tuple[pd.DataFrame, Dict[str, str], Dict[str, List[str]]]:
    """Evaluate one kernel density curve per color group and facet panel.

    Every curve is evaluated on the same grid spanning the full range of the
    column. Groups with fewer than two distinct values are skipped.
    """
    data, names, orders = prepare_frame(spec, df)
    values = data[spec.x].astype(float)
    grid = np.linspace(values.min(), values.max(), settings.plots.density_points)

    group_names = [names[c] for c in (spec.color, spec.facet) if c is not None]
    group_names = list(dict.fromkeys(group_names))

    if group_names:
        groups = data.groupby(group_names, observed=True)[spec.x]
    else:
        groups = [((), data[spec.x])]

    curves = []
    for key, group in groups:
        sample = group.dropna().to_numpy(dtype=float)
        factor = _kde_bandwidth(sample)
        if factor is None:
            print(f"[Tool] Skipping density group {key!r}: not enough distinct values")
            continue
        curve = pd.DataFrame({
            spec.x: grid,
            DENSITY_COLUMN: gaussian_kde(sample, bw_method=factor)(grid),
        })
        key = key if isinstance(key, tuple) else (key,)
        for name, level in zip(group_names, key):
            curve[name] = level
        curves.append(curve)

    if not curves:
        raise RenderError(f"Not enough distinct values in '{spec.x}' to estimate a density")

    return pd.concat(curves, ignore_index=True), names, orders


def _render_density(spec: ChartSpec, df: pd.DataFrame) -> go.Figure:
    curves, names, orders = density_frame(spec, df)
    return px.line(
        curves,
        x=spec.x,
        y=DENSITY_COLUMN,
        color=_mapped(names, spec.color),
        category_orders=orders,
        title=spec.title,
        **_facet_kwargs(spec, names, orders),
    )


def render_chart(spec: ChartSpec, df: pd.DataFrame) -> go.Figure:
    """Draw a chart specification against the dataset.

    Args:
        spec: Validated chart specification.
        df: Dataset to plot.

    Returns:
        The plotly Figure.

    Raises:
        RenderError: If the charting backend fails.
    """
    try:
        if spec.geometry is Geometry.POINTS:
            return _render_scatter(spec, df)
        return _render_density(spec, df)
    except PlotError:
        raise
    except Exception as e:
        raise RenderError(f"Could not render {spec.geometry.value} chart: {e}") from e


def empty_figure() -> go.Figure:
    """Placeholder shown before the first tool call."""
    return go.Figure()
