"""Chart tool implementations exposed to the chat model.

Each tool validates its parameters, builds a chart specification, renders it
and replaces the chart displayed in the session. Failures are reported in the
visible conversation and then re-raised so the caller never mistakes a failed
call for a successful one.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import pandas as pd
import plotly.graph_objects as go

from dataset import ColumnRegistry, get_column_registry, load_dataset
from models.chart import ChartSpec
from models.session import PlotSession
from services.plots.builder import build_density_spec, build_scatter_spec
from services.plots.render import render_chart


class PlotTools:
    """The ``plot_scatter`` and ``plot_density`` tools for one session.

    Attributes:
        _session: Session whose displayed chart the tools replace.
        _df: Dataset the charts are drawn from.
        _registry: Columns a tool call may reference.
    """

    def __init__(
        self,
        session: PlotSession,
        df: Optional[pd.DataFrame] = None,
        registry: Optional[ColumnRegistry] = None,
    ):
        self._session = session
        self._df = df if df is not None else load_dataset()
        self._registry = registry or get_column_registry()

    def plot_scatter(
        self,
        x: Optional[str] = None,
        y: Optional[str] = None,
        title: Optional[str] = None,
        color: Optional[str] = None,
        shape: Optional[str] = None,
        smoothing_line: bool = False,
        smoothing_method: Optional[str] = None,
        facet: Optional[str] = None,
    ) -> ChartSpec:
        """Draw a scatter plot of ``y`` against ``x``.

        Optional color and shape groupings, a fitted trend line and facet
        panels are added when the matching parameters are given.

        Returns:
            The chart specification now on display.
        """
        return self._run(
            "plot_scatter",
            lambda: build_scatter_spec(
                self._registry,
                x=x,
                y=y,
                title=title,
                color=color,
                shape=shape,
                smoothing_line=smoothing_line,
                smoothing_method=smoothing_method,
                facet=facet,
                row_count=len(self._df),
            ),
        )

    def plot_density(
        self,
        x: Optional[str] = None,
        color: Optional[str] = None,
        facet: Optional[str] = None,
    ) -> ChartSpec:
        """Draw a kernel density curve of ``x``.

        Returns:
            The chart specification now on display.
        """
        return self._run(
            "plot_density",
            lambda: build_density_spec(self._registry, x=x, color=color, facet=facet),
        )

    def _run(self, name: str, build: Callable[[], ChartSpec]) -> ChartSpec:
        try:
            spec = build()
            figure: go.Figure = render_chart(spec, self._df)
        except Exception as e:
            print(f"[Tool] {name} failed: {e}")
            self._session.append_output(f"> Error: {e}\n\n")
            raise

        self._session.show_chart(spec, figure)
        print(f"[Tool] {name} rendered {spec.to_dict()}")
        return spec

    def as_functions(self) -> Dict[str, Callable[..., Any]]:
        """Map tool names to their callables for registration."""
        return {
            "plot_scatter": self.plot_scatter,
            "plot_density": self.plot_density,
        }
