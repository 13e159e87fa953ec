"""Tests for rendering chart specifications with plotly."""
import pandas as pd
import pytest

from errors import RenderError
from models.chart import ChartSpec, Geometry, Smoothing
from services.plots.builder import build_density_spec, build_scatter_spec
from services.plots.render import density_frame, facet_wrap_columns, render_chart


def _density_spec(column):
    return ChartSpec(Geometry.DENSITY, x=column)


def _marker_traces(fig):
    return [t for t in fig.data if t.mode == "markers"]


def _line_traces(fig):
    return [t for t in fig.data if t.mode == "lines"]


def _facet_labels(fig, column):
    return sorted(a.text for a in fig.layout.annotations if a.text.startswith(f"{column}="))


def test_plain_scatter_is_single_point_trace(mtcars):
    fig = render_chart(ChartSpec(Geometry.POINTS, x="wt", y="qsec"), mtcars)
    assert len(fig.data) == 1
    assert fig.data[0].mode == "markers"
    assert len(fig.data[0].x) == 32
    assert len(fig.layout.annotations) == 0


def test_scatter_mpg_hp_colored_by_gear(columns, mtcars):
    spec = build_scatter_spec(columns, x="mpg", y="hp", color="gear", row_count=len(mtcars))
    fig = render_chart(spec, mtcars)

    markers = _marker_traces(fig)
    assert [t.name for t in markers] == ["3", "4", "5"]
    assert sorted(len(t.x) for t in markers) == [5, 12, 15]
    assert _line_traces(fig) == []
    assert _facet_labels(fig, "am") == []


def test_scatter_with_linear_trend_and_facets(columns, mtcars):
    spec = build_scatter_spec(
        columns,
        x="cyl",
        y="mpg",
        color="gear",
        smoothing_line=True,
        smoothing_method="lm",
        facet="am",
        row_count=len(mtcars),
    )
    fig = render_chart(spec, mtcars)

    assert _facet_labels(fig, "am") == ["am=0", "am=1"]
    assert {t.name for t in _marker_traces(fig)} == {"3", "4", "5"}
    # One fitted line per (gear, am) combination present in the data
    assert len(_line_traces(fig)) == 4


def test_scatter_automatic_smoothing_draws_trend(columns, mtcars):
    spec = build_scatter_spec(columns, x="hp", y="mpg", smoothing_line=True, row_count=len(mtcars))
    assert spec.smoothing == Smoothing(method="loess", automatic=True)
    fig = render_chart(spec, mtcars)
    assert len(_marker_traces(fig)) == 1
    assert len(_line_traces(fig)) == 1


def test_binary_color_is_two_groups_not_a_gradient(mtcars):
    fig = render_chart(ChartSpec(Geometry.POINTS, x="mpg", y="hp", color="am"), mtcars)
    assert [t.name for t in fig.data] == ["0", "1"]


def test_shape_maps_to_distinct_symbols(mtcars):
    fig = render_chart(ChartSpec(Geometry.POINTS, x="mpg", y="hp", shape="vs"), mtcars)
    symbols = {t.marker.symbol for t in fig.data}
    assert len(fig.data) == 2
    assert len(symbols) == 2


def test_grouping_on_axis_column_keeps_numeric_axis(mtcars):
    fig = render_chart(ChartSpec(Geometry.POINTS, x="cyl", y="mpg", color="cyl"), mtcars)
    assert [t.name for t in fig.data] == ["4", "6", "8"]
    assert all(pd.api.types.is_numeric_dtype(pd.Series(list(t.x))) for t in fig.data)


def test_plain_density_is_single_curve(mtcars):
    fig = render_chart(_density_spec("mpg"), mtcars)
    assert len(fig.data) == 1
    assert fig.data[0].mode == "lines"
    assert min(fig.data[0].y) >= 0
    assert len(fig.layout.annotations) == 0


def test_density_faceted_by_gear(columns, mtcars):
    spec = build_density_spec(columns, x="mpg", facet="gear")
    fig = render_chart(spec, mtcars)
    assert _facet_labels(fig, "gear") == ["gear=3", "gear=4", "gear=5"]
    assert len(fig.data) == 3


def test_density_colored_by_binary_column(columns, mtcars):
    fig = render_chart(build_density_spec(columns, x="mpg", color="am"), mtcars)
    assert [t.name for t in fig.data] == ["0", "1"]


def test_density_skips_groups_with_a_single_row(columns, mtcars):
    # carb = 6 and carb = 8 each have a single car
    fig = render_chart(build_density_spec(columns, x="mpg", color="carb"), mtcars)
    assert [t.name for t in fig.data] == ["1", "2", "3", "4"]


def test_density_curves_share_the_full_range(columns, mtcars):
    curves, _, _ = density_frame(build_density_spec(columns, x="mpg", color="am"), mtcars)
    for _, curve in curves.groupby("am", observed=True):
        assert curve["mpg"].min() == pytest.approx(10.4)
        assert curve["mpg"].max() == pytest.approx(33.9)


def test_density_of_constant_column_fails():
    df = pd.DataFrame({"mpg": [21.0, 21.0, 21.0]})
    with pytest.raises(RenderError, match="Not enough distinct values"):
        render_chart(_density_spec("mpg"), df)


def test_backend_failures_become_render_errors(mtcars):
    spec = ChartSpec(Geometry.POINTS, x="mpg", y="not_in_frame")
    with pytest.raises(RenderError, match="Could not render points chart"):
        render_chart(spec, mtcars)


@pytest.mark.parametrize("levels,expected", [(1, 1), (2, 2), (3, 2), (4, 2), (5, 3), (6, 3)])
def test_facet_wrap_columns(levels, expected):
    assert facet_wrap_columns(levels) == expected