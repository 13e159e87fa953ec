"""Chart specification types.

A ChartSpec is the resolved, validated description of a single chart derived
from one tool call. It carries no data; the renderer combines it with the
dataset.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class Geometry(str, Enum):
    """Base geometry of a chart."""
    POINTS = "points"
    DENSITY = "density"


@dataclass(frozen=True)
class Smoothing:
    """Fitted trend overlay for a scatter chart.

    Attributes:
        method: Fitting method actually used ("lm" or "loess").
        automatic: True when the caller did not pick the method.
    """
    method: str
    automatic: bool = False


@dataclass(frozen=True)
class ChartSpec:
    geometry: Geometry
    x: str
    y: Optional[str] = None
    color: Optional[str] = None
    shape: Optional[str] = None
    smoothing: Optional[Smoothing] = None
    facet: Optional[str] = None
    title: Optional[str] = None

    def grouping_columns(self) -> List[str]:
        """Columns used in a grouping or faceting role, in a stable order."""
        columns: List[str] = []
        for column in (self.color, self.shape, self.facet):
            if column is not None and column not in columns:
                columns.append(column)
        return columns

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["geometry"] = self.geometry.value
        return payload
