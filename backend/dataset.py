"""The fixed dataset the chart tools operate on.

The data is the classic ``mtcars`` table (1974 Motor Trend road tests, 32 cars,
11 numeric columns). The model never sees the rows; it only sees the column
catalog defined here, which is also the single source of truth for validating
column names in tool calls.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import pandas as pd

from config import settings
from errors import UnknownColumnError


class ColumnKind(str, Enum):
    """How the values of a column should be interpreted."""
    CONTINUOUS = "continuous"
    DISCRETE = "discrete"
    BINARY = "binary"


@dataclass(frozen=True)
class ColumnDescriptor:
    """Catalog entry for one dataset column."""
    name: str
    label: str
    kind: ColumnKind
    value_labels: Mapping[int, str] = field(default_factory=dict)

    def describe(self) -> str:
        """One-line, human readable description used in the column catalog."""
        text = f"{self.name}: {self.label} ({self.kind.value})"
        if self.value_labels:
            codes = ", ".join(f"{code} = {label}" for code, label in self.value_labels.items())
            text += f" [{codes}]"
        return text


MTCARS_COLUMNS: Tuple[ColumnDescriptor, ...] = (
    ColumnDescriptor("mpg", "Miles/(US) gallon", ColumnKind.CONTINUOUS),
    ColumnDescriptor("cyl", "Number of cylinders", ColumnKind.DISCRETE),
    ColumnDescriptor("disp", "Displacement (cu.in.)", ColumnKind.CONTINUOUS),
    ColumnDescriptor("hp", "Gross horsepower", ColumnKind.CONTINUOUS),
    ColumnDescriptor("drat", "Rear axle ratio", ColumnKind.CONTINUOUS),
    ColumnDescriptor("wt", "Weight (1000 lbs)", ColumnKind.CONTINUOUS),
    ColumnDescriptor("qsec", "1/4 mile time (seconds)", ColumnKind.CONTINUOUS),
    ColumnDescriptor("vs", "Engine shape", ColumnKind.BINARY, {0: "V-shaped", 1: "straight"}),
    ColumnDescriptor("am", "Transmission", ColumnKind.BINARY, {0: "automatic", 1: "manual"}),
    ColumnDescriptor("gear", "Number of forward gears", ColumnKind.DISCRETE),
    ColumnDescriptor("carb", "Number of carburetors", ColumnKind.DISCRETE),
)


class ColumnRegistry:
    """Read-only lookup of the columns a tool call may reference.

    Attributes:
        _columns: Descriptors keyed by column name, in catalog order.
    """

    def __init__(self, columns: Tuple[ColumnDescriptor, ...] = MTCARS_COLUMNS):
        self._columns: Dict[str, ColumnDescriptor] = {c.name: c for c in columns}

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __iter__(self) -> Iterator[ColumnDescriptor]:
        return iter(self._columns.values())

    def __len__(self) -> int:
        return len(self._columns)

    @property
    def names(self) -> List[str]:
        return list(self._columns)

    def resolve(self, name: str) -> ColumnDescriptor:
        """Look up a column by exact name.

        Args:
            name: Column name as given in the tool call.

        Returns:
            The matching ColumnDescriptor.

        Raises:
            UnknownColumnError: If the dataset has no such column.
        """
        try:
            return self._columns[name]
        except (KeyError, TypeError):
            raise UnknownColumnError(str(name), self.names) from None

    def resolve_optional(self, name: Optional[str]) -> Optional[ColumnDescriptor]:
        """Like resolve(), but passes ``None`` through."""
        if name is None:
            return None
        return self.resolve(name)

    def catalog(self) -> str:
        """Render the column catalog as a markdown bullet list."""
        return "\n".join(f"- {column.describe()}" for column in self)


def _format_level(value: object) -> str:
    """Render a category value without a spurious decimal part (4.0 -> "4")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def as_categorical(series: pd.Series) -> pd.Series:
    """Convert a column into discrete, ordered categories.

    Applied to every column used for color, shape or facet grouping, so a
    0/1-coded column always yields two groups and never a continuous scale.
    Categories are ordered by their underlying value.

    Args:
        series: Column values, usually numeric.

    Returns:
        Series with a categorical dtype of string labels.
    """
    levels = sorted(series.dropna().unique())
    labels = [_format_level(v) for v in levels]
    mapping = dict(zip(levels, labels))
    return pd.Series(
        pd.Categorical(series.map(mapping), categories=labels, ordered=True),
        index=series.index,
        name=series.name,
    )


@lru_cache(maxsize=4)
def _read_dataset(path: Path) -> pd.DataFrame:
    return pd.read_csv(path, index_col="model")


def load_dataset(path: Optional[Path] = None) -> pd.DataFrame:
    """Load the dataset as a fresh DataFrame.

    The file is parsed once; each call returns a copy so callers may add
    categorical columns without touching the cached frame.
    """
    return _read_dataset(Path(path or settings.plots.dataset_path)).copy()


@lru_cache(maxsize=1)
def get_column_registry() -> ColumnRegistry:
    """Get the singleton column registry."""
    return ColumnRegistry()
