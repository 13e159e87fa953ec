from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import plotly.graph_objects as go
from pydantic import BaseModel, ConfigDict, Field

from models.chart import ChartSpec


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PlotSession(BaseModel):
    """State of one chat session.

    Holds the conversation sent to the model, the single chart currently on
    display and text waiting to be appended to the visible conversation.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    session_id: str
    created_at: datetime = Field(default_factory=_now)
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    chart: Optional[ChartSpec] = None
    figure: Optional[go.Figure] = None
    chart_version: int = 0
    pending_output: List[str] = Field(default_factory=list)
    busy: bool = False

    def show_chart(self, spec: ChartSpec, figure: go.Figure) -> None:
        """Replace the displayed chart with a freshly rendered one."""
        self.chart = spec
        self.figure = figure
        self.chart_version += 1

    def append_output(self, text: str) -> None:
        self.pending_output.append(text)

    def drain_output(self) -> List[str]:
        """Return and clear the text queued for the conversation."""
        output, self.pending_output = self.pending_output, []
        return output

    def add_message(self, message: Dict[str, Any]) -> None:
        self.messages.append(message)
