"""Plotly figures for the plant dashboard."""

from typing import Optional

import pandas as pd
import plotly.graph_objects as go

from ..engine import PanelState, from_wire
from ..plant.models import SIDES, TableRecord

STATE_CODES = {PanelState.GOOD: 0, PanelState.REPAIRING: 1, PanelState.FAULT: 2}

# Discrete colour scale: one band per state code
STATE_COLORSCALE = [
    [0.0, PanelState.GOOD.color], [0.333, PanelState.GOOD.color],
    [0.333, PanelState.REPAIRING.color], [0.666, PanelState.REPAIRING.color],
    [0.666, PanelState.FAULT.color], [1.0, PanelState.FAULT.color],
]


def table_grid_figure(table: TableRecord) -> go.Figure:
    """
    Panel grid for one table: top string above bottom string.

    Cells are coloured by displayed state; hover shows health and readings.
    Rows of unequal length are padded with empty cells.
    """
    strings = {side: from_wire(table.string(side)) for side in SIDES}
    width = max((len(s) for s in strings.values()), default=0)

    z, text = [], []
    for side in SIDES:
        panels = strings[side].panels
        z.append([STATE_CODES[p.state] for p in panels] + [None] * (width - len(panels)))
        text.append([
            f"{side.title()} P{n}<br>{p.state.value} ({p.health if p.health is not None else '-'}%)"
            f"<br>{p.voltage} V / {p.current} A / {p.power} W"
            for n, p in enumerate(panels, start=1)
        ] + [""] * (width - len(panels)))

    fig = go.Figure(go.Heatmap(
        z=z,
        x=[f"P{n}" for n in range(1, width + 1)],
        y=[side.title() for side in SIDES],
        text=text,
        hoverinfo="text",
        zmin=0,
        zmax=2,
        colorscale=STATE_COLORSCALE,
        showscale=False,
        xgap=2,
        ygap=2,
    ))
    fig.update_layout(
        title=f"{table.serial_number}",
        height=220,
        margin=dict(l=40, r=20, t=40, b=20),
        yaxis=dict(autorange="reversed"),
    )
    return fig


def string_power_figure(panels: pd.DataFrame, table_id: Optional[str] = None) -> go.Figure:
    """Per-panel power by string, from reporting.panel_frame output."""
    if table_id is not None:
        panels = panels[panels["table_id"] == table_id]

    fig = go.Figure()
    for (serial, side), group in panels.groupby(["serial_number", "side"], sort=False):
        fig.add_trace(go.Bar(
            x=group["panel"],
            y=group["power"],
            name=f"{serial} {side}",
            marker_color=[PanelState(s).color for s in group["state"]],
        ))
    fig.update_layout(
        barmode="group",
        xaxis_title="Panel",
        yaxis_title="Power (W)",
        height=300,
    )
    return fig
