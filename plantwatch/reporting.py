"""
Plant Reporting
===============

pandas views over a plant document: per-panel readings, the fault list
and headline totals.
"""

from typing import Any, Dict, Optional, Tuple

import pandas as pd

from .engine import PanelState, StringState, from_wire
from .plant.models import SIDES, PlantDetails

PANEL_COLUMNS = [
    "table_id", "serial_number", "side", "panel", "health", "state",
    "voltage", "current", "power",
]
FAULT_COLUMNS = [
    "table_id", "serial_number", "side", "series_state", "series_health",
    "origin_panel", "affected_panels",
]


def panel_frame(details: PlantDetails) -> pd.DataFrame:
    """One row per panel; `panel` is the 1-based position in its string."""
    rows = []
    for table in details.tables:
        for side in SIDES:
            string = from_wire(table.string(side))
            for n, p in enumerate(string.panels, start=1):
                rows.append({
                    "table_id": table.id,
                    "serial_number": table.serial_number,
                    "side": side,
                    "panel": n,
                    "health": p.health,
                    "state": p.state.value,
                    "voltage": p.voltage,
                    "current": p.current,
                    "power": p.power,
                })
    return pd.DataFrame(rows, columns=PANEL_COLUMNS)


def _fault_origin(string: StringState) -> Tuple[PanelState, float, Optional[int]]:
    """State, health and index of the panel responsible for a string's state."""
    origin = string.actual_faulty_index
    if origin is not None and origin < len(string.panels):
        return string.series_state, string.series_health, origin

    # Summary predates a panel deletion: fall back to the weakest stored panel
    known = [(p.health, i) for i, p in enumerate(string.panels) if p.health is not None]
    if not known:
        return string.series_state, string.series_health, None
    health, i = min(known)
    return string.panels[i].state, health, i


def fault_report(details: PlantDetails) -> pd.DataFrame:
    """
    Strings that are not GOOD, weakest first.

    origin_panel is the 1-based position of the panel responsible for the
    string's state; affected_panels counts it and everything wired after it.
    A stored origin that no longer exists (panels deleted since the last
    refresh) is replaced by the weakest remaining panel.
    """
    rows = []
    for table in details.tables:
        for side in SIDES:
            string = from_wire(table.string(side))
            if not string.panels or string.series_state is PanelState.GOOD:
                continue
            state, health, origin = _fault_origin(string)
            if state is PanelState.GOOD:
                continue
            rows.append({
                "table_id": table.id,
                "serial_number": table.serial_number,
                "side": side,
                "series_state": state.value,
                "series_health": health,
                "origin_panel": None if origin is None else origin + 1,
                "affected_panels": 0 if origin is None else len(string.panels) - origin,
            })
    df = pd.DataFrame(rows, columns=FAULT_COLUMNS)
    return df.sort_values("series_health", kind="stable").reset_index(drop=True)


def plant_summary(details: PlantDetails) -> Dict[str, Any]:
    panels = panel_frame(details)
    counts = panels["state"].value_counts()
    return {
        "company_id": details.company_id,
        "company_name": details.company_name,
        "tables": len(details.tables),
        "panels": int(len(panels)),
        "good": int(counts.get(PanelState.GOOD.value, 0)),
        "repairing": int(counts.get(PanelState.REPAIRING.value, 0)),
        "fault": int(counts.get(PanelState.FAULT.value, 0)),
        "faulty_strings": int(len(fault_report(details))),
        "output_kw": round(float(panels["power"].sum()) / 1000.0, 3),
        "plant_power_kw": details.plant_power_kw,
        "last_updated": details.last_updated,
    }
