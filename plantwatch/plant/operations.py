"""
Plant Operations
================

Table and panel lifecycle on a plant document:
- Table creation (both strings simulated from scratch)
- Panel addition (new panels simulated alone, then appended)
- Panel deletion (array surgery, no simulation)
- Refresh (one simulation cycle for every non-empty string)

All functions mutate the PlantDetails in place; persisting it is left to
the caller (see PlantStore).
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import Optional

import numpy as np

from ..config import EngineConfig
from ..engine import simulate_string
from .errors import TableNotFoundError
from .models import SIDES, PlantDetails, Side, TableRecord

logger = logging.getLogger(__name__)

STRING_ARRAYS = ("voltage", "current", "power", "health", "states")

_PANEL_ID = re.compile(r"^(?:.*-)?(top|bottom)-(\d+)$")


def _stored_list(data, key: str) -> list:
    value = data.get(key)
    return list(value) if isinstance(value, list) else []


def create_plant(
    company_id: str,
    company_name: str,
    voltage_per_panel: float = 20.0,
    current_per_panel: float = 10.0,
    plant_power_kw: float = 1000.0,
) -> PlantDetails:
    return PlantDetails(
        company_id=company_id,
        company_name=company_name,
        voltage_per_panel=voltage_per_panel,
        current_per_panel=current_per_panel,
        power_per_panel=voltage_per_panel * current_per_panel,
        plant_power_kw=plant_power_kw,
    )


def find_table(details: PlantDetails, table_id: str) -> TableRecord:
    for table in details.tables:
        if table.id == table_id:
            return table
    raise TableNotFoundError(table_id)


def _check_side(side: str) -> Side:
    if side not in SIDES:
        raise ValueError(f"side must be 'top' or 'bottom', got {side!r}")
    return side


def add_table(
    details: PlantDetails,
    panels_top: int,
    panels_bottom: int,
    *,
    rng: Optional[np.random.Generator] = None,
    config: Optional[EngineConfig] = None,
) -> TableRecord:
    """Append a table whose two strings start healthy."""
    if panels_top < 1 or panels_bottom < 1:
        raise ValueError("panels_top and panels_bottom must both be >= 1")
    rng = rng if rng is not None else np.random.default_rng()

    v, i = details.voltage_per_panel, details.current_per_panel
    table = TableRecord(
        id=f"table-{uuid.uuid4().hex[:12]}",
        serial_number=f"TBL-{len(details.tables) + 1:04d}",
        panels_top=panels_top,
        panels_bottom=panels_bottom,
        top_panels=simulate_string(panels_top, v, i, rng=rng, config=config).to_wire(),
        bottom_panels=simulate_string(panels_bottom, v, i, rng=rng, config=config).to_wire(),
    )
    details.tables.append(table)
    details.touch()
    logger.info("Added %s to %s (%d top, %d bottom)", table.serial_number, details.company_id, panels_top, panels_bottom)
    return table


def add_panels(
    details: PlantDetails,
    table_id: str,
    side: str,
    count: int,
    *,
    rng: Optional[np.random.Generator] = None,
    config: Optional[EngineConfig] = None,
) -> TableRecord:
    """
    Append freshly simulated panels to the end of one string.

    Only the new panels are simulated; existing readings and the string-level
    summary stay as they are until the next refresh.
    """
    side = _check_side(side)
    if count < 1:
        raise ValueError("count must be >= 1")
    table = find_table(details, table_id)

    added = simulate_string(
        count, details.voltage_per_panel, details.current_per_panel, rng=rng, config=config
    ).to_wire()
    data = dict(table.string(side))
    for key in STRING_ARRAYS:
        data[key] = _stored_list(data, key) + added[key]
    for key in ("seriesState", "seriesHealth", "actualFaultyIndex"):
        data.setdefault(key, added[key])

    table.set_string(side, data)
    table.set_panel_count(side, table.panel_count(side) + count)
    details.touch()
    logger.info("Added %d panel(s) to %s %s", count, table.serial_number, side)
    return table


def parse_panel_id(panel_id: str) -> tuple[Side, int]:
    """Split '<side>-<n>' (n is 1-based) into side and 0-based index."""
    m = _PANEL_ID.match(panel_id)
    if not m:
        raise ValueError(f"Invalid panel id: {panel_id!r}")
    number = int(m.group(2))
    if number < 1:
        raise ValueError(f"Invalid panel id: {panel_id!r}")
    return m.group(1), number - 1


def delete_panel(details: PlantDetails, table_id: str, panel_id: str) -> TableRecord:
    """
    Remove one panel from a string by splicing every stored array.

    The string summary (seriesHealth, actualFaultyIndex, ...) is left for the
    next refresh to recompute.
    """
    table = find_table(details, table_id)
    side, index = parse_panel_id(panel_id)

    data = dict(table.string(side))
    voltage = _stored_list(data, "voltage")
    if index >= len(voltage):
        raise ValueError(f"Invalid panel index for {side} string: {index + 1}")

    for key in STRING_ARRAYS:
        values = data.get(key)
        if isinstance(values, list) and index < len(values):
            data[key] = values[:index] + values[index + 1:]

    table.set_string(side, data)
    table.set_panel_count(side, max(0, table.panel_count(side) - 1))
    details.touch()
    logger.info("Deleted panel %s from %s", panel_id, table.serial_number)
    return table


def refresh(
    details: PlantDetails,
    *,
    rng: Optional[np.random.Generator] = None,
    config: Optional[EngineConfig] = None,
) -> PlantDetails:
    """Advance every non-empty string of every table by one cycle."""
    rng = rng if rng is not None else np.random.default_rng()
    v, i = details.voltage_per_panel, details.current_per_panel

    for table in details.tables:
        for side in SIDES:
            count = table.panel_count(side)
            if count <= 0:
                continue
            prior = table.string(side)
            state = simulate_string(count, v, i, prior, rng=rng, config=config)
            stored = len(_stored_list(prior, "health"))
            if stored not in (0, count):
                logger.warning(
                    "%s %s: stored history has %d panels, expected %d; missing slots defaulted",
                    table.serial_number, side, stored, count,
                )
            table.set_string(side, state.to_wire())
            logger.debug(
                "%s %s: %s at %.1f%% (origin %s)",
                table.serial_number, side, state.series_state.value,
                state.series_health, state.actual_faulty_index,
            )

    details.touch()
    return details
