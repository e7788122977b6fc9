"""
String Models
=============

Panel and series-string records used by the simulation engine, plus the
conversion to and from the parallel-array JSON shape the plant documents
store.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class PanelState(Enum):
    """Panel condition classes."""
    GOOD = "good"
    REPAIRING = "repairing"
    FAULT = "fault"

    @property
    def color(self) -> str:
        return _STATE_COLORS[self]

    @classmethod
    def parse(cls, value: Any) -> Optional["PanelState"]:
        """Return the state for a stored value, or None if it is not one."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


_STATE_COLORS = {
    PanelState.GOOD: "blue",
    PanelState.REPAIRING: "orange",
    PanelState.FAULT: "red",
}


def round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def classify(health: float, good_threshold: float = 80.0, fault_threshold: float = 20.0) -> PanelState:
    if health < fault_threshold:
        return PanelState.FAULT
    if health < good_threshold:
        return PanelState.REPAIRING
    return PanelState.GOOD


@dataclass
class Panel:
    """
    One panel of a series string.

    Attributes:
        health: Condition proxy (0-100 %), None for records stored without it
        state: Displayed condition class
        voltage: Output voltage (V)
        current: Output current (A), shared along the string
        power: Output power (W)
    """
    health: Optional[float]
    state: PanelState = PanelState.GOOD
    voltage: float = 0.0
    current: float = 0.0
    power: float = 0.0


@dataclass
class StringState:
    """
    Snapshot of a series-connected string of panels in wiring order.

    Attributes:
        panels: Panels in wiring order
        series_state: State of the weakest panel
        series_health: Minimum panel health
        actual_faulty_index: Position of the fault origin, None when healthy
    """
    panels: List[Panel] = field(default_factory=list)
    series_state: PanelState = PanelState.GOOD
    series_health: float = 100.0
    actual_faulty_index: Optional[int] = None

    def __len__(self) -> int:
        return len(self.panels)

    @property
    def health(self) -> List[Optional[float]]:
        return [p.health for p in self.panels]

    @property
    def states(self) -> List[PanelState]:
        return [p.state for p in self.panels]

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the stored parallel-array shape."""
        return {
            "voltage": [p.voltage for p in self.panels],
            "current": [p.current for p in self.panels],
            "power": [p.power for p in self.panels],
            "health": [p.health for p in self.panels],
            "states": [p.state.value for p in self.panels],
            "seriesState": self.series_state.value,
            "seriesHealth": self.series_health,
            "actualFaultyIndex": self.actual_faulty_index,
        }


@dataclass(frozen=True)
class PriorReadings:
    """Per-index health/state read back from a stored string; None marks a missing entry."""
    health: List[Optional[float]]
    states: List[Optional[PanelState]]

    def health_at(self, i: int) -> Optional[float]:
        return self.health[i] if i < len(self.health) else None

    def state_at(self, i: int) -> Optional[PanelState]:
        return self.states[i] if i < len(self.states) else None


def _as_health(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _as_reading(value: Any) -> float:
    reading = _as_health(value)
    return 0.0 if reading is None else reading


def read_prior(prior: Any) -> Optional[PriorReadings]:
    """
    Extract prior health/state readings from a StringState or a stored dict.

    Returns None when the prior carries neither a health nor a states list,
    which callers treat as a string with no history. Individual malformed
    entries become None rather than failing the whole read.
    """
    if prior is None:
        return None
    if isinstance(prior, StringState):
        return PriorReadings(health=prior.health, states=prior.states)
    if not isinstance(prior, Mapping):
        return None

    raw_health = prior.get("health")
    raw_states = prior.get("states")
    if not isinstance(raw_health, list):
        raw_health = None
    if not isinstance(raw_states, list):
        raw_states = None
    if raw_health is None and raw_states is None:
        return None

    return PriorReadings(
        health=[_as_health(v) for v in raw_health or []],
        states=[PanelState.parse(v) for v in raw_states or []],
    )


def _list(data: Mapping[str, Any], key: str) -> list:
    value = data.get(key)
    return value if isinstance(value, list) else []


def from_wire(data: Mapping[str, Any]) -> StringState:
    """
    Rebuild a StringState from a stored dict. Unreadable voltage, current or
    power entries read as 0.0.

    Used for display and reporting; the engine itself reads history through
    read_prior, which tolerates partial data.
    """
    health, states, voltage, current, power = (
        _list(data, key) for key in ("health", "states", "voltage", "current", "power")
    )

    panels = []
    for i in range(len(voltage)):
        state = PanelState.parse(states[i]) if i < len(states) else None
        panels.append(
            Panel(
                health=_as_health(health[i]) if i < len(health) else None,
                state=state or PanelState.GOOD,
                voltage=_as_reading(voltage[i]),
                current=_as_reading(current[i]) if i < len(current) else 0.0,
                power=_as_reading(power[i]) if i < len(power) else 0.0,
            )
        )

    series_state = PanelState.parse(data.get("seriesState")) or PanelState.GOOD
    series_health = _as_health(data.get("seriesHealth"))
    faulty = data.get("actualFaultyIndex")
    return StringState(
        panels=panels,
        series_state=series_state,
        series_health=100.0 if series_health is None else series_health,
        actual_faulty_index=faulty if isinstance(faulty, int) and not isinstance(faulty, bool) else None,
    )
