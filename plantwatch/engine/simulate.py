from __future__ import annotations

from typing import Any, List, Optional, Sequence

import numpy as np

from ..config import EngineConfig
from .models import Panel, PanelState, PriorReadings, StringState, classify, read_prior, round1


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def select_fault_target(health: Sequence[float], good_threshold: float = 80.0) -> Optional[int]:
    """Index of the lowest-health panel below the GOOD threshold (first on ties), else None."""
    target = None
    for i, h in enumerate(health):
        if h < good_threshold and (target is None or h < health[target]):
            target = i
    return target


def initialize_panels(panel_count: int, rng: np.random.Generator, config: EngineConfig) -> List[Panel]:
    return [
        Panel(health=round1(rng.uniform(config.good_threshold, 100.0)), state=PanelState.GOOD)
        for _ in range(panel_count)
    ]


def evolve_panels(
    panel_count: int,
    readings: PriorReadings,
    rng: np.random.Generator,
    config: EngineConfig,
) -> List[Panel]:
    """
    Advance one repair cycle from stored readings.

    Only the fault target (the weakest sub-GOOD panel) gains health; healthy
    panels drift by a small jitter; everything else carries over. Panels that
    only inherited a fault state from upstream return to GOOD once their own
    health allows it.
    """
    good = config.good_threshold
    fault = config.fault_threshold

    health = []
    for i in range(panel_count):
        h = readings.health_at(i)
        health.append(rng.uniform(0.0, 100.0) if h is None else h)
    states = [readings.state_at(i) or PanelState.GOOD for i in range(panel_count)]

    target = select_fault_target(health, good)

    panels = []
    for i in range(panel_count):
        h, s = health[i], states[i]
        if i == target:
            if s is PanelState.FAULT and h < fault:
                h += rng.uniform(*config.fault_repair_step)
            elif s is PanelState.REPAIRING and fault <= h < good:
                h += rng.uniform(*config.repairing_repair_step)
            h = round1(_clamp(h, 0.0, 100.0))
            s = classify(h, good, fault)
        else:
            if h >= good and s is not PanelState.GOOD:
                s = PanelState.GOOD
            if s is PanelState.GOOD and h >= good:
                jitter = config.healthy_jitter
                h = _clamp(h + rng.uniform(-jitter, jitter), good, 100.0)
            h = round1(_clamp(h, 0.0, 100.0))
        panels.append(Panel(health=h, state=s))
    return panels


def inject_fault(panels: List[Panel], rng: np.random.Generator, config: EngineConfig) -> Optional[int]:
    """
    Possibly start a new fault on a fully healthy string.

    Returns the index of the new fault origin, or None if nothing changed.
    A string that is still resolving a fault never gets a second one.
    """
    if not panels or any(p.state is not PanelState.GOOD for p in panels):
        return None
    if rng.random() >= config.fault_probability:
        return None

    idx = int(rng.integers(0, len(panels)))
    if rng.random() < config.severe_fault_fraction:
        panels[idx].health = round1(rng.uniform(0.0, config.fault_threshold - 1))
        panels[idx].state = PanelState.FAULT
    else:
        panels[idx].health = round1(rng.uniform(config.fault_threshold, config.good_threshold - 1))
        panels[idx].state = PanelState.REPAIRING
    return idx


def current_multiplier(series_health: float, rng: np.random.Generator, config: EngineConfig) -> float:
    """Fraction of nominal current the whole string can carry, set by its weakest panel."""
    if series_health >= config.good_threshold:
        return rng.uniform(*config.healthy_current_band)
    if series_health >= config.fault_threshold:
        base, slope = config.repairing_current
    else:
        base, slope = config.fault_current
    return base + (series_health / 100.0) * slope


def apply_electrical_output(
    panels: List[Panel],
    voltage_per_panel: float,
    current_per_panel: float,
    series_health: float,
    rng: np.random.Generator,
    config: EngineConfig,
) -> float:
    """Fill voltage/current/power in place; returns the shared current multiplier."""
    multiplier = current_multiplier(series_health, rng, config)
    string_current = round1(current_per_panel * multiplier)
    tol = config.voltage_tolerance
    for p in panels:
        p.voltage = round1(voltage_per_panel * rng.uniform(1.0 - tol, 1.0 + tol))
        p.current = string_current
        p.power = round1(p.voltage * p.current)
    return multiplier


def propagate_fault(panels: List[Panel], weakest: int, series_health: float, config: EngineConfig) -> Optional[int]:
    """Give every panel downstream of the fault origin the origin's state."""
    if series_health >= config.good_threshold:
        return None
    origin_state = panels[weakest].state
    for p in panels[weakest:]:
        p.state = origin_state
    return weakest


def simulate_string(
    panel_count: int,
    voltage_per_panel: float,
    current_per_panel: float,
    prior: Any = None,
    *,
    rng: Optional[np.random.Generator] = None,
    config: Optional[EngineConfig] = None,
) -> StringState:
    """
    Run one monitoring cycle for a series string.

    Steps:
    - Evolve health/state from the prior snapshot, or start a fresh healthy
      string when there is no usable history.
    - Inject at most one new fault, and only into a fully healthy string.
    - Locate the weakest panel; its health limits the current of every panel.
    - Propagate the fault origin's state to all panels wired after it.

    Args:
        panel_count: Panels in the string; zero or less gives an empty string
        voltage_per_panel: Nominal panel voltage (V)
        current_per_panel: Nominal panel current (A)
        prior: Previous StringState or stored dict; malformed entries fall back to defaults
        rng: Random source with the numpy Generator interface (uniform, random, integers)
        config: Thresholds and probabilities

    Returns:
        New StringState with every per-panel field populated
    """
    config = config or EngineConfig()
    rng = rng if rng is not None else np.random.default_rng()

    if panel_count <= 0:
        return StringState()

    readings = read_prior(prior)
    if readings is None:
        panels = initialize_panels(panel_count, rng, config)
    else:
        panels = evolve_panels(panel_count, readings, rng, config)

    inject_fault(panels, rng, config)

    health = [p.health for p in panels]
    weakest = int(np.argmin(health))
    series_health = health[weakest]
    series_state = panels[weakest].state

    apply_electrical_output(panels, voltage_per_panel, current_per_panel, series_health, rng, config)
    faulty = propagate_fault(panels, weakest, series_health, config)

    return StringState(
        panels=panels,
        series_state=series_state,
        series_health=series_health,
        actual_faulty_index=faulty,
    )
