from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, Field, PositiveFloat, confloat, model_validator


class EngineConfig(BaseModel):
    good_threshold: confloat(gt=0, le=100) = Field(
        80.0, description="Minimum health (%) for a panel to be classified GOOD."
    )
    fault_threshold: confloat(gt=0, le=100) = Field(
        20.0, description="Health (%) below which a panel is classified FAULT."
    )
    fault_probability: confloat(ge=0, le=1) = Field(
        0.3, description="Chance per cycle that a fully healthy string develops a new fault."
    )
    severe_fault_fraction: confloat(ge=0, le=1) = Field(
        0.3, description="Share of new faults that start as FAULT (the rest start as REPAIRING)."
    )
    fault_repair_step: Tuple[float, float] = Field(
        (2.0, 5.0), description="Health gained per cycle by a FAULT panel under repair."
    )
    repairing_repair_step: Tuple[float, float] = Field(
        (3.0, 7.0), description="Health gained per cycle by a REPAIRING panel."
    )
    healthy_jitter: confloat(ge=0) = Field(
        1.0, description="Symmetric health jitter applied to GOOD panels each cycle."
    )
    voltage_tolerance: confloat(ge=0, lt=1) = Field(
        0.02, description="Per-panel voltage spread around nominal (fraction)."
    )
    healthy_current_band: Tuple[float, float] = Field(
        (0.95, 1.00), description="Current multiplier range for a healthy string."
    )
    repairing_current: Tuple[float, float] = Field(
        (0.2, 0.6), description="(base, slope) current multiplier for a REPAIRING-limited string."
    )
    fault_current: Tuple[float, float] = Field(
        (0.05, 0.15), description="(base, slope) current multiplier for a FAULT-limited string."
    )

    @model_validator(mode="after")
    def _ordered_thresholds(self) -> "EngineConfig":
        if self.fault_threshold >= self.good_threshold:
            raise ValueError("fault_threshold must be below good_threshold")
        for name in ("fault_repair_step", "repairing_repair_step", "healthy_current_band"):
            lo, hi = getattr(self, name)
            if lo > hi:
                raise ValueError(f"{name} must be given as (low, high)")
        return self


class PlantDefaults(BaseModel):
    voltage_per_panel: PositiveFloat = Field(20.0, description="Nominal panel voltage (V).")
    current_per_panel: PositiveFloat = Field(10.0, description="Nominal panel current (A).")
    plant_power_kw: PositiveFloat = Field(1000.0, description="Nameplate plant power (kW).")


class Settings(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    plant: PlantDefaults = Field(default_factory=PlantDefaults)


def load_config(path: Optional[str | Path] = None) -> Settings:
    """Read settings from a JSON file; missing sections keep their defaults."""
    if path is None:
        return Settings()
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config JSON not found: {path}")
    return Settings.model_validate(json.loads(p.read_text()))
