from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, confloat, field_validator

Side = Literal["top", "bottom"]
SIDES = ("top", "bottom")


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TableRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., description="Table identifier.")
    serial_number: str = Field(..., alias="serialNumber", description="Display serial, e.g. TBL-0001.")
    panels_top: int = Field(0, ge=0, alias="panelsTop", description="Panels in the top string.")
    panels_bottom: int = Field(0, ge=0, alias="panelsBottom", description="Panels in the bottom string.")
    created_at: str = Field(default_factory=utc_now, alias="createdAt")
    # Stored string snapshots stay as plain dicts; the engine reads them leniently.
    top_panels: Dict[str, Any] = Field(default_factory=dict, alias="topPanels")
    bottom_panels: Dict[str, Any] = Field(default_factory=dict, alias="bottomPanels")

    @field_validator("top_panels", "bottom_panels", mode="before")
    @classmethod
    def string_mapping(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}

    def panel_count(self, side: Side) -> int:
        return self.panels_top if side == "top" else self.panels_bottom

    def set_panel_count(self, side: Side, count: int) -> None:
        if side == "top":
            self.panels_top = count
        else:
            self.panels_bottom = count

    def string(self, side: Side) -> Dict[str, Any]:
        return self.top_panels if side == "top" else self.bottom_panels

    def set_string(self, side: Side, data: Dict[str, Any]) -> None:
        if side == "top":
            self.top_panels = data
        else:
            self.bottom_panels = data


class PlantDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    company_id: str = Field(..., alias="companyId", description="Company folder name.")
    company_name: str = Field(..., alias="companyName")
    voltage_per_panel: PositiveFloat = Field(20.0, alias="voltagePerPanel", description="Nominal panel voltage (V).")
    current_per_panel: PositiveFloat = Field(10.0, alias="currentPerPanel", description="Nominal panel current (A).")
    power_per_panel: confloat(ge=0) = Field(0.0, alias="powerPerPanel", description="Nominal panel power (W).")
    plant_power_kw: PositiveFloat = Field(1000.0, alias="plantPowerKW", description="Nameplate plant power (kW).")
    tables: List[TableRecord] = Field(default_factory=list)
    created_at: str = Field(default_factory=utc_now, alias="createdAt")
    last_updated: str = Field(default_factory=utc_now, alias="lastUpdated")

    def touch(self) -> None:
        self.last_updated = utc_now()

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
