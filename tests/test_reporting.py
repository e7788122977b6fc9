"""Tests for pandas reporting and plotly figures."""
import pytest

from plantwatch.plant import TableRecord, create_plant, delete_panel
from plantwatch.reporting import FAULT_COLUMNS, PANEL_COLUMNS, fault_report, panel_frame, plant_summary
from plantwatch.ui.charts import STATE_CODES, string_power_figure, table_grid_figure
from plantwatch.engine import PanelState


def _string(health, states, faulty):
    n = len(health)
    current = 10.0 if faulty is None else 2.0
    return {
        "voltage": [20.0] * n,
        "current": [current] * n,
        "power": [20.0 * current] * n,
        "health": health,
        "states": states,
        "seriesState": states[faulty] if faulty is not None else "good",
        "seriesHealth": min(health),
        "actualFaultyIndex": faulty,
    }


@pytest.fixture
def plant():
    details = create_plant("acme", "Acme Solar", plant_power_kw=10)
    details.tables = [
        TableRecord(
            id="t1",
            serial_number="TBL-0001",
            panels_top=3,
            panels_bottom=2,
            top_panels=_string([90.0, 10.0, 95.0], ["good", "fault", "fault"], 1),
            bottom_panels=_string([88.0, 91.0], ["good", "good"], None),
        ),
        TableRecord(
            id="t2",
            serial_number="TBL-0002",
            panels_top=2,
            panels_bottom=1,
            top_panels=_string([45.0, 90.0], ["repairing", "repairing"], 0),
            bottom_panels=_string([99.0], ["good"], None),
        ),
    ]
    return details


class TestPanelFrame:
    def test_rows(self, plant):
        df = panel_frame(plant)
        assert list(df.columns) == PANEL_COLUMNS
        assert len(df) == 8
        top = df[(df["table_id"] == "t1") & (df["side"] == "top")]
        assert top["panel"].tolist() == [1, 2, 3]
        assert top["state"].tolist() == ["good", "fault", "fault"]

    def test_empty_plant(self):
        df = panel_frame(create_plant("x", "X"))
        assert df.empty
        assert list(df.columns) == PANEL_COLUMNS


class TestFaultReport:
    def test_weakest_first(self, plant):
        df = fault_report(plant)
        assert list(df.columns) == FAULT_COLUMNS
        assert df["serial_number"].tolist() == ["TBL-0001", "TBL-0002"]
        first = df.iloc[0]
        assert first["series_state"] == "fault"
        assert first["origin_panel"] == 2
        assert first["affected_panels"] == 2
        second = df.iloc[1]
        assert second["origin_panel"] == 1
        assert second["affected_panels"] == 2

    def test_healthy_plant(self):
        assert fault_report(create_plant("x", "X")).empty


class TestSummary:
    def test_counts(self, plant):
        s = plant_summary(plant)
        assert s["tables"] == 2
        assert s["panels"] == 8
        assert s["good"] == 4
        assert s["repairing"] == 2
        assert s["fault"] == 2
        assert s["faulty_strings"] == 2
        # faulty strings carry 2 A (40 W per panel), healthy ones 10 A (200 W)
        assert s["output_kw"] == pytest.approx((3 * 40 + 2 * 200 + 2 * 40 + 1 * 200) / 1000)

    def test_empty(self):
        s = plant_summary(create_plant("x", "X"))
        assert s["panels"] == 0
        assert s["output_kw"] == 0.0


class TestCharts:
    def test_grid_padding(self, plant):
        fig = table_grid_figure(plant.tables[0])
        heatmap = fig.data[0]
        assert len(heatmap.z) == 2
        assert list(heatmap.z[0]) == [0, 2, 2]
        assert list(heatmap.z[1]) == [0, 0, None]
        assert list(heatmap.x) == ["P1", "P2", "P3"]
        assert fig.layout.title.text == "TBL-0001"

    def test_state_codes(self):
        assert STATE_CODES[PanelState.GOOD] < STATE_CODES[PanelState.REPAIRING] < STATE_CODES[PanelState.FAULT]

    def test_power_traces(self, plant):
        df = panel_frame(plant)
        assert len(string_power_figure(df).data) == 4
        assert len(string_power_figure(df, table_id="t2").data) == 2


class TestStaleSummary:
    def _plant(self, top):
        details = create_plant("acme", "Acme Solar")
        details.tables = [
            TableRecord(
                id="t1",
                serial_number="TBL-0001",
                panels_top=len(top["voltage"]),
                panels_bottom=1,
                top_panels=top,
                bottom_panels=_string([95.0], ["good"], None),
            )
        ]
        return details

    def test_deleted_origin_with_healthy_remainder(self):
        details = self._plant(_string([90.0, 90.0, 90.0, 90.0, 10.0], ["good"] * 4 + ["fault"], 4))
        delete_panel(details, "t1", "top-5")
        assert fault_report(details).empty
        assert plant_summary(details)["faulty_strings"] == 0

    def test_deleted_origin_falls_back_to_weakest(self):
        details = self._plant(_string(
            [90.0, 30.0, 90.0, 90.0, 10.0],
            ["good", "repairing", "repairing", "repairing", "fault"],
            4,
        ))
        delete_panel(details, "t1", "top-5")
        df = fault_report(details)
        assert len(df) == 1
        row = df.iloc[0]
        assert row["series_state"] == "repairing"
        assert row["series_health"] == 30.0
        assert row["origin_panel"] == 2
        assert row["affected_panels"] == 3
