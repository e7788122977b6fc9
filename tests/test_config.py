"""Tests for settings loading and validation."""
import json

import pytest
from pydantic import ValidationError

from plantwatch.config import EngineConfig, Settings, load_config


class TestEngineConfig:
    def test_defaults(self):
        cfg = EngineConfig()
        assert cfg.good_threshold == 80.0
        assert cfg.fault_threshold == 20.0
        assert cfg.fault_probability == 0.3
        assert cfg.severe_fault_fraction == 0.3
        assert cfg.fault_repair_step == (2.0, 5.0)
        assert cfg.repairing_repair_step == (3.0, 7.0)

    def test_threshold_order(self):
        with pytest.raises(ValidationError):
            EngineConfig(good_threshold=30, fault_threshold=40)

    def test_reversed_range(self):
        with pytest.raises(ValidationError):
            EngineConfig(fault_repair_step=(5.0, 2.0))

    def test_probability_bounds(self):
        with pytest.raises(ValidationError):
            EngineConfig(fault_probability=1.5)


class TestLoadConfig:
    def test_no_path(self):
        assert load_config() == Settings()

    def test_partial_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"engine": {"fault_probability": 0.0}, "plant": {"voltage_per_panel": 40}}))
        settings = load_config(path)
        assert settings.engine.fault_probability == 0.0
        assert settings.engine.good_threshold == 80.0
        assert settings.plant.voltage_per_panel == 40.0
        assert settings.plant.current_per_panel == 10.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")
