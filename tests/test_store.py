"""Tests for the JSON file store."""
import json

import pytest

from plantwatch.plant import (
    CompanyExistsError,
    CompanyNotFoundError,
    PlantStore,
    add_table,
    create_plant,
)


@pytest.fixture
def store(tmp_path):
    return PlantStore(tmp_path / "companies")


class TestPlantStore:
    def test_create_and_load(self, store, rng):
        details = create_plant("acme", "Acme Solar")
        add_table(details, 3, 2, rng=rng)
        path = store.create(details)
        assert path.name == "plant_details.json"

        raw = json.loads(path.read_text())
        assert raw["companyId"] == "acme"
        assert raw["tables"][0]["serialNumber"] == "TBL-0001"
        assert set(raw["tables"][0]["topPanels"]) >= {"health", "states", "actualFaultyIndex"}

        loaded = store.load("acme")
        assert loaded.company_name == "Acme Solar"
        assert loaded.tables[0].top_panels == details.tables[0].top_panels

    def test_duplicate(self, store):
        store.create(create_plant("acme", "Acme"))
        with pytest.raises(CompanyExistsError):
            store.create(create_plant("acme", "Acme again"))

    def test_missing(self, store):
        with pytest.raises(CompanyNotFoundError):
            store.load("ghost")
        with pytest.raises(CompanyNotFoundError):
            store.save(create_plant("ghost", "Ghost"))
        with pytest.raises(CompanyNotFoundError):
            store.delete("ghost")

    def test_save_replaces_document(self, store, rng):
        details = create_plant("acme", "Acme")
        store.create(details)
        add_table(details, 1, 1, rng=rng)
        store.save(details)
        assert len(store.load("acme").tables) == 1
        leftovers = [p.name for p in store.company_dir("acme").iterdir()]
        assert leftovers == ["plant_details.json"]

    def test_unknown_fields_survive(self, store):
        store.create(create_plant("acme", "Acme"))
        path = store.plant_path("acme")
        raw = json.loads(path.read_text())
        raw["notes"] = "inverter swapped"
        path.write_text(json.dumps(raw))
        store.save(store.load("acme"))
        assert json.loads(path.read_text())["notes"] == "inverter swapped"

    def test_list_skips_broken(self, store):
        store.create(create_plant("b-co", "B"))
        store.create(create_plant("a-co", "A"))
        (store.root / "broken").mkdir()
        (store.root / "broken" / "plant_details.json").write_text("{not json")
        (store.root / "empty").mkdir()
        (store.root / "stray.txt").write_text("x")
        assert [c.company_id for c in store.list_companies()] == ["a-co", "b-co"]

    def test_list_without_root(self, tmp_path):
        assert PlantStore(tmp_path / "nothing").list_companies() == []

    def test_delete(self, store):
        store.create(create_plant("acme", "Acme"))
        store.delete("acme")
        assert not store.exists("acme")

    @pytest.mark.parametrize("bad", ["", "..", "../etc", "a/b"])
    def test_invalid_ids(self, store, bad):
        with pytest.raises(ValueError):
            store.company_dir(bad)
