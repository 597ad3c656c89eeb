"""Tests for the key-value stores."""
import json

from resources import ResourceState
from storage import MATERIALS_KEY, PRODUCTIONS_KEY, JsonFileStore, MemoryStore


class TestJsonFileStore:
    def test_missing_key_loads_none(self, tmp_path):
        assert JsonFileStore(str(tmp_path)).load("nothing") is None

    def test_save_then_load(self, tmp_path):
        store = JsonFileStore(str(tmp_path / "data"))
        assert store.save(MATERIALS_KEY, '[{"name": "Aço"}]') is True
        assert (tmp_path / "data" / "gr_materials.json").exists()
        assert store.load(MATERIALS_KEY) == '[{"name": "Aço"}]'

    def test_remove(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        store.save(PRODUCTIONS_KEY, "[]")
        store.remove(PRODUCTIONS_KEY)
        store.remove(PRODUCTIONS_KEY)
        assert store.load(PRODUCTIONS_KEY) is None

    def test_write_failure_returns_false(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        assert JsonFileStore(str(blocker)).save(MATERIALS_KEY, "[]") is False

    def test_state_survives_restart(self, tmp_path):
        state = ResourceState(JsonFileStore(str(tmp_path)))
        saved = state.materials.create_or_update({"name": "Chapa", "unit": "m²", "unitPrice": "30", "quantityOnHand": "2"})

        restarted = ResourceState(JsonFileStore(str(tmp_path)))
        assert restarted.materials.get(saved["id"]) == saved
        assert restarted.materials.records == state.materials.records

        raw = (tmp_path / "gr_materials.json").read_text(encoding="utf-8")
        assert "m²" in raw
        assert json.loads(raw)[0]["name"] == "Chapa"


class TestMemoryStore:
    def test_fail_writes(self):
        store = MemoryStore(fail_writes=True)
        assert store.save("k", "v") is False
        assert store.load("k") is None
        assert store.writes == 0

    def test_counts_writes(self):
        store = MemoryStore()
        store.save("k", "v")
        store.save("k", "w")
        assert store.load("k") == "w"
        assert store.writes == 2
