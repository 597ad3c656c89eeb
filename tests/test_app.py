"""Page-level tests for the destructive actions, run through Streamlit's AppTest."""
import json
from pathlib import Path

from streamlit.testing.v1 import AppTest

from resources import ResourceState
from storage import MATERIALS_KEY, PRODUCTIONS_KEY, MemoryStore
from tests.conftest import BATCHES, STEEL

APP = str(Path(__file__).resolve().parent.parent / "Gestao_Recursos_App.py")
BOLTS = {"id": 8, "name": "Parafuso", "unit": "un", "unitPrice": 0.12, "quantityOnHand": 5000}


def seeded():
    return ResourceState(MemoryStore({
        MATERIALS_KEY: json.dumps([BOLTS, STEEL], ensure_ascii=False),
        PRODUCTIONS_KEY: json.dumps(BATCHES, ensure_ascii=False),
    }))


def open_section(state, section):
    at = AppTest.from_file(APP, default_timeout=30)
    at.session_state["resources"] = state
    at.run()
    at.selectbox(key="section").select(section).run()
    return at


class TestMaterialRemoval:
    def test_confirmation_is_consumed_by_each_removal(self):
        state = seeded()
        at = open_section(state, "🧱 Materiais")

        at.selectbox(key="mat_remove").select_index(1)
        at.checkbox(key="mat_remove_confirm").check()
        at.button(key="mat_remove_btn").click().run()

        assert state.materials.get(8) is None
        assert at.checkbox(key="mat_remove_confirm").value is False

        at.selectbox(key="mat_remove").select_index(1)
        at.button(key="mat_remove_btn").click().run()

        assert state.materials.get(7) is not None
        assert any("confirmação" in w.value for w in at.warning)

    def test_unconfirmed_removal_keeps_record(self):
        state = seeded()
        at = open_section(state, "🧱 Materiais")
        at.selectbox(key="mat_remove").select_index(1)
        at.button(key="mat_remove_btn").click().run()
        assert len(state.materials) == 2


class TestProductionRemoval:
    def test_confirmation_is_consumed_by_each_removal(self):
        state = seeded()
        at = open_section(state, "🏭 Produção")

        at.selectbox(key="prod_remove").select_index(1)
        at.checkbox(key="prod_remove_confirm").check()
        at.button(key="prod_remove_btn").click().run()

        assert [r["id"] for r in state.productions] == [12]
        assert at.checkbox(key="prod_remove_confirm").value is False

        at.selectbox(key="prod_remove").select_index(1)
        at.button(key="prod_remove_btn").click().run()
        assert [r["id"] for r in state.productions] == [12]


class TestClearAll:
    def test_clear_all_needs_fresh_confirmation(self):
        state = seeded()
        at = open_section(state, "⚙️ Configurações & Export")

        at.checkbox(key="clear_confirm").check()
        at.button(key="clear_btn").click().run()
        assert len(state.materials) == 0
        assert at.checkbox(key="clear_confirm").value is False

        state.materials.create_or_update({"name": "Cola"})
        at.button(key="clear_btn").click().run()
        assert len(state.materials) == 1
