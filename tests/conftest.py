"""Fixtures for the resource tracker tests."""
import json

import pytest

from resources import ResourceState
from storage import MATERIALS_KEY, PRODUCTIONS_KEY, MemoryStore

STEEL = {"id": 7, "name": "Aço", "unit": "kg", "unitPrice": 5.2, "quantityOnHand": 200}
BATCHES = [
    {"id": 11, "name": "Lote 11", "date": "2025-11-01", "materialCost": 420, "laborCost": 300, "otherCost": 50, "unitsProduced": 100},
    {"id": 12, "name": "Lote 12", "date": "2025-11-15", "materialCost": 120, "laborCost": 80, "otherCost": 20, "unitsProduced": 40},
]


@pytest.fixture
def empty_store():
    """Store that already holds two empty collections (no sample fallback)."""
    return MemoryStore({MATERIALS_KEY: "[]", PRODUCTIONS_KEY: "[]"})


@pytest.fixture
def state(empty_store):
    return ResourceState(empty_store)


@pytest.fixture
def seeded_store():
    return MemoryStore({
        MATERIALS_KEY: json.dumps([STEEL], ensure_ascii=False),
        PRODUCTIONS_KEY: json.dumps(BATCHES, ensure_ascii=False),
    })


@pytest.fixture
def seeded_state(seeded_store):
    return ResourceState(seeded_store)


@pytest.fixture
def steel_form():
    return {"id": None, "name": "Aço", "unit": "kg", "unitPrice": "5.2", "quantityOnHand": "200"}


@pytest.fixture
def batch_form():
    return {
        "id": None,
        "name": "Produto A - Lote 01",
        "date": "2025-11-01",
        "materialCost": "420",
        "laborCost": "300",
        "otherCost": "50",
        "unitsProduced": "100",
    }
