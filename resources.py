# resources.py
import copy
import json
import logging
import math
from datetime import date, datetime
from typing import Callable, Iterator, List, Mapping, Optional

import pandas as pd

import reports
from storage import MATERIALS_KEY, PRODUCTIONS_KEY

logger = logging.getLogger(__name__)

# ----------------------------
# Built-in sample data (used when nothing usable is stored)
# ----------------------------
SAMPLE_MATERIALS = [
    {"id": 1, "name": "Aço", "unit": "kg", "unitPrice": 5.2, "quantityOnHand": 200},
    {"id": 2, "name": "Parafuso", "unit": "un", "unitPrice": 0.12, "quantityOnHand": 5000},
]

SAMPLE_PRODUCTIONS = [
    {"id": 1, "name": "Produto A - Lote 01", "date": "2025-11-01", "materialCost": 420, "laborCost": 300, "otherCost": 50, "unitsProduced": 100},
    {"id": 2, "name": "Produto B - Lote 02", "date": "2025-11-15", "materialCost": 120, "laborCost": 80, "otherCost": 20, "unitsProduced": 40},
]

FIELD_LABELS = {
    "unitPrice": "Preço unitário",
    "quantityOnHand": "Quantidade em estoque",
    "materialCost": "Custo material",
    "laborCost": "Custo mão de obra",
    "otherCost": "Outros custos",
    "unitsProduced": "Unidades produzidas",
}


class ValidationError(ValueError):
    """A form submission was rejected; nothing was stored."""


# ----------------------------
# Form coercion
# ----------------------------
def to_number(value, field: str, strict: bool = False):
    """
    Parse a form value into a non-negative number.
    Empty input is 0. Garbage is 0 too unless strict is set.
    Integral values come back as int so they serialize as 200, not 200.0.
    """
    label = FIELD_LABELS.get(field, field)
    if isinstance(value, str):
        value = value.strip()
    if value is None or value == "":
        return 0
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number) or not math.isfinite(number):
        if strict:
            raise ValidationError(f"{label}: valor numérico inválido")
        return 0
    number = float(number)
    if number < 0:
        raise ValidationError(f"{label} não pode ser negativo")
    return int(number) if number.is_integer() else number


def to_iso_date(value) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    parsed = pd.to_datetime(str(value).strip(), errors="coerce", format="%Y-%m-%d")
    if pd.isna(parsed):
        raise ValidationError("Data inválida")
    return parsed.strftime("%Y-%m-%d")


def parse_identity(value) -> Optional[int]:
    """Only ints and digit strings are identities; 7.9 or True are not."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


# ----------------------------
# Collections
# ----------------------------
class RecordCollection:
    """
    Newest-first list of records mirrored to one key of a store.
    Every mutation rewrites the whole collection; a failed write leaves
    the in-memory list untouched and flips persist_ok.
    """

    key = ""
    label = ""
    samples: List[dict] = []

    def __init__(self, store, strict: bool = False):
        self.store = store
        self.strict = strict
        self.persist_ok = True
        self._records = self._load()

    def _load(self) -> List[dict]:
        raw = self.store.load(self.key)
        if raw is None:
            return copy.deepcopy(self.samples)
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Stored {self.key} is not valid JSON ({e}), using sample data")
            return copy.deepcopy(self.samples)
        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            logger.warning(f"Stored {self.key} is not a list of records, using sample data")
            return copy.deepcopy(self.samples)
        return data

    def _persist(self) -> bool:
        text = json.dumps(self._records, ensure_ascii=False)
        self.persist_ok = self.store.save(self.key, text)
        if not self.persist_ok:
            logger.warning(f"{self.key} kept in memory only, write failed")
        return self.persist_ok

    def _parse(self, form: Mapping) -> dict:
        raise NotImplementedError

    def _index_of(self, record_id: Optional[int]) -> Optional[int]:
        if record_id is None:
            return None
        for i, r in enumerate(self._records):
            if parse_identity(r.get("id")) == record_id:
                return i
        return None

    def _next_id(self) -> int:
        ids = [parse_identity(r.get("id")) for r in self._records]
        return max((i for i in ids if i is not None), default=0) + 1

    @property
    def records(self) -> List[dict]:
        return [dict(r) for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[dict]:
        return iter(self.records)

    def get(self, record_id) -> Optional[dict]:
        idx = self._index_of(parse_identity(record_id))
        return dict(self._records[idx]) if idx is not None else None

    def create_or_update(self, form: Mapping) -> dict:
        fields = self._parse(form)
        record_id = parse_identity(form.get("id"))
        idx = self._index_of(record_id)
        if idx is None:
            if record_id is not None:
                logger.info(f"{self.key}: id {record_id} no longer exists, storing as new record")
            record = {"id": self._next_id(), **fields}
            self._records.insert(0, record)
        else:
            record = {"id": record_id, **fields}
            self._records[idx] = record
        self._persist()
        return dict(record)

    def delete(self, record_id, confirm: Callable[[], bool]) -> bool:
        if not confirm():
            return False
        idx = self._index_of(parse_identity(record_id))
        if idx is None:
            return False
        del self._records[idx]
        self._persist()
        return True

    def clear(self):
        self._records = []
        self._persist()


class MaterialRegistry(RecordCollection):
    key = MATERIALS_KEY
    label = "materiais"
    samples = SAMPLE_MATERIALS

    def _parse(self, form: Mapping) -> dict:
        name = str(form.get("name") or "").strip()
        if not name:
            raise ValidationError("Nome do material é obrigatório")
        return {
            "name": name,
            "unit": str(form.get("unit") or "").strip(),
            "unitPrice": to_number(form.get("unitPrice"), "unitPrice", self.strict),
            "quantityOnHand": to_number(form.get("quantityOnHand"), "quantityOnHand", self.strict),
        }

    def total_value(self) -> float:
        return reports.total_value(self._records)


class ProductionLedger(RecordCollection):
    key = PRODUCTIONS_KEY
    label = "produções"
    samples = SAMPLE_PRODUCTIONS

    def _parse(self, form: Mapping) -> dict:
        name = str(form.get("name") or "").strip()
        raw_date = form.get("date")
        if isinstance(raw_date, str):
            raw_date = raw_date.strip()
        if not name or not raw_date:
            raise ValidationError("Nome e data são obrigatórios")
        units = to_number(form.get("unitsProduced"), "unitsProduced", self.strict)
        if not isinstance(units, int):
            raise ValidationError(f"{FIELD_LABELS['unitsProduced']} deve ser um número inteiro")
        return {
            "name": name,
            "date": to_iso_date(raw_date),
            "materialCost": to_number(form.get("materialCost"), "materialCost", self.strict),
            "laborCost": to_number(form.get("laborCost"), "laborCost", self.strict),
            "otherCost": to_number(form.get("otherCost"), "otherCost", self.strict),
            "unitsProduced": units,
        }

    def total_cost(self) -> float:
        return reports.total_cost(self._records)


# ----------------------------
# Application state
# ----------------------------
class ResourceState:
    """Owns both collections; the page only mutates through them."""

    def __init__(self, store, strict: bool = False):
        self.store = store
        self.materials = MaterialRegistry(store, strict=strict)
        self.productions = ProductionLedger(store, strict=strict)

    @property
    def persistence_ok(self) -> bool:
        return self.materials.persist_ok and self.productions.persist_ok

    def persistence_warnings(self) -> List[str]:
        return [
            f"Não foi possível salvar {c.label}; os dados continuam apenas nesta sessão."
            for c in (self.materials, self.productions)
            if not c.persist_ok
        ]

    def summary(self) -> dict:
        return reports.summary(self.materials.records, self.productions.records)

    def export_csv(self) -> str:
        return reports.export_csv(self.materials.records, self.productions.records)

    def clear_all(self):
        self.store.remove(MATERIALS_KEY)
        self.store.remove(PRODUCTIONS_KEY)
        self.materials.clear()
        self.productions.clear()
        logger.info("All local data cleared")
