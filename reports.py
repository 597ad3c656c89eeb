# reports.py
from typing import Dict, Iterable, List

import pandas as pd

# ----------------------------
# Columns (persisted record shape, also the export column order)
# ----------------------------
MATERIAL_COLUMNS = ["id", "name", "unit", "unitPrice", "quantityOnHand"]
PRODUCTION_COLUMNS = ["id", "name", "date", "materialCost", "laborCost", "otherCost", "unitsProduced"]
MATERIAL_NUMERIC = ["unitPrice", "quantityOnHand"]
COST_COLUMNS = ["materialCost", "laborCost", "otherCost"]
PRODUCTION_NUMERIC = COST_COLUMNS + ["unitsProduced"]

NO_DATA_LABEL = "sem dados"
EXPORT_FILENAME = "gestao_recursos_export.csv"
EXPORT_MIME = "text/csv"


def ensure_numeric(df: pd.DataFrame, cols: List[str]):
    for c in cols:
        if c in df.columns:
            df[c] = pd.to_numeric(df[c], errors="coerce").fillna(0)


# ----------------------------
# Table frames (derived columns included)
# ----------------------------
def materials_frame(materials: Iterable[dict]) -> pd.DataFrame:
    df = pd.DataFrame(list(materials), columns=MATERIAL_COLUMNS)
    ensure_numeric(df, MATERIAL_NUMERIC)
    df["value"] = df["unitPrice"] * df["quantityOnHand"]
    return df


def productions_frame(productions: Iterable[dict]) -> pd.DataFrame:
    df = pd.DataFrame(list(productions), columns=PRODUCTION_COLUMNS)
    ensure_numeric(df, PRODUCTION_NUMERIC)
    df["totalCost"] = df[COST_COLUMNS].sum(axis=1)
    return df


# ----------------------------
# Per-item and aggregate values
# ----------------------------
def material_value(record: dict) -> float:
    return float(materials_frame([record])["value"].iat[0])


def production_cost(record: dict) -> float:
    return float(productions_frame([record])["totalCost"].iat[0])


def total_value(materials: Iterable[dict]) -> float:
    return float(materials_frame(materials)["value"].sum())


def total_cost(productions: Iterable[dict]) -> float:
    return float(productions_frame(productions)["totalCost"].sum())


def summary(materials: List[dict], productions: List[dict]) -> Dict[str, float]:
    return {
        "total_value": total_value(materials),
        "total_cost": total_cost(productions),
        "production_count": len(productions),
    }


def format_money(value: float) -> str:
    return f"R$ {float(value):.2f}"


# ----------------------------
# Chart series
# ----------------------------
def cost_series(productions: Iterable[dict]) -> pd.DataFrame:
    """
    One point per batch, oldest first (the ledger keeps newest first).
    An empty ledger still yields a single zero point so the chart has an axis.
    """
    df = productions_frame(productions)
    if df.empty:
        return pd.DataFrame([{"name": NO_DATA_LABEL, "cost": 0}])
    df = df.iloc[::-1].reset_index(drop=True)
    return pd.DataFrame({
        "name": df["date"].fillna("").astype(str),
        "cost": df["totalCost"],
    })


def material_distribution(materials: Iterable[dict]) -> pd.DataFrame:
    df = materials_frame(materials)
    return df[["name", "value"]].reset_index(drop=True)


# ----------------------------
# CSV export
# ----------------------------
def _export_frame(records: Iterable[dict], columns: List[str]) -> pd.DataFrame:
    # object dtype keeps ints as ints, so 200 is written as "200" and not "200.0"
    rows = [[r.get(c) for c in columns] for r in records]
    return pd.DataFrame(rows, columns=columns, dtype=object)


def export_csv(materials: Iterable[dict], productions: Iterable[dict]) -> str:
    """
    Both collections in one document: a label line, the header, the rows,
    then a blank line before the next section. Fields holding commas,
    quotes or line breaks are quoted by the CSV writer.
    """
    mat = _export_frame(materials, MATERIAL_COLUMNS).to_csv(index=False, lineterminator="\n")
    prod = _export_frame(productions, PRODUCTION_COLUMNS).to_csv(index=False, lineterminator="\n")
    return f"--Materials--\n{mat}\n--Productions--\n{prod}"
