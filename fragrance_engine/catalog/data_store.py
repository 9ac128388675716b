from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from ..config import DEFAULT_ENGINE_CONFIG
from .models import Catalog, CatalogItem, Ingredients

_LIST_COLUMNS = ("notes", "seasons", "occasions")
_NUMERIC_DEFAULTS = {"longevity": 0.0, "sillage": 0.0, "popularity": 0.0, "rating": 0.0}

_catalog: Catalog | None = None


def _as_list(values: Any, lower: bool = False) -> list[str]:
    if not isinstance(values, (list, tuple)):
        return []
    cleaned = [str(v).strip() for v in values if str(v).strip()]
    return [v.lower() for v in cleaned] if lower else cleaned


def _load_frame(path: Path) -> pd.DataFrame:
    df = pd.read_json(path, orient="records")

    # Source exports use singular season/occasion and "reviews" for the rating
    df = df.rename(columns={"season": "seasons", "occasion": "occasions", "reviews": "rating"})

    for col in _LIST_COLUMNS:
        if col not in df.columns:
            df[col] = [[] for _ in range(len(df))]
    df["notes"] = df["notes"].apply(_as_list)
    df["seasons"] = df["seasons"].apply(lambda v: _as_list(v, lower=True))
    df["occasions"] = df["occasions"].apply(lambda v: _as_list(v, lower=True))

    for col, default in _NUMERIC_DEFAULTS.items():
        if col not in df.columns:
            df[col] = default
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(default)

    if "ingredients" not in df.columns:
        df["ingredients"] = [{} for _ in range(len(df))]

    return df


def _row_to_item(row: pd.Series) -> CatalogItem:
    ingredients = row["ingredients"] if isinstance(row["ingredients"], dict) else {}
    return CatalogItem(
        id=int(row["id"]),
        name=str(row["name"]),
        notes=row["notes"],
        intensity=float(row["intensity"]),
        longevity=float(row["longevity"]),
        sillage=float(row["sillage"]),
        seasons=row["seasons"],
        occasions=row["occasions"],
        price=float(row["price"]),
        popularity=float(row["popularity"]),
        rating=float(row["rating"]),
        ingredients=Ingredients(
            top=_as_list(ingredients.get("top")),
            heart=_as_list(ingredients.get("heart")),
            base=_as_list(ingredients.get("base")),
        ),
    )


def load_catalog(path: Path | str) -> Catalog:
    """Read a JSON records file into an immutable Catalog snapshot."""
    df = _load_frame(Path(path))
    return Catalog(_row_to_item(row) for _, row in df.iterrows())


def get_catalog() -> Catalog:
    """Return the default catalog snapshot, loading it on first call."""
    global _catalog
    if _catalog is None:
        _catalog = load_catalog(DEFAULT_ENGINE_CONFIG.catalog_path)
    return _catalog
