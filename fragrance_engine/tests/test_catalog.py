from __future__ import annotations

import json

import pytest

from conftest import SAMPLE_ITEMS
from fragrance_engine.catalog.data_store import get_catalog, load_catalog
from fragrance_engine.catalog.models import Catalog


def test_bundled_catalog_loads():
    catalog = get_catalog()

    assert len(catalog) >= 3
    sugi = catalog.get(1)
    assert sugi.name == "Sugi Classic"
    assert sugi.rating == 4.6
    assert sugi.seasons == ("spring", "fall")
    assert sugi.ingredients.heart == ("japanese_cedar", "hinoki")


def test_load_catalog_normalizes_rows(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([
        {
            "id": 7,
            "name": "Test Scent",
            "notes": ["Rose", " oud "],
            "intensity": 70,
            "season": ["Winter"],
            "occasion": ["Evening"],
            "price": 99,
            "popularity": 0.4,
            "reviews": 3.9,
        }
    ]))

    catalog = load_catalog(path)

    item = catalog.get(7)
    assert item.notes == ("Rose", "oud")
    assert item.seasons == ("winter",)
    assert item.occasions == ("evening",)
    assert item.rating == 3.9
    assert item.longevity == 0.0
    assert item.ingredients.top == ()


def test_catalog_preserves_order_and_indexes_ids():
    catalog = Catalog(SAMPLE_ITEMS)
    assert [item.id for item in catalog] == [1, 2, 3]
    assert 2 in catalog
    assert catalog.get(42) is None


def test_catalog_by_popularity_is_stable():
    tied = [item.model_copy(update={"popularity": 0.5}) for item in SAMPLE_ITEMS]
    assert [item.id for item in Catalog(tied).by_popularity()] == [1, 2, 3]


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        Catalog([SAMPLE_ITEMS[0], SAMPLE_ITEMS[0]])
