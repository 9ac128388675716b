from __future__ import annotations

import pytest

from fragrance_engine.analytics.store import clear_events
from fragrance_engine.catalog.models import Catalog, CatalogItem, Ingredients
from fragrance_engine.profiles.models import PreferenceQuery
from fragrance_engine.recommendations.cache import clear_cache

SUGI_CLASSIC = CatalogItem(
    id=1,
    name="Sugi Classic",
    notes=("cedar", "bergamot", "sandalwood", "citrus", "woody"),
    intensity=65,
    longevity=8,
    sillage=7,
    seasons=("spring", "fall"),
    occasions=("daily", "work"),
    price=180,
    popularity=0.85,
    rating=4.6,
    ingredients=Ingredients(
        top=("bergamot", "yuzu", "pink_pepper"),
        heart=("japanese_cedar", "hinoki"),
        base=("sandalwood", "vetiver"),
    ),
)

EVENING_ELEGANCE = CatalogItem(
    id=2,
    name="Evening Elegance",
    notes=("rose", "amber", "vanilla", "floral", "sweet"),
    intensity=80,
    longevity=10,
    sillage=9,
    seasons=("fall", "winter"),
    occasions=("evening", "special_events"),
    price=240,
    popularity=0.78,
    rating=4.8,
)

FRESH_BREEZE = CatalogItem(
    id=3,
    name="Fresh Breeze",
    notes=("lemon", "lavender", "musk", "fresh", "citrus"),
    intensity=45,
    longevity=6,
    sillage=5,
    seasons=("spring", "summer"),
    occasions=("daily", "sport"),
    price=120,
    popularity=0.92,
    rating=4.4,
)

SAMPLE_ITEMS = [SUGI_CLASSIC, EVENING_ELEGANCE, FRESH_BREEZE]

SPRING_QUERY = PreferenceQuery(
    season="spring",
    occasion="daily",
    intensity=50,
    favorite_notes=("citrus", "woody"),
    price_range="$100-200",
)


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(SAMPLE_ITEMS)


@pytest.fixture(autouse=True)
def _reset_module_state():
    clear_cache()
    clear_events()
    yield
    clear_cache()
    clear_events()
