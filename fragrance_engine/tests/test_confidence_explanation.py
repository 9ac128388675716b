from __future__ import annotations

import pytest

from conftest import SUGI_CLASSIC
from fragrance_engine.catalog.models import CatalogItem
from fragrance_engine.profiles.models import PreferenceQuery
from fragrance_engine.recommendations.confidence import blend_confidence, is_budget_range
from fragrance_engine.recommendations.explanation import compose_explanation

PLAIN_ITEM = CatalogItem(id=9, name="Plain", intensity=50, price=180, popularity=0.5, rating=3.0)


def test_confidence_adds_popularity_and_rating():
    assert blend_confidence(50, PLAIN_ITEM, PreferenceQuery()) == pytest.approx(55.0)

    rated = PLAIN_ITEM.model_copy(update={"rating": 4.0})
    assert blend_confidence(50, rated, PreferenceQuery()) == pytest.approx(60.0)


def test_low_rating_reduces_confidence():
    poor = PLAIN_ITEM.model_copy(update={"rating": 1.0})
    assert blend_confidence(50, poor, PreferenceQuery()) == pytest.approx(45.0)


def test_budget_penalty_for_expensive_items():
    query = PreferenceQuery(price_range="Under $100")
    assert blend_confidence(50, PLAIN_ITEM, query) == pytest.approx(40.0)

    cheap = PLAIN_ITEM.model_copy(update={"price": 150})
    assert blend_confidence(50, cheap, query) == pytest.approx(55.0)


def test_no_budget_penalty_for_other_ranges():
    query = PreferenceQuery(price_range="$100-200")
    assert blend_confidence(50, PLAIN_ITEM, query) == pytest.approx(55.0)


def test_confidence_clamped():
    assert blend_confidence(100, SUGI_CLASSIC, PreferenceQuery()) == 100.0
    poor = PLAIN_ITEM.model_copy(update={"rating": 0.0, "popularity": 0.0})
    assert blend_confidence(0, poor, PreferenceQuery()) == 0.0


def test_budget_label_detection():
    assert is_budget_range("Under $100")
    assert not is_budget_range("$100-200")
    assert not is_budget_range(None)


def test_explanation_joins_factors_and_signals():
    explanation = compose_explanation(["Perfect for spring", "Within your budget"], SUGI_CLASSIC, 6.0)
    assert explanation == (
        "Perfect for spring. Within your budget. Highly rated by customers. "
        "Popular choice among users. Loved by users with similar preferences."
    )


def test_explanation_thresholds():
    item = SUGI_CLASSIC.model_copy(update={"rating": 4.49, "popularity": 0.8})
    assert compose_explanation(["Ideal for daily"], item, 5.0) == "Ideal for daily."


def test_explanation_without_factors_is_still_valid():
    assert compose_explanation([], SUGI_CLASSIC) == (
        "Highly rated by customers. Popular choice among users."
    )
    assert compose_explanation([], PLAIN_ITEM) == "."
