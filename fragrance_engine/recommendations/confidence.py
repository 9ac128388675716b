from __future__ import annotations

from ..catalog.models import CatalogItem
from ..config import DEFAULT_ENGINE_CONFIG, EngineConfig
from ..profiles.models import PreferenceQuery
from .scoring import clamp

POPULARITY_WEIGHT = 10.0
RATING_BASELINE = 3.0
RATING_WEIGHT = 5.0
_BUDGET_MARKER = "under"


def is_budget_range(price_range: str | None) -> bool:
    """Whether a price label denotes the lower budget tier ("Under ...")."""
    return bool(price_range) and _BUDGET_MARKER in price_range.lower()


def blend_confidence(
    score: float,
    item: CatalogItem,
    query: PreferenceQuery,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> float:
    """Blend a boosted score with popularity, rating and budget fit."""
    confidence = score
    confidence += item.popularity * POPULARITY_WEIGHT
    confidence += (item.rating - RATING_BASELINE) * RATING_WEIGHT

    if is_budget_range(query.price_range) and item.price > config.budget_price_ceiling:
        confidence -= config.budget_penalty

    return clamp(confidence)
