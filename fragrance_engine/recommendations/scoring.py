"""
Rule-based scoring.

Each catalog item earns points for five weighted factors, summed and
clamped to 100:

* season match       25
* occasion match     20
* intensity closeness 15  (``max(0, 15 - |diff| / 10)``)
* favourite notes    30  (share of favourites matched by the item's notes)
* price fit          10

A missing preference field contributes zero to its factor.
"""
from __future__ import annotations

from collections.abc import Iterable

from ..catalog.models import CatalogItem
from ..config import DEFAULT_ENGINE_CONFIG, EngineConfig
from ..profiles.models import PreferenceQuery
from .errors import ComputationFault
from .models import ScoredCandidate

SEASON_WEIGHT = 25.0
OCCASION_WEIGHT = 20.0
INTENSITY_WEIGHT = 15.0
NOTES_WEIGHT = 30.0
PRICE_WEIGHT = 10.0

_STRONG_INTENSITY = 10.0


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def normalize_occasion(occasion: str) -> str:
    return occasion.strip().lower().replace(" ", "_")


def matching_notes(item_notes: Iterable[str], favorite_notes: Iterable[str]) -> list[str]:
    """Item notes that contain, or are contained in, any favourite note."""
    favorites = [f.lower() for f in favorite_notes if f]
    matches: list[str] = []
    for note in item_notes:
        lowered = note.lower()
        if any(lowered in fav or fav in lowered for fav in favorites):
            matches.append(note)
    return matches


class RuleScorer:
    def __init__(self, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> None:
        self.config = config

    def price_score(self, price: float, price_range: str) -> float:
        return PRICE_WEIGHT if self.config.price_bracket(price_range).contains(price) else 0.0

    def score_item(self, item: CatalogItem, query: PreferenceQuery) -> ScoredCandidate:
        score = 0.0
        factors: list[str] = []

        if query.season and query.season.lower() in item.seasons:
            score += SEASON_WEIGHT
            factors.append(f"Perfect for {query.season}")

        if query.occasion and normalize_occasion(query.occasion) in item.occasions:
            score += OCCASION_WEIGHT
            factors.append(f"Ideal for {query.occasion}")

        intensity_score = max(0.0, INTENSITY_WEIGHT - abs(item.intensity - query.intensity) / 10)
        score += intensity_score
        if intensity_score > _STRONG_INTENSITY:
            factors.append("Perfect intensity level")

        if query.favorite_notes:
            matches = matching_notes(item.notes, query.favorite_notes)
            score += len(matches) / len(query.favorite_notes) * NOTES_WEIGHT
            if matches:
                factors.append(f"Contains your favorite {', '.join(matches)} notes")

        if query.price_range:
            price_score = self.price_score(item.price, query.price_range)
            score += price_score
            if price_score > PRICE_WEIGHT / 2:
                factors.append("Within your budget")

        return ScoredCandidate(item=item, score=clamp(score), matching_factors=tuple(factors))

    def score(self, query: PreferenceQuery, catalog: Iterable[CatalogItem]) -> list[ScoredCandidate]:
        """Score every item, in catalog order."""
        items = list(catalog)
        if not items:
            raise ComputationFault("Cannot score an empty catalog")
        return [self.score_item(item, query) for item in items]

    def candidates(self, query: PreferenceQuery, catalog: Iterable[CatalogItem]) -> list[ScoredCandidate]:
        """Scored items above the rule threshold; the rest are out for this request."""
        threshold = self.config.score_threshold
        return [c for c in self.score(query, catalog) if c.score > threshold]
