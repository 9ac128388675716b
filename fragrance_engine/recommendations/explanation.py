from __future__ import annotations

from collections.abc import Iterable

from ..catalog.models import CatalogItem

HIGH_RATING = 4.5
HIGH_POPULARITY = 0.8
NOTABLE_BOOST = 5.0


def compose_explanation(
    matching_factors: Iterable[str],
    item: CatalogItem,
    collaborative_boost: float = 0.0,
) -> str:
    parts = list(matching_factors)
    if item.rating >= HIGH_RATING:
        parts.append("Highly rated by customers")
    if item.popularity > HIGH_POPULARITY:
        parts.append("Popular choice among users")
    if collaborative_boost > NOTABLE_BOOST:
        parts.append("Loved by users with similar preferences")
    return ". ".join(parts) + "."
