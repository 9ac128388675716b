from __future__ import annotations

from collections import Counter
from collections.abc import Mapping

import pandas as pd

from ..catalog.models import Catalog, CatalogItem
from ..profiles.store import ProfileStore


def trending_items(
    catalog: Catalog,
    profiles: ProfileStore,
    interaction_weights: Mapping[str, float],
    limit: int = 5,
) -> list[tuple[CatalogItem, float]]:
    """Rank the catalog by popularity plus recorded interest from all users.

    ``trend_score = popularity * 100 + sum of interaction weights``.
    Ties keep catalog order.
    """
    if len(catalog) == 0 or limit < 1:
        return []

    activity: Counter[int] = Counter()
    for profile in profiles:
        for interaction in profile.interactions:
            activity[interaction.item_id] += interaction_weights.get(interaction.kind.value, 0.0)

    df = pd.DataFrame({
        "position": range(len(catalog)),
        "popularity": [item.popularity for item in catalog],
        "activity": [activity[item.id] for item in catalog],
    })
    df["trend_score"] = df["popularity"] * 100 + df["activity"]
    top = df.sort_values("trend_score", ascending=False, kind="stable").head(limit)

    return [
        (catalog.items[int(row["position"])], round(float(row["trend_score"]), 2))
        for _, row in top.iterrows()
    ]
